"""CLI command for chunking a document."""

import logging
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from config.settings import get_settings
from src.embedding.config import get_embedding_provider
from src.errors import DocChunkError
from src.ingestion.agentic_chunker import AgenticChunker
from src.ingestion.pdf_extractor import PdfExtractor
from src.ingestion.pipeline import run_ingestion
from src.ingestion.semantic_chunker import SemanticChunker, count_unique_pages
from src.llm.client import get_completion_client
from src.models.enums import ChunkingStrategy
from src.vectorstore.chroma_store import ChromaStore

console = Console()
app = typer.Typer()


@app.command()
def chunk(
    path: Annotated[
        Path,
        typer.Argument(help="Text (.txt, .md) or PDF file to chunk", exists=True, dir_okay=False),
    ],
    strategy: Annotated[
        ChunkingStrategy,
        typer.Option("--strategy", "-s", help="Chunking strategy"),
    ] = ChunkingStrategy.SEMANTIC,
    store: Annotated[
        bool,
        typer.Option("--store/--no-store", help="Persist chunks in the vector store"),
    ] = True,
    save_chunks: Annotated[
        bool,
        typer.Option("--save-chunks", help="Save a chunk debug file"),
    ] = False,
    show_actions: Annotated[
        bool,
        typer.Option("--show-actions", help="Print the agentic chunker's action log"),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Chunk a document and embed every chunk."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()

    console.print("[bold]DocChunk[/bold]")
    console.print(f"File: {path}")
    console.print(f"Strategy: {strategy.value}")
    console.print()

    try:
        embedder = get_embedding_provider(settings)
        completion = get_completion_client(settings) if strategy is ChunkingStrategy.AGENTIC else None

        with Progress(
            SpinnerColumn(),
            TextColumn("[progress.description]{task.description}"),
            console=console,
        ) as progress:
            task = progress.add_task(f"Chunking {path.name}...", total=None)
            if store:
                chroma = ChromaStore(path=str(settings.chroma_path))
                result = run_ingestion(
                    path,
                    strategy,
                    chroma,
                    embedder,
                    completion=completion,
                    settings=settings,
                    save_chunks=save_chunks,
                )
                rows = chroma.get_document_chunks(result["document_id"]) if result["document_id"] else []
            else:
                result, rows = _chunk_without_store(path, strategy, embedder, completion, settings)
            progress.update(task, completed=True)
    except (DocChunkError, ValueError) as e:
        console.print(f"[bold red]Chunking failed:[/bold red] {e}")
        raise typer.Exit(1)

    if result.get("skipped"):
        console.print(f"[yellow]{path.name} is already stored with the {strategy.value} strategy, skipping.[/yellow]")
        return

    _print_chunks(rows)

    if show_actions and result.get("actions"):
        console.print()
        console.print("[bold]Actions[/bold]")
        for action in result["actions"]:
            console.print(f"  {action}")

    console.print()
    console.print("[bold green]Chunking complete![/bold green]")
    console.print(f"  Chunks: {len(rows)}")
    if result.get("pages"):
        console.print(f"  Pages: {result['pages']}")
    if result.get("document_id"):
        console.print(f"  Document id: {result['document_id']}")


def _chunk_without_store(path, strategy, embedder, completion, settings) -> tuple[dict, list[dict]]:
    """Chunk in memory and shape rows like the store's output."""
    is_pdf = path.suffix.lower() == ".pdf"
    pages = []
    if is_pdf:
        pages = PdfExtractor.from_settings(settings).extract(path)

    if strategy is ChunkingStrategy.SEMANTIC:
        chunker = SemanticChunker(embedder, **settings.semantic_options())
        if is_pdf:
            chunks = chunker.chunk_pages(pages, source=path.name)
        else:
            chunks = chunker.chunk_text(path.read_text(encoding="utf-8", errors="replace"), source=path.name)
        rows = [{"text": c.page_content, "metadata": c.metadata} for c in chunks]
        return {"document_id": None, "pages": count_unique_pages(chunks)}, rows

    chunker = AgenticChunker(completion, embedder, **settings.agentic_options())
    if is_pdf:
        rendered = chunker.process_pages(pages, source=path.name)
    else:
        rendered = chunker.process_document(path.read_text(encoding="utf-8", errors="replace"))
    rows = [
        {"text": "\n".join(c["propositions"]), "metadata": {"title": c["title"], "chunk_id": c["chunk_id"]}}
        for c in rendered
    ]
    return {"document_id": None, "pages": len(pages), "actions": chunker.last_run.actions.to_list()}, rows


def _print_chunks(rows: list[dict]) -> None:
    table = Table(title="Chunks")
    table.add_column("#", justify="right")
    table.add_column("Label")
    table.add_column("Preview")

    for i, row in enumerate(rows, start=1):
        meta = row.get("metadata", {})
        label = meta.get("title") or (f"page {meta['page_number']}" if meta.get("page_number") else "")
        preview = row["text"].replace("\n", " ")
        table.add_row(str(i), label, preview[:80] + ("..." if len(preview) > 80 else ""))

    console.print(table)
