"""CLI command for nearest-neighbour search over stored chunks."""

import logging
from typing import Annotated, Optional

import typer
from rich.console import Console
from rich.table import Table

from config.settings import get_settings
from src.embedding.config import get_embedding_provider
from src.errors import DocChunkError
from src.models.enums import ChunkingStrategy
from src.vectorstore.chroma_store import ChromaStore

console = Console()
app = typer.Typer()


@app.command()
def search(
    query: Annotated[
        str,
        typer.Argument(help="Text to search for"),
    ],
    top_k: Annotated[
        int,
        typer.Option("--top-k", "-k", help="Number of results", min=1, max=50),
    ] = 5,
    document_id: Annotated[
        Optional[str],
        typer.Option("--document-id", "-d", help="Only search one document"),
    ] = None,
    strategy: Annotated[
        Optional[ChunkingStrategy],
        typer.Option("--strategy", "-s", help="Only search chunks from one strategy"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
):
    """Find the stored chunks closest to a query."""
    if verbose:
        logging.basicConfig(level=logging.INFO)
    else:
        logging.basicConfig(level=logging.WARNING)

    settings = get_settings()
    store = ChromaStore(path=str(settings.chroma_path))

    if store.count == 0:
        console.print("[yellow]The vector store is empty. Run 'docchunk chunk' first.[/yellow]")
        raise typer.Exit(1)

    try:
        embedder = get_embedding_provider(settings)
        query_embedding = embedder.embed_query([query])[0]
    except DocChunkError as e:
        console.print(f"[bold red]Embedding failed:[/bold red] {e}")
        raise typer.Exit(1)

    results = store.query(query_embedding, top_k=top_k, document_id=document_id, strategy=strategy)

    table = Table(title=f"Top {len(results)} results")
    table.add_column("Similarity", justify="right")
    table.add_column("Strategy")
    table.add_column("Source")
    table.add_column("Text")

    for result in results:
        meta = result["metadata"]
        text = result["text"].replace("\n", " ")
        table.add_row(
            f"{1 - result['distance']:.3f}",
            meta.get("chunking_strategy", ""),
            meta.get("source", ""),
            text[:100] + ("..." if len(text) > 100 else ""),
        )

    console.print(table)
