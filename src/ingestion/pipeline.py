"""Ingestion pipeline orchestrator.

Wires together: extractor/reader → normalizer → chunker → embedding → chroma_store.
"""

import logging
import uuid
from pathlib import Path

from config.settings import Settings, get_settings
from src.embedding.provider import EmbeddingProvider
from src.ingestion.agentic_chunker import AgenticChunker
from src.ingestion.pdf_extractor import PdfExtractor
from src.ingestion.semantic_chunker import SemanticChunker
from src.ingestion.text_writer import save_chunks_text
from src.llm.client import CompletionClient
from src.llm.throttle import CancellationToken
from src.models.enums import ChunkingStrategy
from src.vectorstore.chroma_store import ChromaStore

logger = logging.getLogger(__name__)

TEXT_SUFFIXES = {".txt", ".md"}


def run_ingestion(
    path: str | Path,
    strategy: ChunkingStrategy | str,
    store: ChromaStore,
    embedder: EmbeddingProvider,
    completion: CompletionClient | None = None,
    pdf_extractor: PdfExtractor | None = None,
    settings: Settings | None = None,
    save_chunks: bool = False,
    cancel_token: CancellationToken | None = None,
) -> dict:
    """Chunk one file and store its chunks.

    Steps:
    1. Skip the file if it was already stored with this strategy
    2. Read text, or extract PDF pages
    3. Chunk with the requested strategy
    4. Store chunks under a fresh document id

    A failure after chunks were written removes that document's rows
    before re-raising, so nothing partial stays in the store.

    Returns a summary dict.
    """
    settings = settings or get_settings()
    strategy = ChunkingStrategy(strategy)
    path = Path(path)
    source = path.name
    source_path = str(path.resolve())

    if store.has_document(source_path, strategy):
        logger.info("Skipping duplicate: %s (%s)", source_path, strategy.value)
        return {"document_id": None, "strategy": strategy.value, "chunks_stored": 0, "pages": 0, "skipped": True, "actions": []}

    is_pdf = path.suffix.lower() == ".pdf"
    pages = []
    actions = []
    if is_pdf:
        if pdf_extractor is None:
            pdf_extractor = PdfExtractor.from_settings(settings)
        pages = pdf_extractor.extract(path)
    elif path.suffix.lower() not in TEXT_SUFFIXES:
        raise ValueError(f"Unsupported file type: {path.suffix}")

    if strategy is ChunkingStrategy.SEMANTIC:
        chunker = SemanticChunker(embedder, **settings.semantic_options())
        if is_pdf:
            chunks = chunker.chunk_pages(pages, source=source)
        else:
            chunks = chunker.chunk_text(path.read_text(encoding="utf-8", errors="replace"), source=source)
    else:
        if completion is None:
            raise ValueError("Agentic chunking requires a completion client")
        chunker = AgenticChunker(completion, embedder, **settings.agentic_options())
        if is_pdf:
            chunker.process_pages(pages, source=source, cancel_token=cancel_token)
        else:
            chunker.process_document(path.read_text(encoding="utf-8", errors="replace"), cancel_token=cancel_token)
        chunks = chunker.last_run.get_chunks()
        actions = chunker.last_run.actions.to_list()

    if not chunks:
        logger.warning("No chunks produced for %s", source)
        return {
            "document_id": None,
            "strategy": strategy.value,
            "chunks_stored": 0,
            "pages": len(pages),
            "skipped": False,
            "actions": actions,
        }

    document_id = str(uuid.uuid4())
    try:
        n_stored = store.add_chunks(
            chunks, document_id=document_id, strategy=strategy, source=source, source_path=source_path
        )
    except Exception:
        logger.error("Storing chunks for %s failed, rolling back", source)
        store.delete_document(document_id)
        raise

    if save_chunks:
        save_chunks_text(chunks, settings.text_path / f"{path.stem}.{strategy.value}.chunks.txt")

    logger.info("Ingested %s: %d %s chunks", source, n_stored, strategy.value)
    return {
        "document_id": document_id,
        "strategy": strategy.value,
        "chunks_stored": n_stored,
        "pages": len(pages),
        "skipped": False,
        "actions": actions,
    }
