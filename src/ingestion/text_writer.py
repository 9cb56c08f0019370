"""Save chunks to a human-readable debug file."""

import logging
from pathlib import Path

from src.models.chunk import AgenticChunk, Chunk, SemanticChunk

logger = logging.getLogger(__name__)


def format_chunks(chunks: list[Chunk]) -> str:
    """Render chunks as text, one '# Chunk N | ...' header per chunk."""
    content = ""
    for i, chunk in enumerate(chunks, start=1):
        if isinstance(chunk, SemanticChunk):
            page = chunk.page_number if chunk.page_number is not None else "N/A"
            header = f"# Chunk {i} | Page: {page}"
            body = chunk.page_content
        elif isinstance(chunk, AgenticChunk):
            header = f"# Chunk {i} | {chunk.title.strip()}"
            body = "\n".join(f"- {p}" for p in chunk.propositions)
        else:
            raise TypeError(f"Unsupported chunk type: {type(chunk).__name__}")
        body = body.replace("•", "-")
        content += f"\n\n{header}\n{body}\n"
    return content


def save_chunks_text(chunks: list[Chunk], target: Path) -> Path | None:
    """Write chunks to target for inspection.

    Returns the Path to the written file, or None if the write failed.
    """
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(format_chunks(chunks), encoding="utf-8")
        logger.info("Saved chunks file: %s", target)
        return target
    except OSError as e:
        logger.warning("Failed to write chunks file %s: %s", target, e)
        return None
