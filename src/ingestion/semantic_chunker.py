"""Word-count bounded chunker with one embedding per chunk."""

import logging
import math
import re

from src.embedding.provider import EmbeddingProvider
from src.ingestion.cleaner import normalize_text
from src.models.chunk import SemanticChunk
from src.models.document import ExtractedPage, SourceDocument

logger = logging.getLogger(__name__)

# Capturing group keeps the whitespace so chunks reassemble exactly
_WHITESPACE_SPLIT = re.compile(r"(\s+)")

# Fields SemanticChunk carries explicitly rather than in its extra mapping
_OWN_FIELDS = {"source", "page_number", "extraction_method", "token_count", "word_count"}


def estimate_tokens(text: str) -> int:
    """Cheap token estimate (~4 chars per token), not a real tokenizer."""
    return math.ceil(len(text) / 4)


def count_words(text: str) -> int:
    return len(text.split())


class SemanticChunker:
    """Splits documents into chunks of at least min_words words.

    The final chunk of a document may be shorter than min_words. Each
    chunk is embedded on its own, so batching inside the embedding client
    never changes chunk boundaries.

    max_tokens and similarity_threshold are carried as configuration only;
    the word-count algorithm does not consult them.
    """

    def __init__(
        self,
        embedder: EmbeddingProvider,
        min_words: int = 300,
        max_tokens: int = 1500,
        similarity_threshold: float = 0.5,
    ):
        if min_words < 1:
            raise ValueError("min_words must be >= 1")
        self._embedder = embedder
        self.min_words = min_words
        self.max_tokens = max_tokens
        self.similarity_threshold = similarity_threshold

    def split_text(self, text: str) -> list[str]:
        """Cut text into word-bounded pieces without embedding them."""
        chunks = []
        buffer = ""
        words = 0

        for part in _WHITESPACE_SPLIT.split(text):
            buffer += part
            if part and not part.isspace():
                words += 1

            if words >= self.min_words:
                chunks.append(buffer.strip())
                buffer = ""
                words = 0

        if buffer.strip():
            chunks.append(buffer.strip())

        return chunks

    def split_documents(self, documents: list[SourceDocument]) -> list[SemanticChunk]:
        """Chunk and embed each document; chunks never span documents."""
        all_chunks = []

        for doc in documents:
            text = normalize_text(doc.text)
            pieces = self.split_text(text)
            if not pieces:
                logger.debug("No text left after normalization for %s", doc.source or doc.id)
                continue

            extra = {k: v for k, v in doc.metadata.items() if k not in _OWN_FIELDS}
            for piece in pieces:
                embedding = self._embedder.embed([piece])[0]
                all_chunks.append(
                    SemanticChunk(
                        page_content=piece,
                        embedding=embedding,
                        token_count=estimate_tokens(piece),
                        word_count=count_words(piece),
                        source=doc.metadata.get("source", doc.source),
                        page_number=doc.metadata.get("page_number"),
                        extraction_method=doc.metadata.get("extraction_method"),
                        extra=dict(extra),
                    )
                )

            logger.info("Chunked %s into %d chunks", doc.source or doc.id, len(pieces))

        return all_chunks

    def chunk_text(
        self,
        text: str,
        source: str | None = None,
        metadata: dict | None = None,
    ) -> list[SemanticChunk]:
        return self.split_documents([SourceDocument(text=text, source=source, metadata=metadata or {})])

    def chunk_pages(self, pages: list[ExtractedPage], source: str | None = None) -> list[SemanticChunk]:
        """Per-page variant: every page is segmented and embedded on its own."""
        documents = [
            SourceDocument(
                text=page.text,
                source=source,
                metadata={
                    "type": "pdf",
                    "page_number": page.page_number,
                    "extraction_method": page.extraction_method,
                },
            )
            for page in pages
        ]
        return self.split_documents(documents)


def count_unique_pages(chunks: list[SemanticChunk]) -> int:
    """Number of distinct pages that contributed at least one chunk."""
    return len({c.page_number for c in chunks if c.page_number})
