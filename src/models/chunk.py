"""Chunk data models for the semantic and agentic pipelines."""

from dataclasses import dataclass, field


@dataclass(frozen=True)
class SemanticChunk:
    """A contiguous, word-bounded slice of a document with its embedding."""

    page_content: str
    embedding: list[float]
    token_count: int
    word_count: int
    source: str | None = None
    page_number: int | None = None
    extraction_method: str | None = None
    extra: dict = field(default_factory=dict)

    def __post_init__(self):
        if not self.page_content:
            raise ValueError("page_content must not be empty")
        if self.token_count <= 0:
            raise ValueError("token_count must be > 0")

    @property
    def metadata(self) -> dict:
        """Caller metadata with the chunk's own fields layered on top."""
        meta = dict(self.extra)
        if self.source is not None:
            meta["source"] = self.source
        if self.page_number is not None:
            meta["page_number"] = self.page_number
        if self.extraction_method is not None:
            meta["extraction_method"] = self.extraction_method
        meta["token_count"] = self.token_count
        meta["word_count"] = self.word_count
        return meta

    def to_dict(self) -> dict:
        return {
            "page_content": self.page_content,
            "embedding": self.embedding,
            "metadata": self.metadata,
        }


@dataclass
class AgenticChunk:
    """A topic group of propositions maintained by the agentic chunker.

    title, summary and embedding are recomputed every time a proposition
    is appended; embedding always covers all current propositions.
    """

    chunk_id: str
    title: str
    summary: str
    propositions: list[str]
    creation_index: int
    embedding: list[float]
    metadata: dict = field(default_factory=dict)

    @property
    def text(self) -> str:
        return "\n".join(self.propositions)

    @property
    def proposition_count(self) -> int:
        return len(self.propositions)

    def to_dict(self) -> dict:
        rendered = {
            "chunk_id": self.chunk_id,
            "title": self.title.strip(),
            "summary": self.summary.strip(),
            "propositions": list(self.propositions),
            "proposition_count": self.proposition_count,
            "embedding": self.embedding,
            "embedding_dimensions": len(self.embedding),
        }
        if self.metadata:
            rendered["metadata"] = dict(self.metadata)
        return rendered


Chunk = SemanticChunk | AgenticChunk


@dataclass(frozen=True)
class RouteDecision:
    """Outcome of asking the classifier where a proposition belongs."""

    chunk_id: str | None
    raw_response: str = ""

    @property
    def is_match(self) -> bool:
        return self.chunk_id is not None
