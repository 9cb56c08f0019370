"""Source document and extracted page data models."""

import uuid
from dataclasses import dataclass, field


@dataclass
class SourceDocument:
    """A unit of raw text handed to a chunker, with caller metadata."""

    text: str
    source: str | None = None
    metadata: dict = field(default_factory=dict)
    id: str = field(default_factory=lambda: str(uuid.uuid4()))


@dataclass(frozen=True)
class ExtractedPage:
    """Text of one PDF page as produced by an extraction backend."""

    page_number: int
    text: str
    extraction_method: str

    def __post_init__(self):
        if self.page_number < 1:
            raise ValueError("page_number must be >= 1")
        if not self.extraction_method:
            raise ValueError("extraction_method must not be empty")


@dataclass(frozen=True)
class TaggedProposition:
    """A proposition carrying the page it was extracted from."""

    text: str
    page_number: int | None = None
    extraction_method: str | None = None
