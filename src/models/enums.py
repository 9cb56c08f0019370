"""Enumeration types for DocChunk data models."""

from enum import Enum


class ChunkingStrategy(str, Enum):
    SEMANTIC = "semantic"
    AGENTIC = "agentic"


class ExtractionMethod(str, Enum):
    PYMUPDF = "pymupdf"
    TESSERACT = "tesseract"

    @property
    def label(self) -> str:
        """Method name recorded on pages and chunks."""
        if self is ExtractionMethod.TESSERACT:
            return "tesseract_ocr"
        return self.value
