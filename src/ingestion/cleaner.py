"""Text normalization shared by both chunkers and the PDF extractor."""

import re

from src.errors import NormalizationError

# C0 controls except \t \n \r, plus DEL
_CONTROL_CHARS = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")


def normalize_text(raw: str | bytes) -> str:
    """Sanitize raw extracted text into canonical form.

    Repairs invalid encoding best-effort, drops control characters,
    unifies line endings and collapses whitespace while keeping
    paragraph breaks. normalize_text(normalize_text(x)) == normalize_text(x).
    """
    text = _force_utf8(raw)

    text = text.replace("\0", "")
    text = _CONTROL_CHARS.sub("", text)
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _normalize_whitespace(text)

    return text.strip()


def split_paragraphs(text: str) -> list[str]:
    """Split text on blank lines into trimmed, non-empty paragraphs."""
    return [p.strip() for p in text.split("\n\n") if p.strip()]


def _force_utf8(raw: str | bytes) -> str:
    if isinstance(raw, bytes):
        return raw.decode("utf-8", errors="replace")
    if isinstance(raw, str):
        # Lone surrogates survive str but not a UTF-8 round trip
        return raw.encode("utf-8", errors="replace").decode("utf-8")
    raise NormalizationError(f"Cannot normalize {type(raw).__name__}, expected str or bytes")


def _normalize_whitespace(text: str) -> str:
    """Normalize whitespace while preserving paragraph breaks."""
    # Replace multiple spaces/tabs with a single space
    text = re.sub(r"[ \t]+", " ", text)
    # Replace 3+ newlines with a paragraph break
    text = re.sub(r"\n{3,}", "\n\n", text)
    return text
