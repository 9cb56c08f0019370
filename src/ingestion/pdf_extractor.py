"""PDF page text extraction with backend fallback.

Backends:
- pymupdf: the PDF's own text layer via PyMuPDF
- tesseract: pages rendered with PyMuPDF and read by Tesseract OCR
"""

import io
import logging
from pathlib import Path

import fitz  # PyMuPDF
import pytesseract
from PIL import Image

from config.settings import Settings, get_settings
from src.errors import ExtractionError
from src.ingestion.cleaner import normalize_text
from src.models.document import ExtractedPage
from src.models.enums import ExtractionMethod

logger = logging.getLogger(__name__)

DEFAULT_FALLBACKS = [ExtractionMethod.PYMUPDF, ExtractionMethod.TESSERACT]


def extract_with_pymupdf(path: Path) -> list[ExtractedPage]:
    """Read the embedded text layer of every page."""
    pages = []
    with fitz.open(str(path)) as doc:
        for index, page in enumerate(doc, start=1):
            text = normalize_text(page.get_text())
            if text:
                pages.append(ExtractedPage(index, text, ExtractionMethod.PYMUPDF.label))
    return pages


def extract_with_tesseract(path: Path, dpi: int = 300) -> list[ExtractedPage]:
    """Rasterize every page and OCR it."""
    pages = []
    with fitz.open(str(path)) as doc:
        for index, page in enumerate(doc, start=1):
            pix = page.get_pixmap(dpi=dpi)
            image = Image.open(io.BytesIO(pix.tobytes("png")))
            text = normalize_text(pytesseract.image_to_string(image))
            if text:
                pages.append(ExtractedPage(index, text, ExtractionMethod.TESSERACT.label))
    return pages


class PdfExtractor:
    """Tries the preferred backend, then the fallbacks in order.

    A backend that raises or yields no text hands over to the next one.
    Empty pages are skipped; surviving pages keep their physical number.
    """

    def __init__(
        self,
        method: ExtractionMethod | str = ExtractionMethod.TESSERACT,
        fallbacks: list[ExtractionMethod | str] | None = None,
        ocr_dpi: int = 300,
    ):
        self.method = ExtractionMethod(method)
        self.fallbacks = [ExtractionMethod(m) for m in (fallbacks if fallbacks is not None else DEFAULT_FALLBACKS)]
        self.ocr_dpi = ocr_dpi

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "PdfExtractor":
        """Build an extractor from the configured method, fallbacks and OCR resolution."""
        settings = settings or get_settings()
        return cls(
            method=settings.docchunk_extraction_method,
            fallbacks=settings.docchunk_extraction_fallbacks,
            ocr_dpi=settings.docchunk_ocr_dpi,
        )

    @property
    def order(self) -> list[ExtractionMethod]:
        """Preferred method first, then fallbacks without repeats."""
        order = [self.method]
        for method in self.fallbacks:
            if method not in order:
                order.append(method)
        return order

    def extract(self, path: str | Path) -> list[ExtractedPage]:
        path = Path(path)
        errors = []

        for method in self.order:
            try:
                pages = self._run(method, path)
            except Exception as e:
                logger.warning("%s extraction failed for %s: %s", method.value, path.name, e)
                errors.append(f"{method.value}: {e}")
                continue

            if pages:
                logger.info("Extracted %d pages from %s with %s", len(pages), path.name, method.value)
                return pages
            logger.info("%s found no text in %s", method.value, path.name)
            errors.append(f"{method.value}: no text")

        raise ExtractionError(
            f"Failed to extract text from {path.name} using all available methods ({'; '.join(errors)})"
        )

    def _run(self, method: ExtractionMethod, path: Path) -> list[ExtractedPage]:
        if method is ExtractionMethod.PYMUPDF:
            return extract_with_pymupdf(path)
        return extract_with_tesseract(path, dpi=self.ocr_dpi)
