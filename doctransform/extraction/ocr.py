"""OCR backend for image-based (scanned) PDFs.

Pages are rendered to raster images with PyMuPDF, then recognised with
Tesseract. Language hints are passed to Tesseract as ``eng+rus+uzb``.
"""

import io
from abc import ABC, abstractmethod
from collections.abc import Iterator, Sequence

import pymupdf
import pytesseract
from PIL import Image

from doctransform.extraction.paragraphs import join_paragraphs, split_paragraphs
from doctransform.logging.logger import Log
from doctransform.processor.exceptions import ExtractionError
from doctransform.processor.models import Language

DEFAULT_OCR_LANGUAGE = Language.ENGLISH


class BaseOcrEngine(ABC):
    """Contract for OCR engines working on a single page image."""

    @abstractmethod
    def recognize(self, image: Image.Image, languages: Sequence[Language]) -> str:
        """Return the text recognised on one page.

        Raises:
            ExtractionError: if the engine is unavailable or fails.
        """


class TesseractOcrEngine(BaseOcrEngine):
    """OCR through the tesseract binary via pytesseract."""

    def __init__(self, tesseract_cmd: str = "") -> None:
        if tesseract_cmd:
            pytesseract.pytesseract.tesseract_cmd = tesseract_cmd

    def recognize(self, image: Image.Image, languages: Sequence[Language]) -> str:
        lang = "+".join(language.value for language in languages) or DEFAULT_OCR_LANGUAGE.value
        try:
            return pytesseract.image_to_string(image, lang=lang)
        except pytesseract.TesseractNotFoundError as exc:
            raise ExtractionError("tesseract is not installed or not on PATH") from exc
        except (pytesseract.TesseractError, RuntimeError) as exc:
            raise ExtractionError(f"tesseract OCR failed: {exc}") from exc


class PdfOcrExtractor:
    """Renders PDF pages one at a time and runs OCR on each."""

    def __init__(self, engine: BaseOcrEngine, dpi: int = 300) -> None:
        self._engine = engine
        self._dpi = dpi

    def extract(self, content: bytes, languages: Sequence[Language]) -> str:
        paragraphs: list[str] = []
        for number, image in enumerate(self._render_pages(content), start=1):
            with image:
                page_text = self._engine.recognize(image, languages)
            Log.debug(f"OCR page {number}: {len(page_text)} chars")
            paragraphs.extend(split_paragraphs(page_text))
        return join_paragraphs(paragraphs)

    def _render_pages(self, content: bytes) -> Iterator[Image.Image]:
        """Yield page images lazily so only one rendered page is held at a time."""
        try:
            doc = pymupdf.open(stream=content, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise ExtractionError(f"cannot render PDF pages for OCR: {exc}") from exc
        with doc:
            for page in doc:
                try:
                    png = page.get_pixmap(dpi=self._dpi).tobytes("png")
                except Exception as exc:
                    raise ExtractionError(
                        f"cannot render PDF page {page.number + 1} for OCR: {exc}"
                    ) from exc
                yield Image.open(io.BytesIO(png))
