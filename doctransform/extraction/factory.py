from doctransform.config.settings import Settings
from doctransform.extraction.base import BaseTextExtractor
from doctransform.extraction.docx_adapter import DocxAdapter
from doctransform.extraction.ocr import PdfOcrExtractor, TesseractOcrEngine
from doctransform.extraction.pdfplumber_adapter import PdfPlumberAdapter
from doctransform.extraction.pymupdf_adapter import PyMuPdfAdapter
from doctransform.extraction.text_extractor import TextExtractor
from doctransform.extraction.xlsx_adapter import XlsxAdapter
from doctransform.processor.models import FileType


class PdfExtractorFactory:
    """Creates the correct PDF extractor based on settings."""

    ADAPTERS: dict[str, type[BaseTextExtractor]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BaseTextExtractor:
        engine = settings.pdf_engine.lower()
        adapter_cls = cls.ADAPTERS.get(engine)
        if adapter_cls is None:
            raise ValueError(
                f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ADAPTERS)}"
            )
        return adapter_cls()


class TextExtractorFactory:
    """Wires structural extractors and OCR into a TextExtractor."""

    @classmethod
    def create(cls, settings: Settings) -> TextExtractor:
        return TextExtractor(
            extractors={
                FileType.PDF: PdfExtractorFactory.create(settings),
                FileType.DOCX: DocxAdapter(),
                FileType.XLSX: XlsxAdapter(),
            },
            ocr=PdfOcrExtractor(
                TesseractOcrEngine(settings.tesseract_cmd),
                dpi=settings.ocr_dpi,
            ),
        )
