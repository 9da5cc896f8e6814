from doctransform.extraction.factory import PdfExtractorFactory, TextExtractorFactory
from doctransform.extraction.scan_classifier import is_scanned_document
from doctransform.extraction.text_extractor import TextExtractor

__all__ = [
    "PdfExtractorFactory",
    "TextExtractor",
    "TextExtractorFactory",
    "is_scanned_document",
]
