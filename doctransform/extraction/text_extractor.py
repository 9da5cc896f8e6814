from collections.abc import Mapping, Sequence

from doctransform.extraction.base import BaseTextExtractor
from doctransform.extraction.ocr import PdfOcrExtractor
from doctransform.processor.exceptions import UnsupportedFormatError
from doctransform.processor.models import FileType, Language, parse_file_type


class TextExtractor:
    """Routes a document to OCR or to the structural extractor for its type."""

    def __init__(
        self,
        extractors: Mapping[FileType, BaseTextExtractor],
        ocr: PdfOcrExtractor,
    ) -> None:
        self._extractors = dict(extractors)
        self._ocr = ocr

    def extract(
        self,
        content: bytes,
        file_type: FileType | str,
        is_scan: bool,
        ocr_languages: Sequence[Language] = (),
    ) -> str:
        """Extract plain text, paragraphs separated by a blank line.

        Raises:
            UnsupportedFormatError: if no extractor handles this file type.
            ExtractionError: if the content is unreadable or OCR fails.
        """
        file_type = parse_file_type(file_type)
        if is_scan and file_type is FileType.PDF:
            return self._ocr.extract(content, ocr_languages)
        extractor = self._extractors.get(file_type)
        if extractor is None:
            raise UnsupportedFormatError(
                f"Text extraction is not supported for '{file_type.value}' files"
            )
        return extractor.extract(content)
