from collections.abc import Mapping

from doctransform.config.settings import Settings
from doctransform.encoding.base import BaseFormatEncoder
from doctransform.encoding.docx_encoder import DocxEncoder
from doctransform.encoding.pdf_encoder import PdfEncoder
from doctransform.encoding.xlsx_encoder import XlsxEncoder
from doctransform.processor.models import OutputFormat, parse_output_format


class FormatEncoder:
    """Serializes final text into the requested output format.

    Every OutputFormat member must have an encoder; there is no fallback
    format. Raw strings are validated here and rejected with
    UnsupportedFormatError.
    """

    def __init__(self, encoders: Mapping[OutputFormat, BaseFormatEncoder]) -> None:
        missing = set(OutputFormat) - set(encoders)
        if missing:
            raise ValueError(f"No encoder for formats: {sorted(f.value for f in missing)}")
        self._encoders = dict(encoders)

    def encode(self, text: str, output_format: OutputFormat | str, preserve_structure: bool) -> bytes:
        return self._encoders[parse_output_format(output_format)].encode(text, preserve_structure)


class FormatEncoderFactory:
    @classmethod
    def create(cls, settings: Settings) -> FormatEncoder:
        return FormatEncoder(
            {
                OutputFormat.PDF: PdfEncoder(font_path=settings.pdf_font_path),
                OutputFormat.DOCX: DocxEncoder(),
                OutputFormat.XLSX: XlsxEncoder(),
            }
        )
