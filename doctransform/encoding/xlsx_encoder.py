import io

import openpyxl
from openpyxl.styles import Alignment

from doctransform.encoding.base import BaseFormatEncoder, xml_safe
from doctransform.extraction.paragraphs import split_paragraphs
from doctransform.processor.exceptions import EncodingError

SHEET_TITLE = "Document"
COLUMN_WIDTH = 100


class XlsxEncoder(BaseFormatEncoder):
    """Writes text into column A of a single worksheet, one row per paragraph."""

    def encode(self, text: str, preserve_structure: bool) -> bytes:
        text = xml_safe(text)
        if preserve_structure:
            rows = split_paragraphs(text)
        else:
            rows = [text] if text.strip() else []
        try:
            workbook = openpyxl.Workbook()
            sheet = workbook.active
            sheet.title = SHEET_TITLE
            sheet.column_dimensions["A"].width = COLUMN_WIDTH
            for row in rows:
                sheet.append([row])
                sheet.cell(row=sheet.max_row, column=1).alignment = Alignment(wrap_text=True)
            buf = io.BytesIO()
            workbook.save(buf)
        except Exception as exc:
            raise EncodingError(f"xlsx encoding failed: {exc}") from exc
        return buf.getvalue()
