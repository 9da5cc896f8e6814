import io

import openpyxl

from doctransform.extraction.base import BaseTextExtractor
from doctransform.extraction.paragraphs import join_paragraphs
from doctransform.processor.exceptions import ExtractionError


class XlsxAdapter(BaseTextExtractor):
    """Extracts one paragraph per non-empty row, sheets in workbook order."""

    def extract(self, content: bytes) -> str:
        try:
            workbook = openpyxl.load_workbook(io.BytesIO(content), read_only=True, data_only=True)
            try:
                rows = [
                    "\t".join(str(value) for value in row if value is not None)
                    for sheet in workbook.worksheets
                    for row in sheet.iter_rows(values_only=True)
                ]
            finally:
                workbook.close()
        except Exception as exc:
            raise ExtractionError(f"xlsx extraction failed: {exc}") from exc
        return join_paragraphs(rows)
