import io

import docx

from doctransform.extraction.base import BaseTextExtractor
from doctransform.extraction.paragraphs import join_paragraphs
from doctransform.processor.exceptions import ExtractionError


class DocxAdapter(BaseTextExtractor):
    """Extracts paragraphs, then table rows, from a Word document."""

    def extract(self, content: bytes) -> str:
        try:
            document = docx.Document(io.BytesIO(content))
            paragraphs = [p.text for p in document.paragraphs]
            for table in document.tables:
                for row in table.rows:
                    paragraphs.append("\t".join(cell.text.strip() for cell in row.cells))
        except Exception as exc:
            raise ExtractionError(f"docx extraction failed: {exc}") from exc
        return join_paragraphs(paragraphs)
