import io
from typing import Any

import pdfplumber

from doctransform.extraction.base import BaseTextExtractor
from doctransform.extraction.paragraphs import TextLine, join_paragraphs, paragraphs_from_lines
from doctransform.processor.exceptions import ExtractionError


def _line_size(line: dict[str, Any]) -> float:
    sizes = [char["size"] for char in line.get("chars", ())]
    return max(sizes) if sizes else float(line["bottom"] - line["top"])


class PdfPlumberAdapter(BaseTextExtractor):
    """Extracts text from PDF using pdfplumber.

    Paragraph boundaries are rebuilt from the vertical spacing between lines.
    """

    def extract(self, content: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                paragraphs = [
                    paragraph
                    for page in pdf.pages
                    for paragraph in paragraphs_from_lines(
                        TextLine(
                            text=line["text"],
                            top=float(line["top"]),
                            x0=float(line["x0"]),
                            size=_line_size(line),
                        )
                        for line in page.extract_text_lines()
                    )
                ]
        except Exception as exc:
            raise ExtractionError(f"pdfplumber extraction failed: {exc}") from exc
        return join_paragraphs(paragraphs)
