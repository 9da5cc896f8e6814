from collections.abc import Iterator
from typing import Any

import pymupdf

from doctransform.extraction.base import BaseTextExtractor
from doctransform.extraction.paragraphs import TextLine, join_paragraphs, paragraphs_from_lines
from doctransform.processor.exceptions import ExtractionError

_TEXT_BLOCK = 0


def _page_lines(page: Any) -> Iterator[TextLine]:
    for block in page.get_text("dict")["blocks"]:
        if block.get("type") != _TEXT_BLOCK:
            continue
        for line in block["lines"]:
            spans = line["spans"]
            if not spans:
                continue
            x0, top, _x1, _bottom = line["bbox"]
            yield TextLine(
                text="".join(span["text"] for span in spans),
                top=float(top),
                x0=float(x0),
                size=max(float(span["size"]) for span in spans),
            )


class PyMuPdfAdapter(BaseTextExtractor):
    """Extracts text from PDF using PyMuPDF, grouping lines into paragraphs by spacing."""

    def extract(self, content: bytes) -> str:
        try:
            with pymupdf.open(stream=content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
                paragraphs = [
                    paragraph
                    for page in doc
                    for paragraph in paragraphs_from_lines(_page_lines(page))
                ]
        except Exception as exc:
            raise ExtractionError(f"pymupdf extraction failed: {exc}") from exc
        return join_paragraphs(paragraphs)
