import io

import docx

from doctransform.encoding.base import BaseFormatEncoder, xml_safe
from doctransform.extraction.paragraphs import split_paragraphs
from doctransform.processor.exceptions import EncodingError


class DocxEncoder(BaseFormatEncoder):
    """Writes text into a Word document with python-docx."""

    def encode(self, text: str, preserve_structure: bool) -> bytes:
        text = xml_safe(text)
        try:
            document = docx.Document()
            if preserve_structure:
                for paragraph in split_paragraphs(text):
                    document.add_paragraph(paragraph)
            elif text.strip():
                # Newlines become line breaks inside a single paragraph.
                document.add_paragraph(text)
            buf = io.BytesIO()
            document.save(buf)
        except Exception as exc:
            raise EncodingError(f"docx encoding failed: {exc}") from exc
        return buf.getvalue()
