import pymupdf

from doctransform.processor.exceptions import ExtractionError
from doctransform.processor.models import FileType, parse_file_type

# Pages with fewer embedded characters than this count as having no text layer.
MIN_TEXT_CHARS_PER_PAGE = 16


def is_scanned_document(content: bytes, file_type: FileType | str) -> bool:
    """Decide whether a document needs OCR.

    Only pdf can be a scan. A pdf is a scan when no page carries a text
    layer and at least one page carries a raster image.

    Raises:
        ExtractionError: if pdf bytes cannot be opened.
    """
    if parse_file_type(file_type) is not FileType.PDF:
        return False
    try:
        with pymupdf.open(stream=content, filetype="pdf") as doc:  # type: ignore[no-untyped-call]
            if doc.page_count == 0:
                return False
            has_images = False
            for page in doc:
                if len(page.get_text().strip()) >= MIN_TEXT_CHARS_PER_PAGE:
                    return False
                has_images = has_images or bool(page.get_images(full=False))
    except Exception as exc:
        raise ExtractionError(f"cannot inspect PDF for scan detection: {exc}") from exc
    return has_images
