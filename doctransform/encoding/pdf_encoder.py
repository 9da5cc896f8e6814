import io
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFont
from reportlab.platypus import Flowable, Paragraph, Preformatted, SimpleDocTemplate, Spacer

from doctransform.encoding.base import BaseFormatEncoder
from doctransform.extraction.paragraphs import split_paragraphs
from doctransform.logging.logger import Log
from doctransform.processor.exceptions import EncodingError

DEFAULT_FONT = "Helvetica"
# Helvetica is a standard Type 1 font drawn with WinAnsi (cp1252) encoding.
DEFAULT_FONT_ENCODING = "cp1252"
CUSTOM_FONT = "DocumentFont"

# Unicode TTFs covering Latin and Cyrillic, tried in order when no font is configured.
FONT_CANDIDATES: tuple[str, ...] = (
    "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/dejavu/DejaVuSans.ttf",
    "/usr/share/fonts/TTF/DejaVuSans.ttf",
    "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/liberation/LiberationSans-Regular.ttf",
    "/usr/share/fonts/truetype/noto/NotoSans-Regular.ttf",
    "/usr/share/fonts/noto/NotoSans-Regular.ttf",
    "/Library/Fonts/Arial Unicode.ttf",
    "/System/Library/Fonts/Supplemental/Arial Unicode.ttf",
    "C:/Windows/Fonts/arial.ttf",
)


def find_unicode_font() -> str | None:
    """Return the first installed font from FONT_CANDIDATES, if any."""
    for candidate in FONT_CANDIDATES:
        if Path(candidate).is_file():
            return candidate
    return None


class PdfEncoder(BaseFormatEncoder):
    """Writes text into an A4 PDF using reportlab platypus.

    Without ``font_path`` a system Unicode TTF is looked up; if none is
    installed the built-in Helvetica is used, which only covers cp1252.
    Text with characters the active font cannot draw is rejected with
    EncodingError instead of being rendered as placeholder glyphs.
    """

    def __init__(self, font_path: str = "") -> None:
        font_path = font_path or find_unicode_font() or ""
        self._font_name = DEFAULT_FONT
        self._glyphs: frozenset[int] | None = None
        if font_path:
            font = TTFont(f"{CUSTOM_FONT}-{Path(font_path).stem.replace(' ', '')}", font_path)
            pdfmetrics.registerFont(font)
            self._font_name = font.fontName
            self._glyphs = frozenset(font.face.charToGlyph)
            Log.debug(f"PDF output font: {font_path}")
        else:
            Log.warning("No Unicode TTF found for PDF output; only cp1252 text can be encoded")
        self._style = ParagraphStyle(
            "Body",
            parent=getSampleStyleSheet()["Normal"],
            fontName=self._font_name,
            fontSize=11,
            leading=14,
            spaceAfter=8,
        )

    @property
    def font_name(self) -> str:
        return self._font_name

    def encode(self, text: str, preserve_structure: bool) -> bytes:
        self._check_coverage(text)
        buf = io.BytesIO()
        try:
            doc = SimpleDocTemplate(buf, pagesize=A4)
            doc.build(self._flowables(text, preserve_structure))
        except Exception as exc:
            raise EncodingError(f"pdf encoding failed: {exc}") from exc
        return buf.getvalue()

    def _check_coverage(self, text: str) -> None:
        missing = sorted({ch for ch in text if not ch.isspace() and not self._can_draw(ch)})
        if missing:
            sample = "".join(missing[:10])
            raise EncodingError(
                f"font '{self._font_name}' cannot draw {len(missing)} character(s) "
                f"such as '{sample}'; set PDF_FONT_PATH to a Unicode TTF"
            )

    def _can_draw(self, ch: str) -> bool:
        if self._glyphs is not None:
            return ord(ch) in self._glyphs
        try:
            ch.encode(DEFAULT_FONT_ENCODING)
        except UnicodeEncodeError:
            return False
        return True

    def _flowables(self, text: str, preserve_structure: bool) -> list[Flowable]:
        if not text.strip():
            return [Spacer(1, 1)]
        if not preserve_structure:
            return [Preformatted(text, self._style, maxLineLength=90)]
        return [
            Paragraph(escape(paragraph).replace("\n", "<br/>"), self._style)
            for paragraph in split_paragraphs(text)
        ]
