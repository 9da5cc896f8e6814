import re
from collections.abc import Iterable
from dataclasses import dataclass

PARAGRAPH_SEPARATOR = "\n\n"

_BLANK_LINES_RE = re.compile(r"\n\s*\n")
_INLINE_SPACE_RE = re.compile(r"[ \u00a0]+")


def clean_paragraph(text: str) -> str:
    lines = [_INLINE_SPACE_RE.sub(" ", line).strip() for line in text.splitlines()]
    return "\n".join(line for line in lines if line)


def join_paragraphs(paragraphs: Iterable[str]) -> str:
    """Normalise paragraphs and join them with a blank line."""
    cleaned = (clean_paragraph(p) for p in paragraphs)
    return PARAGRAPH_SEPARATOR.join(p for p in cleaned if p)


def split_paragraphs(text: str) -> list[str]:
    """Inverse of join_paragraphs: blank lines mark paragraph boundaries."""
    return [p for p in (clean_paragraph(chunk) for chunk in _BLANK_LINES_RE.split(text)) if p]


# Line advance, in multiples of the font size, above which a new paragraph starts.
PARAGRAPH_PITCH_RATIO = 1.6
# Lines whose tops differ by less than this share of the font size sit on one row.
SAME_ROW_RATIO = 0.5


@dataclass(frozen=True)
class TextLine:
    """One positioned line of text on a PDF page (PDF points, top-down)."""

    text: str
    top: float
    x0: float
    size: float


def paragraphs_from_lines(lines: Iterable[TextLine]) -> list[str]:
    """Group the lines of one page into paragraphs by vertical spacing.

    Consecutive lines at normal leading stay in one paragraph, joined by a
    newline; a wider advance (paragraph spacing or a blank line) starts a new
    one. Fragments on the same row are joined with a space.
    """
    paragraphs: list[list[str]] = []
    previous: TextLine | None = None
    for line in sorted(lines, key=lambda item: (item.top, item.x0)):
        text = line.text.strip()
        if not text:
            continue
        if previous is None:
            paragraphs.append([text])
        else:
            size = max(previous.size, line.size, 1.0)
            advance = line.top - previous.top
            if advance < size * SAME_ROW_RATIO:
                paragraphs[-1][-1] = f"{paragraphs[-1][-1]} {text}"
            elif advance > size * PARAGRAPH_PITCH_RATIO:
                paragraphs.append([text])
            else:
                paragraphs[-1].append(text)
        previous = line
    return ["\n".join(p) for p in paragraphs]
