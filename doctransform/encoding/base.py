import re
from abc import ABC, abstractmethod

_XML_ILLEGAL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f]")


def xml_safe(text: str) -> str:
    """Drop control characters that OOXML containers cannot store."""
    return _XML_ILLEGAL_RE.sub("", text)


class BaseFormatEncoder(ABC):
    """Contract for output container encoders."""

    @abstractmethod
    def encode(self, text: str, preserve_structure: bool) -> bytes:
        """Serialize text into one output container.

        When ``preserve_structure`` is true, every blank-line separated
        paragraph becomes a real paragraph (or row) in the container.

        Raises:
            EncodingError: if the container cannot be written.
        """
