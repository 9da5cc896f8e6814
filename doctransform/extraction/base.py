from abc import ABC, abstractmethod


class BaseTextExtractor(ABC):
    """Contract for all structural text extraction adapters."""

    @abstractmethod
    def extract(self, content: bytes) -> str:
        """Extract plain text from file bytes.

        Args:
            content: Raw file content.

        Returns:
            Paragraphs separated by a blank line, stripped.

        Raises:
            ExtractionError: if the content cannot be parsed.
        """
