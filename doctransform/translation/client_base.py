from abc import ABC, abstractmethod

from doctransform.processor.models import Language


class BaseTranslationClient(ABC):
    """Contract for provider-specific translation backends."""

    @abstractmethod
    def translate(self, text: str, source: Language, target: Language) -> str:
        """Return ``text`` translated from ``source`` to ``target``.

        Raises:
            TranslationBackendError: if the provider call fails.
        """
