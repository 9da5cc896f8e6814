"""Example translation client adapter.

Use this module as a reference when implementing new provider adapters.
Implement BaseTranslationClient and register the provider in TranslatorFactory.
"""

from typing import ClassVar

from doctransform.processor.models import Language
from doctransform.translation.client_base import BaseTranslationClient


class ExampleClientAdapter(BaseTranslationClient):
    """Example adapter that returns a fixed notice for each language pair.

    No network calls. Useful for local development and tests.
    """

    RESPONSES: ClassVar[dict[tuple[Language, Language], str]] = {
        (Language.UZBEK, Language.RUSSIAN): (
            "Этот документ был переведен с узбекского на русский язык."
        ),
        (Language.UZBEK, Language.ENGLISH): (
            "This document has been translated from Uzbek to English."
        ),
        (Language.RUSSIAN, Language.UZBEK): (
            "Bu hujjat rus tilidan o'zbek tiliga tarjima qilindi."
        ),
        (Language.RUSSIAN, Language.ENGLISH): (
            "This document has been translated from Russian to English."
        ),
        (Language.ENGLISH, Language.UZBEK): (
            "Bu hujjat ingliz tilidan o'zbek tiliga tarjima qilindi."
        ),
        (Language.ENGLISH, Language.RUSSIAN): (
            "Этот документ был переведен с английского на русский язык."
        ),
    }

    def translate(self, text: str, source: Language, target: Language) -> str:
        _ = text
        return self.RESPONSES[(source, target)]
