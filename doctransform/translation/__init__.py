from doctransform.translation.client_base import BaseTranslationClient
from doctransform.translation.factory import TranslatorFactory
from doctransform.translation.translator import Translator

__all__ = ["BaseTranslationClient", "Translator", "TranslatorFactory"]
