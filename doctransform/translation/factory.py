from typing import ClassVar

from doctransform.config.settings import Settings
from doctransform.translation.client_base import BaseTranslationClient
from doctransform.translation.example_client_adapter import ExampleClientAdapter
from doctransform.translation.openai_client_adapter import OpenAIClientAdapter
from doctransform.translation.translator import Translator


class TranslatorFactory:
    """Creates a Translator backed by the configured provider."""

    PROVIDERS: ClassVar[tuple[str, ...]] = ("example", "openai", "openai_compatible")

    @classmethod
    def create(cls, settings: Settings) -> Translator:
        return Translator(client=cls._create_client(settings))

    @classmethod
    def _create_client(cls, settings: Settings) -> BaseTranslationClient:
        provider = settings.translation_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        if provider not in cls.PROVIDERS:
            raise ValueError(
                f"Unknown translation provider '{provider}'. Choose from: {list(cls.PROVIDERS)}"
            )
        return OpenAIClientAdapter(
            api_key=settings.openai_api_key,
            model=settings.openai_model_name,
            timeout_seconds=settings.openai_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @staticmethod
    def _resolve_base_url(provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        url = settings.openai_compatible_base_url.strip()
        if not url:
            raise ValueError(
                "openai_compatible_base_url is required for "
                "translation_provider=openai_compatible"
            )
        return url
