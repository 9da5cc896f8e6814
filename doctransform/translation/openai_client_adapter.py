import httpx
import openai

from doctransform.processor.exceptions import TranslationBackendError
from doctransform.processor.models import Language
from doctransform.translation.client_base import BaseTranslationClient

LANGUAGE_NAMES: dict[Language, str] = {
    Language.ENGLISH: "English",
    Language.RUSSIAN: "Russian",
    Language.UZBEK: "Uzbek",
}

SYSTEM_PROMPT = (
    "You are a professional document translator. Translate the user's text "
    "from {source} to {target}. Keep every paragraph break exactly where it is, "
    "do not add commentary, and return only the translated text."
)


class OpenAIClientAdapter(BaseTranslationClient):
    """Translation client built on the OpenAI-compatible chat API."""

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        timeout_seconds: int,
        base_url: str | None = None,
    ) -> None:
        self._model = model
        self._client = openai.OpenAI(
            api_key=api_key,
            timeout=timeout_seconds,
            base_url=base_url,
        )

    def translate(self, text: str, source: Language, target: Language) -> str:
        system_prompt = SYSTEM_PROMPT.format(
            source=LANGUAGE_NAMES[source],
            target=LANGUAGE_NAMES[target],
        )
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                temperature=0.0,
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": text},
                ],
            )
        except (openai.APIConnectionError, httpx.ConnectError, httpx.TimeoutException) as exc:
            raise TranslationBackendError(
                f"translation provider network error: {exc}"
            ) from exc
        except openai.APIError as exc:
            raise TranslationBackendError(
                f"translation provider API error: {exc}"
            ) from exc

        if not response.choices:
            raise TranslationBackendError("translation provider returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise TranslationBackendError("translation provider returned empty response")
        return content.strip()
