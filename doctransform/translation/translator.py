from collections.abc import Iterable
from itertools import permutations

from doctransform.logging.logger import Log
from doctransform.processor.exceptions import UnsupportedLanguagePairError
from doctransform.processor.models import NO_LANGUAGE, Language
from doctransform.translation.client_base import BaseTranslationClient

DEFAULT_ROUTES: frozenset[tuple[Language, Language]] = frozenset(permutations(Language, 2))


def _code(value: str | Language | None) -> str:
    if value is None:
        return NO_LANGUAGE
    if isinstance(value, Language):
        return value.value
    return value.strip().lower()


class Translator:
    """Translates text between supported languages or passes it through.

    The pair is one toggle: if either side is "none", or both sides are the
    same language, the input is returned unchanged. Any other pair must
    have a route, otherwise UnsupportedLanguagePairError is raised.
    """

    def __init__(
        self,
        client: BaseTranslationClient,
        routes: Iterable[tuple[Language, Language]] = DEFAULT_ROUTES,
    ) -> None:
        self._client = client
        self._routes = frozenset(routes)

    @staticmethod
    def is_passthrough(from_lang: str | Language | None, to_lang: str | Language | None) -> bool:
        source, target = _code(from_lang), _code(to_lang)
        return source == target or NO_LANGUAGE in (source, target)

    def translate(
        self,
        text: str,
        from_lang: str | Language | None,
        to_lang: str | Language | None,
    ) -> str:
        if self.is_passthrough(from_lang, to_lang):
            return text
        route = self._resolve_route(_code(from_lang), _code(to_lang))
        Log.info(f"Translating {len(text)} chars {route[0].value}->{route[1].value}")
        return self._client.translate(text, *route)

    def _resolve_route(self, source: str, target: str) -> tuple[Language, Language]:
        try:
            route = (Language(source), Language(target))
        except ValueError as exc:
            raise UnsupportedLanguagePairError(f"no route {source}->{target}") from exc
        if route not in self._routes:
            raise UnsupportedLanguagePairError(f"no route {source}->{target}")
        return route
