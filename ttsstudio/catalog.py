"""Voice catalog loading and language derivation.

Responsibilities:
- Fetch the voice listing once per loader and derive the language list.
- Choose default language, voice, and engine for a fresh selection.
- Substitute a single built-in voice when the service is unavailable, so the
  studio never starts with zero selectable options.

Key public functions:
- `derive_languages`: distinct, display-sorted languages of a voice list.
- `pick_default_language`: preferred language code for a language list.
- `fallback_catalog`: the degraded demo catalog.
"""

from __future__ import annotations

import unicodedata
from typing import Iterable

from .errors import CatalogUnavailableError
from .models.datatypes import (
    NEURAL_ENGINE,
    STANDARD_ENGINE,
    CatalogLoadResult,
    CatalogOutcome,
    Language,
    Voice,
)
from .selection import default_engine, filter_voices
from .service.client import StudioServiceClient
from .telemetry.logger import StudioLogger

CATALOG_UNAVAILABLE_MESSAGE = "Remote service unavailable."
PREFERRED_LANGUAGE_PREFIX = "en-"

FALLBACK_VOICE = Voice(
    id="Joanna",
    language_code="en-US",
    language_name="US English",
    supported_engines=frozenset({STANDARD_ENGINE, NEURAL_ENGINE}),
)


def _collation_key(language: Language) -> tuple[str, str, str]:
    """Sort key approximating locale-aware comparison (accent- and case-insensitive)."""

    decomposed = unicodedata.normalize("NFKD", language.name)
    base = "".join(character for character in decomposed if not unicodedata.combining(character))
    return (base.casefold(), language.name, language.code)


def derive_languages(voices: Iterable[Voice]) -> tuple[Language, ...]:
    """Return the distinct languages of `voices`, sorted by display name.

    When several voices share a code, the name of the last one seen wins.
    Voices without a language code contribute nothing.
    """

    names: dict[str, str] = {}
    for voice in voices:
        if not voice.language_code:
            continue
        names[voice.language_code] = voice.language_name or voice.language_code
    languages = [Language(code=code, name=name) for code, name in names.items()]
    return tuple(sorted(languages, key=_collation_key))


def pick_default_language(languages: Iterable[Language]) -> str | None:
    """Return the first `en-` language code, else the first code, else `None`."""

    ordered = list(languages)
    for language in ordered:
        if language.code.startswith(PREFERRED_LANGUAGE_PREFIX):
            return language.code
    if ordered:
        return ordered[0].code
    return None


def build_catalog(
    voices: tuple[Voice, ...],
    outcome: CatalogOutcome = CatalogOutcome.LOADED,
    advisory: str | None = None,
) -> CatalogLoadResult:
    """Derive languages and selection defaults for a voice list."""

    languages = derive_languages(voices)
    default_language = pick_default_language(languages)
    default_voice: Voice | None = None
    if default_language is not None:
        candidates = filter_voices(voices, default_language)
        default_voice = candidates[0] if candidates else None
    return CatalogLoadResult(
        outcome=outcome,
        voices=voices,
        languages=languages,
        default_language=default_language,
        default_voice=default_voice.id if default_voice is not None else None,
        default_engine=default_engine(default_voice),
        advisory=advisory,
    )


def fallback_catalog(advisory: str = CATALOG_UNAVAILABLE_MESSAGE) -> CatalogLoadResult:
    """Return the single-voice demo catalog used when the service is unavailable."""

    return build_catalog((FALLBACK_VOICE,), outcome=CatalogOutcome.FALLBACK, advisory=advisory)


class VoiceCatalogLoader:
    """Load the voice catalog from the service exactly once."""

    def __init__(
        self,
        client: StudioServiceClient,
        logger: StudioLogger | None = None,
    ) -> None:
        self._client = client
        self._logger = logger
        self._result: CatalogLoadResult | None = None

    @property
    def result(self) -> CatalogLoadResult | None:
        """Return the loaded catalog, or `None` before `load()` has run."""

        return self._result

    def load(self) -> CatalogLoadResult:
        """Fetch voices and derive defaults; later calls reuse the first result."""

        if self._result is not None:
            return self._result

        self._log("info", "start")
        try:
            voices = self._client.list_voices()
        except CatalogUnavailableError as exc:
            if self._logger is not None:
                self._logger.warning(
                    "catalog",
                    "fallback",
                    failure_kind=exc.failure_kind,
                    status_code=exc.status_code or "none",
                )
            self._result = fallback_catalog()
            return self._result

        self._result = build_catalog(voices)
        self._log(
            "info",
            "loaded",
            voices=len(self._result.voices),
            languages=len(self._result.languages),
            default_language=self._result.default_language or "none",
        )
        return self._result

    def _log(self, level: str, event: str, **context: object) -> None:
        if self._logger is None:
            return
        getattr(self._logger, level)("catalog", event, **context)
