"""Core datatypes shared across TTS Studio modules.

Responsibilities:
- Represent immutable catalog, selection, and synthesis records.
- Parse voice records from the remote listing payload.

Key types:
- `Voice`, `Language`, `Selection`, `SynthesisRequest`, `SynthesisResult`,
  `HistoryEntry`, `CatalogLoadResult`, and the `CatalogOutcome` and
  `ControllerState` enums.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Mapping

from ..parsing import normalize_optional_string

NEURAL_ENGINE = "neural"
STANDARD_ENGINE = "standard"


@dataclass(frozen=True, slots=True)
class Voice:
    """A synthesis persona offered by the remote service.

    Attributes:
        id: Service-unique voice identifier (for example `Joanna`).
        language_code: BCP-47 language code, empty when the service omitted it.
        language_name: Human-readable language name.
        gender: Optional gender label reported by the service.
        supported_engines: Engine identifiers the voice can be rendered with.
    """

    id: str
    language_code: str
    language_name: str
    gender: str | None = None
    supported_engines: frozenset[str] = field(default_factory=frozenset)

    def supports(self, engine: str) -> bool:
        """Return `True` when the voice can be synthesized with `engine`."""

        return engine in self.supported_engines

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> Voice | None:
        """Build a voice from one listing record, or `None` when it has no usable id."""

        voice_id = payload.get("id")
        if not isinstance(voice_id, str) or not voice_id.strip():
            return None
        language_code = normalize_optional_string(payload.get("languageCode")) or ""
        language_name = normalize_optional_string(payload.get("languageName")) or language_code
        raw_engines = payload.get("supportedEngines")
        engines: frozenset[str] = frozenset()
        if isinstance(raw_engines, list):
            engines = frozenset(
                engine.strip().lower()
                for engine in raw_engines
                if isinstance(engine, str) and engine.strip()
            )
        return cls(
            id=voice_id.strip(),
            language_code=language_code,
            language_name=language_name,
            gender=normalize_optional_string(payload.get("gender")),
            supported_engines=engines,
        )


@dataclass(frozen=True, slots=True)
class Language:
    """A language derived from the voice list.

    Attributes:
        code: Language code shared by one or more voices.
        name: Display name taken from the last voice seen with this code.
    """

    code: str
    name: str


@dataclass(frozen=True, slots=True)
class Selection:
    """Current language, voice, and engine choice.

    Empty strings mean "nothing selected"; an empty engine means the service
    default (standard).
    """

    language_code: str = ""
    voice_id: str = ""
    engine: str = ""

    @property
    def has_voice(self) -> bool:
        """Return `True` when a voice is selected."""

        return bool(self.voice_id)


@dataclass(frozen=True, slots=True)
class SynthesisRequest:
    """One synthesis submission, built per user action and never retained."""

    text: str
    voice_id: str
    engine: str = ""

    def as_payload(self) -> dict[str, str]:
        """Return the JSON body; `engine` is omitted when no engine is chosen."""

        payload = {"text": self.text, "voice": self.voice_id}
        if self.engine:
            payload["engine"] = self.engine
        return payload


@dataclass(frozen=True, slots=True)
class SynthesisResult:
    """A completed synthesis.

    Attributes:
        url: Time-limited pre-signed audio URL, treated as opaque.
        voice_id: Voice used for the synthesis.
        language_code: Language selected when the request was issued.
        engine: Engine sent with the request (`""` when omitted).
        created_at: Completion timestamp.
    """

    url: str
    voice_id: str
    language_code: str
    engine: str
    created_at: datetime


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    """Snapshot of a synthesis result stored in the history ledger."""

    result: SynthesisResult
    recorded_at: datetime

    @property
    def url(self) -> str:
        return self.result.url

    @property
    def voice_id(self) -> str:
        return self.result.voice_id

    @property
    def language_code(self) -> str:
        return self.result.language_code

    @property
    def engine(self) -> str:
        return self.result.engine


class CatalogOutcome(str, Enum):
    """Whether the catalog came from the service or from the built-in fallback."""

    LOADED = "loaded"
    FALLBACK = "fallback"


class ControllerState(str, Enum):
    """Synthesis request lifecycle states."""

    IDLE = "idle"
    BUSY = "busy"
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True, slots=True)
class CatalogLoadResult:
    """Result of the one-time voice catalog load.

    Attributes:
        outcome: `LOADED` for a real catalog, `FALLBACK` for the degraded demo catalog.
        voices: All known voices in service order.
        languages: Derived languages sorted by display name.
        default_language: Preferred language code, or `None` when no language exists.
        default_voice: First voice of the default language, or `None`.
        default_engine: Engine default for `default_voice`.
        advisory: Non-technical message shown when the fallback was used.
    """

    outcome: CatalogOutcome
    voices: tuple[Voice, ...]
    languages: tuple[Language, ...]
    default_language: str | None
    default_voice: str | None
    default_engine: str = ""
    advisory: str | None = None

    @property
    def is_fallback(self) -> bool:
        """Return `True` when the catalog is the degraded fallback."""

        return self.outcome is CatalogOutcome.FALLBACK
