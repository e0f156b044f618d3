"""Studio session wiring catalog, selection, synthesis, and history together.

Responsibilities:
- Own one catalog loader, selection state, controller, and history ledger.
- Apply catalog defaults to the selection once the catalog is loaded.
- Provide the sample-text and clear helpers used by the view.

Key types:
- `StudioSession`: process-local state for one user.
"""

from __future__ import annotations

from datetime import datetime
from typing import Callable

from .catalog import VoiceCatalogLoader
from .config import StudioConfig
from .controller import StateCallback, SynthesisController, utc_now
from .history import HistoryLedger
from .models.datatypes import (
    CatalogLoadResult,
    ControllerState,
    HistoryEntry,
    Language,
    Selection,
    SynthesisResult,
    Voice,
)
from .selection import SelectionState
from .service.client import StudioServiceClient
from .telemetry.logger import StudioLogger

_SAMPLE_TEXTS = {
    "en": "Good morning and welcome to today’s session.",
    "fr": "Bonjour et bienvenue à la session d’aujourd’hui.",
    "es": "Buenos días y bienvenidos a la sesión de hoy.",
    "pt": "Bom dia e bem-vindos à sessão de hoje.",
    "de": "Guten Morgen und willkommen zur heutigen Sitzung.",
}


def sample_text(language_code: str) -> str:
    """Return a short greeting in the language family of `language_code`."""

    return _SAMPLE_TEXTS.get(language_code[:2].lower(), _SAMPLE_TEXTS["en"])


class StudioSession:
    """Process-local studio state: catalog, selection, current result, and history."""

    def __init__(
        self,
        config: StudioConfig,
        *,
        client: StudioServiceClient | None = None,
        logger: StudioLogger | None = None,
        clock: Callable[[], datetime] = utc_now,
        on_state_change: StateCallback | None = None,
    ) -> None:
        """Create session components; no network call happens until `load_catalog()`."""

        self.config = config
        self.client = client or StudioServiceClient(
            base_url=config.api_base,
            timeout_seconds=config.timeout_seconds,
        )
        self._loader = VoiceCatalogLoader(self.client, logger=logger)
        self._selection = SelectionState()
        self._history = HistoryLedger()
        self._controller = SynthesisController(
            self.client,
            self._history,
            max_chars=config.max_chars,
            logger=logger,
            clock=clock,
            on_state_change=on_state_change,
        )
        self._advisory = ""

    def load_catalog(self) -> CatalogLoadResult:
        """Load the catalog once and apply its defaults to the selection."""

        already_loaded = self._loader.result is not None
        catalog = self._loader.load()
        if not already_loaded:
            self._selection.reset(catalog.voices, catalog.default_language)
            self._advisory = catalog.advisory or ""
        return catalog

    @property
    def catalog(self) -> CatalogLoadResult | None:
        return self._loader.result

    @property
    def is_loading(self) -> bool:
        """Return `True` until languages are available."""

        return not self.languages

    @property
    def languages(self) -> tuple[Language, ...]:
        catalog = self._loader.result
        return catalog.languages if catalog is not None else ()

    @property
    def voices(self) -> tuple[Voice, ...]:
        return self._selection.voices

    @property
    def filtered_voices(self) -> tuple[Voice, ...]:
        return self._selection.filtered_voices

    @property
    def selection(self) -> Selection:
        return self._selection.selection

    @property
    def selected_voice(self) -> Voice | None:
        return self._selection.selected_voice

    @property
    def engine_options(self) -> tuple[str, ...]:
        return self._selection.engine_options

    @property
    def history(self) -> tuple[HistoryEntry, ...]:
        return self._history.entries

    @property
    def current_result(self) -> SynthesisResult | None:
        return self._controller.current_result

    @property
    def state(self) -> ControllerState:
        return self._controller.state

    @property
    def busy(self) -> bool:
        return self._controller.busy

    @property
    def max_chars(self) -> int:
        return self.config.max_chars

    @property
    def error_message(self) -> str:
        """Synthesis error, else the catalog advisory until the next submission starts."""

        return self._controller.error_message or self._advisory

    def set_language(self, language_code: str) -> bool:
        return self._selection.set_language(language_code)

    def set_voice(self, voice_id: str) -> bool:
        return self._selection.set_voice(voice_id)

    def set_engine(self, engine: str) -> bool:
        return self._selection.set_engine(engine)

    def can_submit(self, text: str) -> bool:
        return self._controller.can_submit(text, self.selection)

    def submit(self, text: str) -> SynthesisResult | None:
        """Submit `text` with the current selection; rejected input is a no-op."""

        if self.can_submit(text):
            self._advisory = ""
        return self._controller.submit(text, self.selection)

    def sample_text(self) -> str:
        """Return sample text for the selected language."""

        return sample_text(self.selection.language_code)

    def clear(self) -> None:
        """Drop the current result and any error message."""

        self._controller.clear()
        self._advisory = ""
