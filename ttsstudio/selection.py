"""Language, voice, and engine selection state.

All transitions are pure functions over `(voices, selection)` that return a
new `Selection`; derived values (filtered voices, engine defaults) are
recomputed from the catalog instead of being stored. Two invariants hold
after every transition:

- a selected voice always belongs to the selected language;
- the engine is `"neural"` only when the selected voice supports it.
"""

from __future__ import annotations

from typing import Sequence

from .models.datatypes import NEURAL_ENGINE, STANDARD_ENGINE, Selection, Voice


def filter_voices(voices: Sequence[Voice], language_code: str) -> tuple[Voice, ...]:
    """Return the voices of `language_code`; an empty code leaves the list unfiltered."""

    if not language_code:
        return tuple(voices)
    return tuple(voice for voice in voices if voice.language_code == language_code)


def find_voice(voices: Sequence[Voice], voice_id: str) -> Voice | None:
    """Return the voice with `voice_id`, or `None`."""

    for voice in voices:
        if voice.id == voice_id:
            return voice
    return None


def default_engine(voice: Voice | None) -> str:
    """Return `"neural"` when `voice` supports it, else `""` (standard)."""

    if voice is not None and voice.supports(NEURAL_ENGINE):
        return NEURAL_ENGINE
    return ""


def normalize_engine(engine: str) -> str | None:
    """Map user engine input to its stored form, or `None` for unknown engines."""

    token = engine.strip().lower()
    if token in {"", STANDARD_ENGINE}:
        return ""
    if token == NEURAL_ENGINE:
        return NEURAL_ENGINE
    return None


def apply_language(voices: Sequence[Voice], selection: Selection, language_code: str) -> Selection:
    """Select a language and repair the voice/engine choice for it.

    An empty `language_code` filters nothing, so the current voice is kept
    whatever its language.
    """

    candidates = filter_voices(voices, language_code)
    if not candidates:
        return Selection(language_code=language_code)

    current = find_voice(candidates, selection.voice_id) if selection.voice_id else None
    if current is None:
        first = candidates[0]
        return Selection(
            language_code=language_code,
            voice_id=first.id,
            engine=default_engine(first),
        )
    return Selection(
        language_code=language_code,
        voice_id=current.id,
        engine=_validated_engine(current, selection.engine),
    )


def apply_voice(voices: Sequence[Voice], selection: Selection, voice_id: str) -> Selection:
    """Select a voice of the current language; other ids leave `selection` unchanged."""

    voice = find_voice(filter_voices(voices, selection.language_code), voice_id)
    if voice is None:
        return selection
    return Selection(
        language_code=selection.language_code,
        voice_id=voice.id,
        engine=_validated_engine(voice, selection.engine),
    )


def apply_engine(voices: Sequence[Voice], selection: Selection, engine: str) -> Selection:
    """Select an engine when the current voice supports it; otherwise ignore it."""

    normalized = normalize_engine(engine)
    if normalized is None:
        return selection
    if normalized == NEURAL_ENGINE:
        voice = find_voice(voices, selection.voice_id)
        if voice is None or not voice.supports(NEURAL_ENGINE):
            return selection
    return Selection(
        language_code=selection.language_code,
        voice_id=selection.voice_id,
        engine=normalized,
    )


def can_submit(text: str, selection: Selection, *, busy: bool, max_chars: int) -> bool:
    """Return `True` when a synthesis request may be issued for `text`."""

    return (
        not busy
        and len(text) <= max_chars
        and bool(text.strip())
        and selection.has_voice
    )


def _validated_engine(voice: Voice, engine: str) -> str:
    if engine == NEURAL_ENGINE and not voice.supports(NEURAL_ENGINE):
        return ""
    return engine


class SelectionState:
    """Mutable holder for the current selection over a fixed voice list."""

    def __init__(self, voices: Sequence[Voice] = (), selection: Selection | None = None) -> None:
        self._voices = tuple(voices)
        self._selection = selection if selection is not None else Selection()

    @property
    def voices(self) -> tuple[Voice, ...]:
        return self._voices

    @property
    def selection(self) -> Selection:
        return self._selection

    @property
    def filtered_voices(self) -> tuple[Voice, ...]:
        """Voices offered for the selected language."""

        return filter_voices(self._voices, self._selection.language_code)

    @property
    def selected_voice(self) -> Voice | None:
        return find_voice(self._voices, self._selection.voice_id)

    @property
    def engine_options(self) -> tuple[str, ...]:
        """Engines the view may offer: standard always, neural when supported."""

        if default_engine(self.selected_voice) == NEURAL_ENGINE:
            return ("", NEURAL_ENGINE)
        return ("",)

    def reset(self, voices: Sequence[Voice], language_code: str | None) -> Selection:
        """Replace the voice list and select `language_code` from scratch."""

        self._voices = tuple(voices)
        self._selection = Selection()
        if language_code is not None:
            self._selection = apply_language(self._voices, self._selection, language_code)
        return self._selection

    def set_language(self, language_code: str) -> bool:
        """Select a language; the voice and engine are repaired synchronously."""

        self._selection = apply_language(self._voices, self._selection, language_code.strip())
        return True

    def set_voice(self, voice_id: str) -> bool:
        """Select a voice of the current language; returns `False` when ignored."""

        requested = voice_id.strip()
        updated = apply_voice(self._voices, self._selection, requested)
        self._selection = updated
        return bool(requested) and updated.voice_id == requested

    def set_engine(self, engine: str) -> bool:
        """Select an engine; returns `False` when the current voice cannot use it."""

        updated = apply_engine(self._voices, self._selection, engine)
        requested = normalize_engine(engine)
        applied = requested is not None and updated.engine == requested
        self._selection = updated
        return applied

    def can_submit(self, text: str, *, busy: bool, max_chars: int) -> bool:
        return can_submit(text, self._selection, busy=busy, max_chars=max_chars)
