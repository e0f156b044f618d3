"""Unit tests for voice catalog loading, language derivation, and fallback."""

from __future__ import annotations

import io

from ttsstudio.catalog import (
    CATALOG_UNAVAILABLE_MESSAGE,
    VoiceCatalogLoader,
    derive_languages,
    pick_default_language,
)
from ttsstudio.models.datatypes import CatalogOutcome, Language, Voice
from ttsstudio.telemetry.logger import StudioLogger


def test_single_voice_catalog_defaults_to_that_voice_and_neural(fake_client) -> None:
    """A one-voice US English catalog should default to Joanna with the neural engine."""

    fake_client.voices = (
        Voice(
            id="Joanna",
            language_code="en-US",
            language_name="US English",
            supported_engines=frozenset({"standard", "neural"}),
        ),
    )

    result = VoiceCatalogLoader(fake_client).load()

    assert result.outcome is CatalogOutcome.LOADED
    assert result.default_language == "en-US"
    assert result.default_voice == "Joanna"
    assert result.default_engine == "neural"
    assert result.advisory is None


def test_languages_are_distinct_and_sorted_by_display_name(catalog_voices) -> None:
    """Derived languages should collapse shared codes and sort by name."""

    languages = derive_languages(catalog_voices)

    assert languages == (
        Language(code="en-GB", name="British English"),
        Language(code="fr-FR", name="French"),
        Language(code="de-DE", name="German"),
        Language(code="en-US", name="US English"),
    )


def test_language_name_uses_last_voice_seen() -> None:
    """When voices disagree on a language name, the last one wins."""

    voices = (
        Voice(id="A", language_code="cmn-CN", language_name="Chinese"),
        Voice(id="B", language_code="cmn-CN", language_name="Chinese Mandarin"),
        Voice(id="C", language_code="", language_name=""),
    )

    assert derive_languages(voices) == (Language(code="cmn-CN", name="Chinese Mandarin"),)


def test_language_sort_ignores_case_and_accents() -> None:
    """Collation should place accented and lowercase names alphabetically."""

    voices = (
        Voice(id="A", language_code="is-IS", language_name="Icelandic"),
        Voice(id="B", language_code="xx-1", language_name="Élan"),
        Voice(id="C", language_code="xx-2", language_name="dutch"),
    )

    assert [language.code for language in derive_languages(voices)] == ["xx-2", "xx-1", "is-IS"]


def test_default_language_prefers_english_then_first_then_none() -> None:
    """Default language should prefer `en-`, else the first language, else none."""

    assert pick_default_language(
        [Language("de-DE", "German"), Language("en-IN", "Indian English")]
    ) == "en-IN"
    assert pick_default_language([Language("de-DE", "German"), Language("fr-FR", "French")]) == "de-DE"
    assert pick_default_language([]) is None


def test_multi_language_catalog_defaults_to_first_english_language(fake_client) -> None:
    """Among English variants, the first in display order should win."""

    result = VoiceCatalogLoader(fake_client).load()

    assert result.default_language == "en-GB"
    assert result.default_voice == "Brian"
    assert result.default_engine == ""


def test_empty_catalog_has_no_defaults(fake_client) -> None:
    """A successful but empty listing should leave nothing selectable."""

    fake_client.voices = ()

    result = VoiceCatalogLoader(fake_client).load()

    assert result.outcome is CatalogOutcome.LOADED
    assert result.languages == ()
    assert result.default_language is None
    assert result.default_voice is None


def test_unavailable_catalog_falls_back_to_demo_voice(unavailable_client) -> None:
    """A failed listing should yield the single-voice fallback and an advisory."""

    sink = io.StringIO()
    result = VoiceCatalogLoader(unavailable_client, logger=StudioLogger(sink=sink)).load()

    assert result.is_fallback
    assert result.languages == (Language(code="en-US", name="US English"),)
    assert [voice.id for voice in result.voices] == ["Joanna"]
    assert result.default_language == "en-US"
    assert result.default_voice == "Joanna"
    assert result.default_engine == "neural"
    assert result.advisory == CATALOG_UNAVAILABLE_MESSAGE
    assert "component=catalog event=fallback failure_kind=transport" in sink.getvalue()
    assert "connection refused" not in sink.getvalue()


def test_loader_calls_service_only_once(fake_client, unavailable_client) -> None:
    """Repeated loads should reuse the first result without more network calls."""

    loader = VoiceCatalogLoader(fake_client)
    first = loader.load()
    second = loader.load()

    assert first is second
    assert fake_client.list_calls == 1

    failing_loader = VoiceCatalogLoader(unavailable_client)
    failing_loader.load()
    failing_loader.load()

    assert unavailable_client.list_calls == 1
