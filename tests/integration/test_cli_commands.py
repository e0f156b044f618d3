"""CLI integration tests with the HTTP transport patched at the `requests` layer."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import pytest
import requests
from typer.testing import CliRunner

from ttsstudio.cli import app
from ttsstudio.service import client as service_http

API_BASE = "https://api.example.com/prod"


class _MockRequestsResponse:
    """Minimal requests response mock for HTTP transport patching."""

    def __init__(self, *, payload: bytes, status_code: int = 200) -> None:
        """Initialize response with raw payload bytes and HTTP status."""

        self.content = payload
        self.status_code = status_code

    def raise_for_status(self) -> None:
        """Raise HTTPError when the response status represents a failure."""

        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code} error", response=self)

    def iter_content(self, chunk_size: int = 1) -> list[bytes]:
        """Return the payload as a single chunk."""

        _ = chunk_size
        return [self.content]


class _FakeSpeechService:
    """Scripted stand-in for the voice listing and synthesis endpoints."""

    def __init__(self, listing: dict[str, Any]) -> None:
        self.listing = listing
        self.synthesis_bodies: list[dict[str, Any]] = []
        self.synthesis_status = 200
        self.synthesis_payload: dict[str, Any] = {"url": "https://x/a.mp3"}

    def get(self, url: str, **_kwargs: object) -> _MockRequestsResponse:
        if url == f"{API_BASE}/voices":
            return _MockRequestsResponse(payload=json.dumps(self.listing).encode("utf-8"))
        if url.startswith("https://x/"):
            return _MockRequestsResponse(payload=b"ID3-audio")
        return _MockRequestsResponse(payload=b"", status_code=404)

    def post(self, url: str, **kwargs: object) -> _MockRequestsResponse:
        assert url == f"{API_BASE}/synthesize"
        self.synthesis_bodies.append(dict(kwargs["json"]))
        return _MockRequestsResponse(
            payload=json.dumps(self.synthesis_payload).encode("utf-8"),
            status_code=self.synthesis_status,
        )


@pytest.fixture
def speech_service(
    monkeypatch: pytest.MonkeyPatch, voice_listing_payload: dict[str, Any]
) -> _FakeSpeechService:
    """Patch `requests` so CLI commands talk to a scripted speech service."""

    service = _FakeSpeechService(voice_listing_payload)
    monkeypatch.setattr(service_http.requests, "get", service.get)
    monkeypatch.setattr(service_http.requests, "post", service.post)
    monkeypatch.setenv("TTSSTUDIO_API_BASE", API_BASE)
    return service


def test_voices_lists_languages_in_display_order(speech_service) -> None:
    """`voices` should list derived languages sorted by name."""

    result = CliRunner().invoke(app, ["voices"])

    assert result.exit_code == 0
    lines = [line for line in result.output.splitlines() if not line.startswith("[studio]")]
    assert lines == [
        "British English (en-GB)",
        "French (fr-FR)",
        "German (de-DE)",
        "US English (en-US)",
    ]


def test_voices_for_one_language(speech_service) -> None:
    """`voices --language` should list only voices of that language."""

    result = CliRunner().invoke(app, ["voices", "--language", "fr-FR"])

    assert result.exit_code == 0
    assert "Celine [Female] - French (fr-FR) - standard" in result.output
    assert "Lea [Female] - French (fr-FR) - neural, standard" in result.output
    assert "Joanna" not in result.output


def test_voices_without_service_uses_fallback(monkeypatch: pytest.MonkeyPatch) -> None:
    """An unconfigured service should show the advisory and the demo language."""

    def _unexpected(*_args: object, **_kwargs: object) -> None:
        raise AssertionError("network must not be used")

    monkeypatch.setattr(service_http.requests, "get", _unexpected)

    result = CliRunner().invoke(app, ["voices"])

    assert result.exit_code == 0
    assert "Remote service unavailable." in result.output
    assert "US English (en-US)" in result.output


def test_synthesize_standard_engine_omits_engine_key(speech_service) -> None:
    """Standard engine submissions should send only text and voice."""

    result = CliRunner().invoke(
        app,
        ["synthesize", "Hello", "--language", "en-US", "--voice", "Joanna", "--engine", "standard"],
    )

    assert result.exit_code == 0
    assert speech_service.synthesis_bodies == [{"text": "Hello", "voice": "Joanna"}]
    assert "Language: en-US | Voice: Joanna | Engine: standard" in result.output
    assert "Audio URL: https://x/a.mp3" in result.output
    assert "Pre-signed links expire automatically." in result.output


def test_synthesize_defaults_to_neural_for_capable_voice(speech_service) -> None:
    """Selecting a language should default to its first voice and neural when supported."""

    result = CliRunner().invoke(app, ["synthesize", "Hello", "--language", "en-US"])

    assert result.exit_code == 0
    assert speech_service.synthesis_bodies == [
        {"text": "Hello", "voice": "Joanna", "engine": "neural"}
    ]


def test_synthesize_reports_service_error(speech_service) -> None:
    """A service error body should be shown verbatim with exit code 1."""

    speech_service.synthesis_status = 500
    speech_service.synthesis_payload = {"error": "quota exceeded"}

    result = CliRunner().invoke(app, ["synthesize", "Hello"])

    assert result.exit_code == 1
    assert "synthesize failed at stage `synthesize`: quota exceeded" in result.output


def test_synthesize_blocks_over_length_text_without_network(
    speech_service, tmp_path: Path
) -> None:
    """Text over `max_chars` should fail validation before any synthesis call."""

    config_path = tmp_path / "studio.yml"
    config_path.write_text("max_chars: 5\n", encoding="utf-8")

    result = CliRunner().invoke(app, ["synthesize", "x" * 6, "--config", str(config_path)])

    assert result.exit_code == 1
    assert "synthesize failed at stage `validation`: Text is too long" in result.output
    assert speech_service.synthesis_bodies == []


def test_synthesize_rejects_unsupported_engine(speech_service) -> None:
    """Neural should be refused for a standard-only voice."""

    result = CliRunner().invoke(
        app, ["synthesize", "Hello", "--language", "en-US", "--voice", "Justin", "--engine", "neural"]
    )

    assert result.exit_code == 1
    assert "failed at stage `selection`" in result.output
    assert speech_service.synthesis_bodies == []


def test_synthesize_downloads_audio(speech_service, tmp_path: Path) -> None:
    """`--download` should save the generated audio next to the printed URL."""

    destination = tmp_path / "tts.mp3"

    result = CliRunner().invoke(app, ["synthesize", "Hello", "--download", str(destination)])

    assert result.exit_code == 0
    assert destination.read_bytes() == b"ID3-audio"
    assert f"Saved audio: {destination}" in result.output


def test_synthesize_reports_missing_config_file() -> None:
    """A missing `--config` path should fail at the config stage."""

    result = CliRunner().invoke(app, ["synthesize", "Hello", "--config", "missing-studio.yml"])

    assert result.exit_code == 1
    assert "synthesize failed at stage `config`" in result.output
    assert "Config file not found: `missing-studio.yml`." in result.output


def test_studio_session_keeps_history_across_lines(speech_service) -> None:
    """The interactive studio should apply commands and keep in-memory history."""

    script = "\n".join(
        [
            "/lang fr-FR",
            "/voice Lea",
            "/engine neural",
            "Bonjour tout le monde",
            "   ",
            "/voice Hans",
            "/history",
            "/quit",
        ]
    ) + "\n"

    result = CliRunner().invoke(app, ["studio"], input=script)

    assert result.exit_code == 0
    assert speech_service.synthesis_bodies == [
        {"text": "Bonjour tout le monde", "voice": "Lea", "engine": "neural"}
    ]
    assert "Language: fr-FR | Voice: Lea | Engine: neural" in result.output
    assert "Voice `Hans` is not available for fr-FR." in result.output
    assert "1. Lea · fr-FR · neural · " in result.output


def test_studio_sample_and_end_of_input(speech_service) -> None:
    """`/sample` should synthesize the language sample and EOF should end the loop."""

    result = CliRunner().invoke(app, ["studio"], input="/lang de-DE\n/sample\n")

    assert result.exit_code == 0
    assert speech_service.synthesis_bodies == [
        {"text": "Guten Morgen und willkommen zur heutigen Sitzung.", "voice": "Hans"}
    ]


def test_studio_survives_unexpected_synthesis_error(
    speech_service, monkeypatch: pytest.MonkeyPatch
) -> None:
    """An unexpected transport error should be shown and the loop should continue."""

    def _broken_post(*_args: object, **_kwargs: object) -> None:
        raise ValueError("bad body")

    monkeypatch.setattr(service_http.requests, "post", _broken_post)

    result = CliRunner().invoke(app, ["studio"], input="Hello\n/status\n/quit\n")

    assert result.exit_code == 0
    assert result.output.count("bad body") == 2
    assert "Language: en-US | Voice: Joanna | Engine: neural" in result.output


def test_studio_engine_without_argument_lists_engines(speech_service) -> None:
    """`/engine` alone should list the engines of the selected voice without changing it."""

    script = "/engine\n/lang de-DE\n/engine\n/quit\n"

    result = CliRunner().invoke(app, ["studio"], input=script)

    assert result.exit_code == 0
    assert "Engines: standard, neural" in result.output
    assert "Engines: standard\n" in result.output
    assert speech_service.synthesis_bodies == []
