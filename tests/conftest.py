"""Shared pytest fixtures for the full TTS Studio test suite."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any

import pytest

from ttsstudio.errors import CatalogUnavailableError
from ttsstudio.models.datatypes import SynthesisRequest, Voice


class RecordingServiceClient:
    """Service client double that records calls and replays scripted outcomes."""

    def __init__(self) -> None:
        """Initialize with an empty catalog and no scripted synthesis outcomes."""

        self.voices: tuple[Voice, ...] = ()
        self.voices_error: Exception | None = None
        self.synthesis_outcomes: list[object] = []
        self.list_calls = 0
        self.requests: list[SynthesisRequest] = []
        self.on_synthesize = None

    def list_voices(self) -> tuple[Voice, ...]:
        """Return scripted voices or raise the scripted catalog error."""

        self.list_calls += 1
        if self.voices_error is not None:
            raise self.voices_error
        return self.voices

    def synthesize(self, request: SynthesisRequest) -> str:
        """Return the next scripted URL or raise the next scripted exception."""

        self.requests.append(request)
        if self.on_synthesize is not None:
            self.on_synthesize(request)
        outcome = self.synthesis_outcomes.pop(0) if self.synthesis_outcomes else "https://x/a.mp3"
        if isinstance(outcome, BaseException):
            raise outcome
        return str(outcome)


@pytest.fixture
def voice_listing_payload() -> dict[str, Any]:
    """Provide a realistic `/voices` response body spanning several languages."""

    return {
        "voices": [
            {
                "id": "Joanna",
                "languageCode": "en-US",
                "languageName": "US English",
                "gender": "Female",
                "supportedEngines": ["standard", "neural"],
            },
            {
                "id": "Justin",
                "languageCode": "en-US",
                "languageName": "US English",
                "gender": "Male",
                "supportedEngines": ["standard"],
            },
            {
                "id": "Brian",
                "languageCode": "en-GB",
                "languageName": "British English",
                "gender": "Male",
                "supportedEngines": ["standard"],
            },
            {
                "id": "Celine",
                "languageCode": "fr-FR",
                "languageName": "French",
                "gender": "Female",
                "supportedEngines": ["standard"],
            },
            {
                "id": "Lea",
                "languageCode": "fr-FR",
                "languageName": "French",
                "gender": "Female",
                "supportedEngines": ["standard", "neural"],
            },
            {
                "id": "Hans",
                "languageCode": "de-DE",
                "languageName": "German",
                "gender": "Male",
                "supportedEngines": ["standard"],
            },
        ]
    }


@pytest.fixture
def catalog_voices(voice_listing_payload: dict[str, Any]) -> tuple[Voice, ...]:
    """Provide parsed voices matching `voice_listing_payload`."""

    voices = (Voice.from_payload(record) for record in voice_listing_payload["voices"])
    return tuple(voice for voice in voices if voice is not None)


@pytest.fixture
def fake_client(catalog_voices: tuple[Voice, ...]) -> RecordingServiceClient:
    """Provide a recording service client serving `catalog_voices`."""

    client = RecordingServiceClient()
    client.voices = catalog_voices
    return client


@pytest.fixture
def unavailable_client() -> RecordingServiceClient:
    """Provide a recording service client whose voice listing always fails."""

    client = RecordingServiceClient()
    client.voices_error = CatalogUnavailableError(
        "Voice listing transport error: connection refused",
        failure_kind="transport",
    )
    return client


@pytest.fixture
def fixed_clock() -> datetime:
    """Provide the timestamp returned by the test clock."""

    return datetime(2026, 10, 17, 9, 30, tzinfo=timezone.utc)


@pytest.fixture(autouse=True)
def _isolate_studio_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer `TTSSTUDIO_*` settings out of the test run."""

    for key in ("TTSSTUDIO_API_BASE", "TTSSTUDIO_MAX_CHARS", "TTSSTUDIO_TIMEOUT_SECONDS"):
        monkeypatch.delenv(key, raising=False)
