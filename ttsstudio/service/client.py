"""HTTP client for the remote speech service.

Responsibilities:
- Fetch the voice listing and request syntheses over the service's JSON API.
- Download generated audio from pre-signed result URLs.
- Raise typed service exceptions so callers can map failures to UI state.
"""

from __future__ import annotations

import json
import socket
from pathlib import Path
from typing import Any

import requests

from ..errors import CatalogUnavailableError, StudioServiceError, SynthesisFailedError
from ..models.datatypes import SynthesisRequest, Voice

GENERIC_SYNTHESIS_FAILURE = "Synthesis failed."
FALLBACK_SYNTHESIS_FAILURE = "Failed to synthesize."


class StudioServiceClient:
    """Minimal requests-based client for the voice listing and synthesis endpoints."""

    _MAX_SERVICE_MESSAGE_CHARS = 180
    _DOWNLOAD_CHUNK_BYTES = 64 * 1024

    def __init__(
        self,
        *,
        base_url: str | None,
        timeout_seconds: float = 30.0,
    ) -> None:
        """Initialize service endpoint settings."""

        self.base_url = base_url.strip().rstrip("/") if isinstance(base_url, str) else ""
        self.timeout_seconds = timeout_seconds

    @property
    def is_configured(self) -> bool:
        """Return `True` when a service base URL is available."""

        return bool(self.base_url)

    def list_voices(self) -> tuple[Voice, ...]:
        """Return all voices offered by `GET {base}/voices`."""

        if not self.is_configured:
            raise CatalogUnavailableError(
                "Speech service base URL is not configured.",
                failure_kind="not_configured",
            )

        endpoint = f"{self.base_url}/voices"
        try:
            response = requests.get(endpoint, timeout=self.timeout_seconds)
            response.raise_for_status()
            raw_payload = bytes(response.content).decode("utf-8")
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise CatalogUnavailableError(
                f"Voice listing failed (HTTP {status_code}).",
                failure_kind="http_error",
                status_code=status_code,
            ) from exc
        except requests.RequestException as exc:
            raise CatalogUnavailableError(
                f"Voice listing transport error: {self._short_message(str(exc))}",
                failure_kind=self._classify_transport_failure(exc),
            ) from exc
        except UnicodeDecodeError as exc:
            raise CatalogUnavailableError(
                "Voice listing response is not UTF-8 text.",
                failure_kind="malformed",
            ) from exc

        return self._parse_voice_listing(raw_payload)

    def synthesize(self, request: SynthesisRequest) -> str:
        """Request one synthesis and return the pre-signed audio URL.

        Success requires a 2xx status and a non-empty `url` string in the body.
        """

        if not self.is_configured:
            raise SynthesisFailedError(
                "Speech service base URL is not configured.",
                failure_kind="not_configured",
            )

        endpoint = f"{self.base_url}/synthesize"
        try:
            response = requests.post(
                endpoint,
                headers={"Content-Type": "application/json"},
                json=request.as_payload(),
                timeout=self.timeout_seconds,
            )
        except requests.RequestException as exc:
            raise SynthesisFailedError(
                self._short_message(str(exc)) or FALLBACK_SYNTHESIS_FAILURE,
                failure_kind=self._classify_transport_failure(exc),
            ) from exc

        status_code = int(response.status_code)
        body = self._decode_json_object(bytes(response.content or b""))
        service_message = self._extract_service_message(body)
        url = body.get("url") if body is not None else None
        succeeded = 200 <= status_code < 300

        if succeeded and isinstance(url, str) and url.strip():
            return url.strip()

        if not succeeded:
            failure_kind = "http_error"
        elif body is None:
            failure_kind = "malformed"
        else:
            failure_kind = "missing_url"
        raise SynthesisFailedError(
            service_message or GENERIC_SYNTHESIS_FAILURE,
            failure_kind=failure_kind,
            status_code=status_code,
            service_message=service_message,
        )

    def download_audio(self, url: str, destination: Path) -> Path:
        """Stream the audio artifact at a pre-signed `url` into `destination`."""

        try:
            response = requests.get(url, stream=True, timeout=self.timeout_seconds)
            response.raise_for_status()
            destination.parent.mkdir(parents=True, exist_ok=True)
            with destination.open("wb") as audio_file:
                for chunk in response.iter_content(chunk_size=self._DOWNLOAD_CHUNK_BYTES):
                    if chunk:
                        audio_file.write(chunk)
        except requests.HTTPError as exc:
            status_code = exc.response.status_code if exc.response is not None else None
            raise StudioServiceError(
                f"Audio download failed (HTTP {status_code}); pre-signed links expire.",
                failure_kind="download",
                status_code=status_code,
            ) from exc
        except requests.RequestException as exc:
            raise StudioServiceError(
                f"Audio download transport error: {self._short_message(str(exc))}",
                failure_kind="download",
            ) from exc
        except OSError as exc:
            raise StudioServiceError(
                f"Could not write audio file `{destination}`: {exc}",
                failure_kind="download",
            ) from exc
        return destination

    def _parse_voice_listing(self, raw_payload: str) -> tuple[Voice, ...]:
        """Parse the listing body into voices, skipping records without an id."""

        try:
            payload = json.loads(raw_payload)
        except json.JSONDecodeError as exc:
            raise CatalogUnavailableError(
                "Voice listing returned invalid JSON payload.",
                failure_kind="malformed",
            ) from exc

        if not isinstance(payload, dict):
            raise CatalogUnavailableError(
                "Voice listing response must be a JSON object.",
                failure_kind="malformed",
            )
        records = payload.get("voices")
        if records is None:
            return ()
        if not isinstance(records, list):
            raise CatalogUnavailableError(
                "Voice listing `voices` field must be a list.",
                failure_kind="malformed",
            )

        voices: list[Voice] = []
        for record in records:
            if not isinstance(record, dict):
                continue
            voice = Voice.from_payload(record)
            if voice is not None:
                voices.append(voice)
        return tuple(voices)

    @staticmethod
    def _decode_json_object(raw: bytes) -> dict[str, Any] | None:
        """Decode a JSON object body, returning `None` for empty or non-object payloads."""

        if not raw:
            return None
        try:
            payload = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError):
            return None
        if not isinstance(payload, dict):
            return None
        return payload

    @classmethod
    def _extract_service_message(cls, body: dict[str, Any] | None) -> str | None:
        """Return the service-supplied `error` text, if any."""

        if body is None:
            return None
        message = body.get("error")
        if not isinstance(message, str) or not message.strip():
            return None
        return cls._short_message(message)

    @classmethod
    def _short_message(cls, text: str) -> str:
        """Normalize and cap user-facing service message length."""

        compact = " ".join(text.split())
        if len(compact) <= cls._MAX_SERVICE_MESSAGE_CHARS:
            return compact
        return f"{compact[: cls._MAX_SERVICE_MESSAGE_CHARS - 1]}..."

    @staticmethod
    def _classify_transport_failure(reason: object) -> str:
        """Classify network-layer failures into deterministic diagnostic kinds."""

        if isinstance(reason, (TimeoutError, socket.timeout, requests.Timeout)):
            return "timeout"
        return "transport"
