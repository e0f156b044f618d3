"""Configuration model and loaders for TTS Studio.

Responsibilities:
- Define runtime configuration as a typed dataclass.
- Provide loader entry points for file- and environment-based configuration.

Key types:
- `StudioConfig`: normalized settings for one studio process.
- `ConfigLoader`: static construction helpers for `StudioConfig`.

A missing service base URL is a valid configuration: the catalog loader then
falls back to its built-in demo voice instead of failing at startup.
"""

from __future__ import annotations

from dataclasses import dataclass
import os
from pathlib import Path
from typing import Any, Mapping

import yaml

from .parsing import (
    normalize_base_url,
    normalize_optional_string,
    parse_positive_float,
    parse_positive_int,
)

DEFAULT_MAX_CHARS = 3000
DEFAULT_TIMEOUT_SECONDS = 30.0

API_BASE_ENV = "TTSSTUDIO_API_BASE"
MAX_CHARS_ENV = "TTSSTUDIO_MAX_CHARS"
TIMEOUT_ENV = "TTSSTUDIO_TIMEOUT_SECONDS"


@dataclass(slots=True)
class StudioConfig:
    """Runtime configuration for one studio process.

    Attributes:
        api_base: Base URL of the speech service, or `None` when not configured.
        max_chars: Maximum accepted text length per synthesis request.
        timeout_seconds: Per-request HTTP timeout passed to the service client.
    """

    api_base: str | None = None
    max_chars: int = DEFAULT_MAX_CHARS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS

    def validate(self) -> None:
        """Validate configuration values before the session starts."""

        if self.api_base is not None and not self.api_base.startswith(("http://", "https://")):
            raise ValueError("`api_base` must be an absolute `http://` or `https://` URL.")
        if isinstance(self.max_chars, bool) or self.max_chars <= 0:
            raise ValueError("`max_chars` must be a positive integer.")
        if self.timeout_seconds <= 0:
            raise ValueError("`timeout_seconds` must be a positive number.")

    def with_api_base(self, api_base: str | None) -> StudioConfig:
        """Return a copy with `api_base` overridden when a non-blank value is given."""

        normalized = normalize_base_url(api_base)
        if normalized is None:
            return self
        config = StudioConfig(
            api_base=normalized,
            max_chars=self.max_chars,
            timeout_seconds=self.timeout_seconds,
        )
        config.validate()
        return config


class ConfigLoader:
    """Factory methods for creating `StudioConfig` from external sources."""

    _SUPPORTED_YAML_KEYS = frozenset({"api_base", "max_chars", "timeout_seconds"})

    @staticmethod
    def from_env(env: Mapping[str, str] | None = None) -> StudioConfig:
        """Create a validated config from environment variables."""

        env_map: Mapping[str, str] = os.environ if env is None else env

        config = StudioConfig(
            api_base=normalize_base_url(env_map.get(API_BASE_ENV)),
            max_chars=ConfigLoader._optional_env_value(
                env_map, MAX_CHARS_ENV, parse_positive_int, DEFAULT_MAX_CHARS
            ),
            timeout_seconds=ConfigLoader._optional_env_value(
                env_map, TIMEOUT_ENV, parse_positive_float, DEFAULT_TIMEOUT_SECONDS
            ),
        )
        config.validate()
        return config

    @staticmethod
    def from_yaml(path: Path, defaults: StudioConfig | None = None) -> StudioConfig:
        """Create a validated config from a YAML file.

        Keys absent from the file keep the values of `defaults` (usually the
        environment-derived config).
        """

        payload = ConfigLoader._parse_yaml_payload(path.read_text(encoding="utf-8"), path)
        source_label = f"YAML `{path}`"
        ConfigLoader._validate_yaml_keys(payload, source_label)
        base = defaults if defaults is not None else StudioConfig()

        api_base = base.api_base
        if "api_base" in payload:
            api_base = normalize_base_url(payload["api_base"]) or base.api_base

        try:
            max_chars = ConfigLoader._optional_value(
                payload, "max_chars", parse_positive_int, base.max_chars
            )
            timeout_seconds = ConfigLoader._optional_value(
                payload, "timeout_seconds", parse_positive_float, base.timeout_seconds
            )
        except ValueError as exc:
            raise ValueError(f"{source_label} field {exc}") from exc

        config = StudioConfig(
            api_base=api_base,
            max_chars=max_chars,
            timeout_seconds=timeout_seconds,
        )
        config.validate()
        return config

    @staticmethod
    def _parse_yaml_payload(raw_text: str, path: Path) -> Mapping[str, Any]:
        """Parse YAML text and enforce a mapping root payload."""

        try:
            payload = yaml.safe_load(raw_text)
        except yaml.YAMLError as exc:
            raise ValueError(f"YAML config `{path}` is not valid YAML: {exc}") from exc
        if payload is None:
            payload = {}
        if not isinstance(payload, Mapping):
            raise ValueError(f"YAML config `{path}` must contain a top-level mapping/object.")
        return payload

    @staticmethod
    def _validate_yaml_keys(payload: Mapping[str, Any], source_label: str) -> None:
        """Reject keys the studio does not understand."""

        unknown = sorted(
            str(key) for key in set(payload).difference(ConfigLoader._SUPPORTED_YAML_KEYS)
        )
        if unknown:
            key_list = ", ".join(unknown)
            raise ValueError(f"{source_label} includes unsupported key(s): {key_list}.")

    @staticmethod
    def _optional_value(payload: Mapping[str, Any], key: str, parser, default):
        """Parse an optional payload field, keeping `default` for missing or blank values."""

        if key not in payload or normalize_optional_string(payload[key]) is None:
            return default
        return parser(payload[key], key)

    @staticmethod
    def _optional_env_value(env: Mapping[str, str], key: str, parser, default):
        """Parse an optional environment variable, keeping `default` when unset or blank."""

        raw_value = normalize_optional_string(env.get(key))
        if raw_value is None:
            return default
        try:
            return parser(raw_value, key)
        except ValueError as exc:
            raise ValueError(f"Environment variable {exc}") from exc
