"""Structured studio logging utilities.

Responsibilities:
- Emit concise, deterministic component-level event logs through `loguru`.
- Keep user text and service payloads out of log lines.
"""

from __future__ import annotations

import sys
from typing import TextIO

from loguru import logger as _loguru_logger


def _sanitize_context_value(value: object) -> str:
    """Convert context values into stable, shell-safe tokens."""

    raw = str(value).strip()
    if not raw:
        return "none"
    return "".join(
        character if character.isalnum() or character in {"-", "_", ".", ":", "/"} else "_"
        for character in raw
    )


def _format_context(context: dict[str, object]) -> str:
    """Serialize context key/value pairs in deterministic key order."""

    if not context:
        return ""
    tokens = [
        f"{key}={_sanitize_context_value(context[key])}"
        for key in sorted(context.keys())
    ]
    return " " + " ".join(tokens)


class StudioLogger:
    """Emit deterministic event logs for catalog, synthesis, and history activity."""

    def __init__(self, sink: TextIO | None = None, level: str = "INFO") -> None:
        """Initialize logger sink and configure deterministic formatting."""

        self._sink = sink or sys.stderr
        _loguru_logger.remove()
        _loguru_logger.add(self._sink, format="{message}", level=level, colorize=False)

    def _emit(self, level: str, component: str, event: str, **context: object) -> None:
        """Emit one structured studio log line."""

        line = (
            f"[studio] level={level} component={component} event={event}"
            f"{_format_context(context)}"
        )
        _loguru_logger.log(level, line)

    def info(self, component: str, event: str, **context: object) -> None:
        """Emit an informational event."""

        self._emit("INFO", component, event, **context)

    def debug(self, component: str, event: str, **context: object) -> None:
        self._emit("DEBUG", component, event, **context)

    def warning(self, component: str, event: str, **context: object) -> None:
        """Emit a recoverable-problem event such as a catalog fallback."""

        self._emit("WARNING", component, event, **context)

    def failure(self, component: str, error_type: str, **context: object) -> None:
        """Emit a failure event without sensitive payload details."""

        self._emit("ERROR", component, "failure", error_type=error_type, **context)
