"""Shared typed data models for TTS Studio.

This package contains dataclasses used across studio modules to avoid
cross-module coupling and circular imports.
"""

from .datatypes import (
    CatalogLoadResult,
    CatalogOutcome,
    ControllerState,
    HistoryEntry,
    Language,
    Selection,
    SynthesisRequest,
    SynthesisResult,
    Voice,
)

__all__ = [
    "CatalogLoadResult",
    "CatalogOutcome",
    "ControllerState",
    "HistoryEntry",
    "Language",
    "Selection",
    "SynthesisRequest",
    "SynthesisResult",
    "Voice",
]
