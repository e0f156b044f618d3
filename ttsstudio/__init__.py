"""Top-level package for TTS Studio.

This package provides a client-side orchestration layer for a remote
text-to-speech service: voice catalog loading, language/voice/engine
selection, synthesis requests, and a bounded recent-history list. The main
entry point is `StudioSession`.
"""

from .session import StudioSession

__all__ = ["StudioSession", "__version__"]

__version__ = "0.1.0"
