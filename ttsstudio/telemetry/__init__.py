"""Telemetry and observability helpers.

This package emits deterministic event logs for catalog loads and synthesis runs.
"""

from .logger import StudioLogger

__all__ = ["StudioLogger"]
