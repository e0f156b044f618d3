"""Remote speech service adapters."""

from .client import StudioServiceClient

__all__ = ["StudioServiceClient"]
