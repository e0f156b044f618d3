"""Domain exceptions for service calls and CLI diagnostics."""

from __future__ import annotations


class StudioStageError(RuntimeError):
    """Raised when a specific command stage fails."""

    def __init__(
        self,
        *,
        stage: str,
        detail: str,
        hint: str | None = None,
    ) -> None:
        """Initialize a stage-scoped command error."""

        super().__init__(detail)
        self.stage = stage
        self.detail = detail
        self.hint = hint


class StudioServiceError(RuntimeError):
    """Raised when the remote speech service fails or returns malformed output."""

    def __init__(
        self,
        message: str,
        *,
        failure_kind: str = "unknown",
        status_code: int | None = None,
        service_message: str | None = None,
    ) -> None:
        """Initialize service error metadata for user-facing diagnostics."""

        super().__init__(message)
        self.failure_kind = failure_kind
        self.status_code = status_code
        self.service_message = service_message


class CatalogUnavailableError(StudioServiceError):
    """Raised when the voice listing cannot be fetched or parsed."""


class SynthesisFailedError(StudioServiceError):
    """Raised when a synthesis call does not yield a usable audio URL."""
