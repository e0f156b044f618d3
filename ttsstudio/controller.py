"""Synthesis request lifecycle.

Responsibilities:
- Gate submissions on the current selection and text.
- Drive the `IDLE -> BUSY -> SUCCESS | FAILED` state machine around exactly one
  service call per submission.
- Record successful results in the history ledger.

The busy state is always left on exit. Any error raised while a submission
is in flight, including one from the state observer, ends in `FAILED` with
its message shown instead of propagating.
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

from .config import DEFAULT_MAX_CHARS
from .errors import SynthesisFailedError
from .history import HistoryLedger
from .models.datatypes import (
    ControllerState,
    HistoryEntry,
    Selection,
    SynthesisRequest,
    SynthesisResult,
)
from .selection import can_submit
from .service.client import FALLBACK_SYNTHESIS_FAILURE, StudioServiceClient
from .telemetry.logger import StudioLogger

StateCallback = Callable[[ControllerState], None]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class SynthesisController:
    """Issue synthesis requests and expose their outcome as observable state."""

    def __init__(
        self,
        client: StudioServiceClient,
        history: HistoryLedger,
        *,
        max_chars: int = DEFAULT_MAX_CHARS,
        logger: StudioLogger | None = None,
        clock: Callable[[], datetime] = utc_now,
        on_state_change: StateCallback | None = None,
    ) -> None:
        """Initialize controller collaborators and start in `IDLE`."""

        self._client = client
        self._history = history
        self.max_chars = max_chars
        self._logger = logger
        self._clock = clock
        self._on_state_change = on_state_change
        self._state = ControllerState.IDLE
        self.error_message = ""
        self.current_result: SynthesisResult | None = None

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def busy(self) -> bool:
        """Return `True` while a submission is in flight."""

        return self._state is ControllerState.BUSY

    def can_submit(self, text: str, selection: Selection) -> bool:
        return can_submit(text, selection, busy=self.busy, max_chars=self.max_chars)

    def clear(self) -> None:
        """Drop the current result and error message; history is untouched."""

        self.current_result = None
        self.error_message = ""

    def submit(self, text: str, selection: Selection) -> SynthesisResult | None:
        """Synthesize `text` with `selection`.

        Returns the new result on success and `None` when the submission was
        rejected by validation or failed; on failure `error_message` is set.
        """

        if not self.can_submit(text, selection):
            self._log(
                "debug",
                "rejected",
                chars=len(text),
                busy=self.busy,
                has_voice=selection.has_voice,
            )
            return None

        self.error_message = ""
        self.current_result = None
        request = SynthesisRequest(
            text=text,
            voice_id=selection.voice_id,
            engine=selection.engine,
        )
        self._log(
            "info",
            "start",
            chars=len(text),
            voice=request.voice_id,
            engine=request.engine or "standard",
        )

        try:
            self._transition(ControllerState.BUSY)
            url = self._client.synthesize(request)
            return self._record_success(request, selection, url)
        except SynthesisFailedError as exc:
            self.error_message = str(exc) or FALLBACK_SYNTHESIS_FAILURE
            if self._logger is not None:
                self._logger.failure(
                    "synthesis",
                    exc.failure_kind,
                    status_code=exc.status_code or "none",
                )
            self._transition(ControllerState.FAILED)
            return None
        except Exception as exc:
            self.error_message = str(exc) or FALLBACK_SYNTHESIS_FAILURE
            if self._logger is not None:
                self._logger.failure("synthesis", "unexpected", exception=type(exc).__name__)
            self._transition(ControllerState.FAILED)
            return None
        finally:
            if self.busy:
                self.error_message = self.error_message or FALLBACK_SYNTHESIS_FAILURE
                self._transition(ControllerState.FAILED)

    def _record_success(
        self, request: SynthesisRequest, selection: Selection, url: str
    ) -> SynthesisResult:
        now = self._clock()
        result = SynthesisResult(
            url=url,
            voice_id=request.voice_id,
            language_code=selection.language_code,
            engine=request.engine,
            created_at=now,
        )
        self.current_result = result
        self._history.push(HistoryEntry(result=result, recorded_at=now))
        self._log("info", "success", voice=result.voice_id, history=len(self._history))
        if self._logger is not None:
            self._logger.debug("history", "push", size=len(self._history))
        self._transition(ControllerState.SUCCESS)
        return result

    def _transition(self, state: ControllerState) -> None:
        self._state = state
        if self._on_state_change is not None:
            self._on_state_change(state)

    def _log(self, level: str, event: str, **context: object) -> None:
        if self._logger is None:
            return
        getattr(self._logger, level)("synthesis", event, **context)
