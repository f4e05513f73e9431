"""Progress reporter contracts.

A progress reporter performs (or simulates) the lip-sync computation for a
job and reports back through a :class:`ProgressListener`. The job queue
controller is the listener; reporters never touch job records directly.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Protocol

from ..domain.models import MediaReference


class ProgressListener(Protocol):
    """Receiver of asynchronous progress and terminal events."""

    def on_progress(self, job_id: str, percent: float) -> None:
        """Handle a progress update in percent."""

    def on_success(self, job_id: str, result_handle: str) -> None:
        """Handle successful completion carrying an opaque result handle."""

    def on_failure(self, job_id: str, reason: str) -> None:
        """Handle a failure with a human readable reason."""


class ProgressReporter(ABC):
    """Base interface for processing backends.

    ``begin_job`` and ``cancel_job`` are fire-and-forget: they schedule work
    and return immediately. Cancellation is best effort.
    """

    def __init__(self) -> None:
        self._listener: ProgressListener | None = None

    def attach(self, listener: ProgressListener) -> None:
        self._listener = listener

    @property
    def listener(self) -> ProgressListener:
        if self._listener is None:
            raise RuntimeError("progress reporter has no listener attached")
        return self._listener

    @abstractmethod
    def begin_job(
        self, job_id: str, video: MediaReference, audio: MediaReference
    ) -> None:
        """Start processing ``job_id`` without waiting for it to finish."""

    @abstractmethod
    def cancel_job(self, job_id: str) -> None:
        """Request cancellation of ``job_id``; no acknowledgement is returned."""

    async def aclose(self) -> None:
        """Release background resources held by the reporter."""


__all__ = ["ProgressListener", "ProgressReporter"]
