"""Job queue controller owning every lip-sync job record.

The controller is the only writer of :class:`JobRecord` instances. It admits
submitted jobs, hands them to the progress reporter and applies the
reporter's asynchronous events:

``pending --(admitted)--> processing --(success)--> completed``
``processing --(failure or cancellation)--> failed``

All handlers run on one event loop and never overlap. Events for unknown or
already finished jobs are discarded, which makes duplicate terminal signals
and late events after deletion harmless.
"""

from __future__ import annotations

import math
from dataclasses import replace
from datetime import datetime, timezone
from typing import Callable
from uuid import uuid4

import structlog

from ..domain.models import (
    CANCELLED_REASON,
    JobRecord,
    JobStatus,
    MediaAsset,
    MediaKind,
    MediaReference,
    MediaSlot,
    TrimRange,
)
from ..exceptions import MissingInput, UnsupportedKind, ensure_found
from ..providers.providers_base import ProgressReporter

logger = structlog.get_logger(__name__)

JobsListener = Callable[[tuple[JobRecord, ...]], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_job_id() -> str:
    return f"job-{uuid4().hex}"


class JobQueueController:
    """Owns the job collection and drives every status transition.

    ``max_concurrent_jobs`` caps how many jobs may be processing at once;
    extra submissions wait in ``pending`` and are admitted oldest first. The
    default (``None``) admits every job immediately.
    """

    def __init__(
        self,
        reporter: ProgressReporter,
        *,
        estimated_job_seconds: float | None = 120.0,
        max_concurrent_jobs: int | None = None,
        clock: Callable[[], datetime] | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        if max_concurrent_jobs is not None and max_concurrent_jobs < 1:
            raise ValueError("max_concurrent_jobs must be positive")
        self._reporter = reporter
        self._estimated_job_seconds = estimated_job_seconds
        self._max_concurrent_jobs = max_concurrent_jobs
        self._clock = clock or _utcnow
        self._id_factory = id_factory or _new_job_id
        # Newest first; ``_index`` points at the same record objects.
        self._jobs: list[JobRecord] = []
        self._index: dict[str, JobRecord] = {}
        self._awaiting_admission: dict[str, tuple[MediaReference, MediaReference]] = {}
        self._listeners: list[JobsListener] = []
        self._closed = False
        reporter.attach(self)

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def closed(self) -> bool:
        return self._closed

    def get_job(self, job_id: str) -> JobRecord:
        record = ensure_found(self._index.get(job_id), entity="job", identifier=job_id)
        return replace(record)

    def list_jobs(self) -> tuple[JobRecord, ...]:
        """Return copies of every record, newest first."""

        return tuple(replace(record) for record in self._jobs)

    def subscribe(self, listener: JobsListener) -> Callable[[], None]:
        """Call ``listener`` with a fresh snapshot after every mutation."""

        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ------------------------------------------------------------------
    # User operations
    # ------------------------------------------------------------------
    def submit(
        self,
        video: MediaAsset | None,
        audio: MediaAsset | None,
        *,
        video_trim: TrimRange | None = None,
        audio_trim: TrimRange | None = None,
    ) -> JobRecord:
        """Create a job for the pair and start it without waiting for the result."""

        self._ensure_open()
        if video is None or audio is None:
            raise MissingInput("both a video or image asset and an audio asset are required")
        if video.slot is not MediaSlot.VISUAL:
            raise UnsupportedKind(f"'{video.name}' is not a video or image asset")
        if audio.kind is not MediaKind.AUDIO:
            raise UnsupportedKind(f"'{audio.name}' is not an audio asset")

        record = JobRecord(
            id=self._id_factory(),
            video_name=video.name,
            audio_name=audio.name,
            status=JobStatus.PENDING,
            progress=0.0,
            created_at=self._clock(),
            estimated_duration_seconds=self._estimated_job_seconds,
            video_trim=video_trim,
            audio_trim=audio_trim,
        )
        self._jobs.insert(0, record)
        self._index[record.id] = record
        self._awaiting_admission[record.id] = (
            MediaReference(asset=video, trim=video_trim),
            MediaReference(asset=audio, trim=audio_trim),
        )
        logger.info(
            "jobs.submitted",
            job_id=record.id,
            video=video.name,
            audio=audio.name,
            video_trim=_trim_repr(video_trim),
            audio_trim=_trim_repr(audio_trim),
        )
        self._admit_pending()
        self._publish()
        return replace(record)

    def cancel(self, job_id: str) -> JobRecord:
        """Fail a non-terminal job with reason ``cancelled`` and keep it listed."""

        record = ensure_found(self._index.get(job_id), entity="job", identifier=job_id)
        if record.is_terminal:
            return replace(record)
        was_processing = record.status is JobStatus.PROCESSING
        self._awaiting_admission.pop(job_id, None)
        record.status = JobStatus.FAILED
        record.failure_reason = CANCELLED_REASON
        if was_processing:
            self._reporter.cancel_job(job_id)
        logger.info("jobs.cancelled", job_id=job_id, was_processing=was_processing)
        self._admit_pending()
        self._publish()
        return replace(record)

    def delete(self, job_id: str) -> None:
        """Remove a job in any state; a running job is cancelled first."""

        record = ensure_found(self._index.get(job_id), entity="job", identifier=job_id)
        if record.status is JobStatus.PROCESSING:
            self._reporter.cancel_job(job_id)
        self._jobs.remove(record)
        del self._index[job_id]
        self._awaiting_admission.pop(job_id, None)
        logger.info("jobs.deleted", job_id=job_id, status=record.status.value)
        self._admit_pending()
        self._publish()

    async def aclose(self) -> None:
        """Stop accepting work and release the reporter."""

        if self._closed:
            return
        self._closed = True
        self._awaiting_admission.clear()
        self._listeners.clear()
        await self._reporter.aclose()
        logger.info("jobs.controller.closed", jobs=len(self._jobs))

    # ------------------------------------------------------------------
    # Reporter events
    # ------------------------------------------------------------------
    def on_progress(self, job_id: str, percent: float) -> None:
        record = self._running_record(job_id, signal="progress")
        if record is None:
            return
        if not math.isfinite(percent):
            logger.warning("jobs.progress.invalid", job_id=job_id, percent=percent)
            return
        value = min(max(float(percent), 0.0), 100.0)
        if value <= record.progress:
            return
        record.progress = value
        self._publish()

    def on_success(self, job_id: str, result_handle: str) -> None:
        record = self._running_record(job_id, signal="success")
        if record is None:
            return
        record.status = JobStatus.COMPLETED
        record.progress = 100.0
        record.completed_at = self._clock()
        record.result_handle = result_handle
        logger.info(
            "jobs.completed",
            job_id=job_id,
            result_handle=result_handle,
            processing_seconds=record.processing_seconds,
        )
        self._admit_pending()
        self._publish()

    def on_failure(self, job_id: str, reason: str) -> None:
        record = self._running_record(job_id, signal="failure")
        if record is None:
            return
        record.status = JobStatus.FAILED
        record.failure_reason = reason or "unknown failure"
        logger.warning("jobs.failed", job_id=job_id, reason=record.failure_reason)
        self._admit_pending()
        self._publish()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ensure_open(self) -> None:
        if self._closed:
            raise RuntimeError("job queue controller is closed")

    def _running_record(self, job_id: str, *, signal: str) -> JobRecord | None:
        record = None if self._closed else self._index.get(job_id)
        if record is None or record.status is not JobStatus.PROCESSING:
            logger.debug(
                "jobs.event.discarded",
                job_id=job_id,
                signal=signal,
                status=record.status.value if record is not None else None,
            )
            return None
        return record

    def _has_capacity(self) -> bool:
        if self._max_concurrent_jobs is None:
            return True
        running = sum(1 for record in self._jobs if record.status is JobStatus.PROCESSING)
        return running < self._max_concurrent_jobs

    def _admit_pending(self) -> None:
        # ``_awaiting_admission`` preserves submission order, oldest first.
        while self._awaiting_admission and self._has_capacity() and not self._closed:
            job_id = next(iter(self._awaiting_admission))
            video, audio = self._awaiting_admission.pop(job_id)
            record = self._index[job_id]
            record.status = JobStatus.PROCESSING
            try:
                self._reporter.begin_job(job_id, video, audio)
            except Exception as exc:
                logger.exception("jobs.begin.failed", job_id=job_id)
                record.status = JobStatus.FAILED
                record.failure_reason = f"processing could not start: {exc}"
                continue
            logger.info("jobs.admitted", job_id=job_id)

    def _publish(self) -> None:
        if not self._listeners:
            return
        snapshot = self.list_jobs()
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("jobs.listener.failed")


def _trim_repr(trim: TrimRange | None) -> list[float] | None:
    if trim is None:
        return None
    return [trim.start, trim.end]


__all__ = ["JobQueueController", "JobsListener"]
