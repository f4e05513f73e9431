"""Domain models for the lip-sync studio.

The module exposes lightweight dataclasses mirroring the entities the studio
and the job queue exchange: uploaded media assets, committed trim ranges and
job records. Trim ranges and assets are immutable values; job records are
mutated only by :class:`~src.lipsync.jobs.job_queue.JobQueueController`.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Mapping

from ...exceptions import InvalidDuration, InvalidRange

MIN_TRIM_SPAN_SECONDS = 0.1
"""Smallest span a committed trim range may cover."""

SPAN_TOLERANCE = 1e-9
"""Float tolerance applied when comparing spans against the minimum."""

CANCELLED_REASON = "cancelled"


class MediaKind(str, Enum):
    """Coarse media category derived from the MIME family."""

    VIDEO = "video"
    IMAGE = "image"
    AUDIO = "audio"

    @property
    def slot(self) -> "MediaSlot":
        if self is MediaKind.AUDIO:
            return MediaSlot.AUDIO
        return MediaSlot.VISUAL

    @property
    def is_timed(self) -> bool:
        """Images carry no timeline and therefore cannot be trimmed."""

        return self is not MediaKind.IMAGE


class MediaSlot(str, Enum):
    """Studio input slots: one visual (video or image) and one audio."""

    VISUAL = "visual"
    AUDIO = "audio"


class JobStatus(str, Enum):
    """Processing states of a lip-sync job.

    ``pending`` is the initial state of every record; admission moves it to
    ``processing``. ``completed`` and ``failed`` are terminal.
    """

    PENDING = "pending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


@dataclass(slots=True, frozen=True)
class MediaAsset:
    """Handle to an uploaded blob; the bytes themselves live in media storage."""

    id: str
    name: str
    size_bytes: int
    kind: MediaKind
    duration_seconds: float | None = None
    content_type: str | None = None
    location: str | None = None

    def __post_init__(self) -> None:
        if self.size_bytes < 0:
            raise ValueError("size_bytes must not be negative")
        if self.duration_seconds is not None and (
            not math.isfinite(self.duration_seconds) or self.duration_seconds < 0
        ):
            raise InvalidDuration(
                f"duration of '{self.name}' must be a finite, non-negative number"
            )

    @property
    def slot(self) -> MediaSlot:
        return self.kind.slot


@dataclass(slots=True, frozen=True)
class TrimRange:
    """Committed ``[start, end]`` sub-interval of a media timeline, in seconds."""

    start: float
    end: float

    def __post_init__(self) -> None:
        if not (math.isfinite(self.start) and math.isfinite(self.end)):
            raise InvalidRange("trim endpoints must be finite")
        if self.start < 0 or self.start >= self.end:
            raise InvalidRange(
                f"trim range must satisfy 0 <= start < end, got [{self.start}, {self.end}]"
            )

    @property
    def duration(self) -> float:
        return self.end - self.start

    def is_wide_enough(self, min_span: float = MIN_TRIM_SPAN_SECONDS) -> bool:
        return self.duration + SPAN_TOLERANCE >= min_span


@dataclass(slots=True, frozen=True)
class MediaReference:
    """What the processing worker receives for one side of a job."""

    asset: MediaAsset
    trim: TrimRange | None = None

    @property
    def name(self) -> str:
        return self.asset.name


@dataclass(slots=True)
class JobRecord:
    """Queue entry representing a single (visual, audio) processing request."""

    id: str
    video_name: str
    audio_name: str
    status: JobStatus
    progress: float
    created_at: datetime
    completed_at: datetime | None = None
    result_handle: str | None = None
    estimated_duration_seconds: float | None = None
    failure_reason: str | None = None
    video_trim: TrimRange | None = None
    audio_trim: TrimRange | None = None

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    @property
    def estimated_remaining_seconds(self) -> float | None:
        """Advisory countdown derived from the estimate and current progress."""

        if self.estimated_duration_seconds is None or self.is_terminal:
            return None
        return self.estimated_duration_seconds * (1 - self.progress / 100)

    @property
    def processing_seconds(self) -> float | None:
        if self.completed_at is None:
            return None
        return (self.completed_at - self.created_at).total_seconds()


@dataclass(slots=True, frozen=True)
class TrimSessionState:
    """Read-only view of a trim session for presentation."""

    slot: MediaSlot
    duration_seconds: float
    candidate_range: TrimRange
    playback_position: float


@dataclass(slots=True, frozen=True)
class StudioSnapshot:
    """Everything the presentation layer renders after a mutation."""

    assets: Mapping[MediaSlot, MediaAsset] = field(default_factory=dict)
    trim_sessions: Mapping[MediaSlot, TrimSessionState] = field(default_factory=dict)
    committed_trims: Mapping[MediaSlot, TrimRange] = field(default_factory=dict)
    jobs: tuple[JobRecord, ...] = ()


__all__ = [
    "CANCELLED_REASON",
    "JobRecord",
    "JobStatus",
    "MIN_TRIM_SPAN_SECONDS",
    "MediaAsset",
    "MediaKind",
    "MediaReference",
    "MediaSlot",
    "SPAN_TOLERANCE",
    "StudioSnapshot",
    "TrimRange",
    "TrimSessionState",
]
