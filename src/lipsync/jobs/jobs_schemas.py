"""Pydantic schemas for the job queue API."""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.models import JobRecord, TrimRange


class TrimRangeModel(BaseModel):
    """Committed trim range in seconds."""

    model_config = ConfigDict(extra="forbid")

    start: float = Field(..., ge=0, description="Range start in seconds.")
    end: float = Field(..., gt=0, description="Range end in seconds.")
    duration: float = Field(..., gt=0, description="Span covered by the range.")

    @classmethod
    def of(cls, trim: TrimRange) -> "TrimRangeModel":
        return cls(start=trim.start, end=trim.end, duration=trim.duration)

    @classmethod
    def from_domain(cls, trim: TrimRange | None) -> Optional["TrimRangeModel"]:
        if trim is None:
            return None
        return cls.of(trim)


class JobResponse(BaseModel):
    """Externally visible state of one processing job."""

    id: str
    video_name: str
    audio_name: str
    status: Literal["pending", "processing", "completed", "failed"]
    progress: float = Field(..., ge=0, le=100)
    created_at: datetime
    completed_at: Optional[datetime] = None
    result_handle: Optional[str] = None
    failure_reason: Optional[str] = None
    estimated_duration_seconds: Optional[float] = None
    estimated_remaining_seconds: Optional[float] = None
    processing_seconds: Optional[float] = None
    video_trim: Optional[TrimRangeModel] = None
    audio_trim: Optional[TrimRangeModel] = None

    @classmethod
    def from_domain(cls, record: JobRecord) -> "JobResponse":
        return cls(
            id=record.id,
            video_name=record.video_name,
            audio_name=record.audio_name,
            status=record.status.value,
            progress=record.progress,
            created_at=record.created_at,
            completed_at=record.completed_at,
            result_handle=record.result_handle,
            failure_reason=record.failure_reason,
            estimated_duration_seconds=record.estimated_duration_seconds,
            estimated_remaining_seconds=record.estimated_remaining_seconds,
            processing_seconds=record.processing_seconds,
            video_trim=TrimRangeModel.from_domain(record.video_trim),
            audio_trim=TrimRangeModel.from_domain(record.audio_trim),
        )


class JobListResponse(BaseModel):
    """Jobs ordered newest first."""

    jobs: List[JobResponse]


class ProgressEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    percent: float = Field(..., description="Progress in percent; clamped to [0, 100].")


class SuccessEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    result_handle: str = Field(..., min_length=1)


class FailureEvent(BaseModel):
    model_config = ConfigDict(extra="forbid")

    reason: str = Field(..., min_length=1)


__all__ = [
    "FailureEvent",
    "JobListResponse",
    "JobResponse",
    "ProgressEvent",
    "SuccessEvent",
    "TrimRangeModel",
]
