"""Domain models and trim rules of the lip-sync studio."""

from .models import (
    CANCELLED_REASON,
    MIN_TRIM_SPAN_SECONDS,
    JobRecord,
    JobStatus,
    MediaAsset,
    MediaKind,
    MediaReference,
    MediaSlot,
    StudioSnapshot,
    TrimRange,
    TrimSessionState,
)
from .trimming import clamp_range, compute_initial_range, validate_duration

__all__ = [
    "CANCELLED_REASON",
    "JobRecord",
    "JobStatus",
    "MIN_TRIM_SPAN_SECONDS",
    "MediaAsset",
    "MediaKind",
    "MediaReference",
    "MediaSlot",
    "StudioSnapshot",
    "TrimRange",
    "TrimSessionState",
    "clamp_range",
    "compute_initial_range",
    "validate_duration",
]
