"""Domain level exceptions shared by the studio and the job queue."""

from __future__ import annotations

from typing import TypeVar

__all__ = [
    "LipSyncError",
    "TrimError",
    "InvalidDuration",
    "RangeTooNarrow",
    "InvalidRange",
    "MissingInput",
    "UnsupportedKind",
    "JobNotFound",
    "PayloadTooLarge",
    "ensure_found",
]

T = TypeVar("T")


class LipSyncError(Exception):
    """Base class for application specific errors.

    ``code`` is the machine readable identifier surfaced by the HTTP layer.
    """

    code: str = "lipsync_error"


class TrimError(LipSyncError):
    """Base class for trim calculation failures (recoverable by the caller)."""


class InvalidDuration(TrimError):
    """Raised when a media duration is missing, non-positive or not finite."""

    code = "invalid_duration"


class RangeTooNarrow(TrimError):
    """Raised when a trim range cannot reach the minimum span."""

    code = "range_too_narrow"


class InvalidRange(TrimError):
    """Raised when requested trim endpoints are out of order or too close."""

    code = "invalid_range"


class MissingInput(LipSyncError):
    """Raised when an operation needs an asset that has not been supplied."""

    code = "missing_input"


class UnsupportedKind(LipSyncError):
    """Raised for media outside the ``video/*``, ``image/*``, ``audio/*`` families."""

    code = "unsupported_kind"


class JobNotFound(LipSyncError):
    """Raised when a job id is not present in the queue."""

    code = "job_not_found"


class PayloadTooLarge(LipSyncError):
    """Raised when an uploaded file exceeds the configured limit."""

    code = "payload_too_large"


def ensure_found(record: T | None, *, entity: str, identifier: str) -> T:
    """Ensure a record exists, otherwise raise :class:`JobNotFound`."""

    if record is None:
        raise JobNotFound(f"{entity} '{identifier}' not found")
    return record
