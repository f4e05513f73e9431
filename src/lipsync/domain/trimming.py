"""Trim range calculation helpers.

Pure functions deriving valid ``[start, end]`` windows from a media
duration. The studio trim sessions and the HTTP layer share them so the
same clamping rules apply everywhere.
"""

from __future__ import annotations

import math
from typing import Tuple, Union

from ..exceptions import InvalidDuration, InvalidRange, RangeTooNarrow
from .models import MIN_TRIM_SPAN_SECONDS, SPAN_TOLERANCE, TrimRange

RangeLike = Union[TrimRange, Tuple[float, float]]


def validate_duration(duration_seconds: float | None) -> float:
    """Return ``duration_seconds`` as float or raise :class:`InvalidDuration`."""

    if duration_seconds is None:
        raise InvalidDuration("media duration is unknown")
    duration = float(duration_seconds)
    if not math.isfinite(duration) or duration <= 0:
        raise InvalidDuration(f"media duration must be positive and finite, got {duration}")
    return duration


def compute_initial_range(duration_seconds: float | None) -> TrimRange:
    """Return the full-length range ``[0, duration]``."""

    duration = validate_duration(duration_seconds)
    return TrimRange(start=0.0, end=duration)


def clamp_range(
    candidate: RangeLike,
    duration_seconds: float | None,
    *,
    min_span: float = MIN_TRIM_SPAN_SECONDS,
) -> TrimRange:
    """Clamp ``candidate`` into the media timeline keeping at least ``min_span``.

    ``start`` lands in ``[0, duration)`` and ``end`` in ``(start, duration]``.
    A span shorter than ``min_span`` is widened by moving ``end`` forward; when
    the end of the media stops it, ``start`` is pulled back instead.
    """

    duration = validate_duration(duration_seconds)
    if duration + SPAN_TOLERANCE < min_span:
        raise RangeTooNarrow(
            f"media of {duration}s is shorter than the minimum trim span of {min_span}s"
        )

    if isinstance(candidate, TrimRange):
        start, end = candidate.start, candidate.end
    else:
        start, end = (float(value) for value in candidate)
    if not (math.isfinite(start) and math.isfinite(end)):
        raise InvalidRange("trim endpoints must be finite")

    start = min(max(start, 0.0), duration)
    end = min(max(end, start), duration)
    if end - start + SPAN_TOLERANCE < min_span:
        end = min(start + min_span, duration)
        if end - start + SPAN_TOLERANCE < min_span:
            start = max(0.0, end - min_span)
    return TrimRange(start=start, end=end)


__all__ = [
    "RangeLike",
    "clamp_range",
    "compute_initial_range",
    "validate_duration",
]
