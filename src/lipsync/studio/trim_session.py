"""Per-asset trim working state."""

from __future__ import annotations

import math

from ..domain.models import (
    MIN_TRIM_SPAN_SECONDS,
    SPAN_TOLERANCE,
    MediaAsset,
    MediaSlot,
    TrimRange,
    TrimSessionState,
)
from ..domain.trimming import clamp_range, compute_initial_range, validate_duration
from ..exceptions import InvalidRange, RangeTooNarrow, UnsupportedKind


class TrimSession:
    """Tentative trim range and playback cursor for one media asset.

    The session is created once the asset duration is known and lives until
    the asset is replaced or removed. :meth:`apply` commits the candidate
    range without ending the session, so the user may trim again.
    """

    def __init__(
        self,
        duration_seconds: float | None,
        *,
        min_span: float = MIN_TRIM_SPAN_SECONDS,
    ) -> None:
        self.duration_seconds = validate_duration(duration_seconds)
        self.min_span = min_span
        self.candidate_range = compute_initial_range(self.duration_seconds)
        self.playback_position = 0.0

    @classmethod
    def for_asset(
        cls, asset: MediaAsset, *, min_span: float = MIN_TRIM_SPAN_SECONDS
    ) -> "TrimSession":
        if not asset.kind.is_timed:
            raise UnsupportedKind(f"{asset.kind.value} assets have no timeline to trim")
        return cls(asset.duration_seconds, min_span=min_span)

    def seek(self, position: float) -> float:
        if not math.isfinite(position):
            raise InvalidRange("playback position must be finite")
        self.playback_position = min(max(float(position), 0.0), self.duration_seconds)
        return self.playback_position

    def adjust_range(self, new_start: float, new_end: float) -> TrimRange:
        if not (math.isfinite(new_start) and math.isfinite(new_end)):
            raise InvalidRange("trim endpoints must be finite")
        if new_start >= new_end:
            raise InvalidRange(f"trim start {new_start} must precede end {new_end}")
        if new_end - new_start + SPAN_TOLERANCE < self.min_span:
            raise InvalidRange(
                f"trim endpoints must be at least {self.min_span}s apart, "
                f"got {new_end - new_start:.3f}s"
            )
        self.candidate_range = clamp_range(
            (new_start, new_end), self.duration_seconds, min_span=self.min_span
        )
        return self.candidate_range

    def reset(self) -> TrimRange:
        self.candidate_range = compute_initial_range(self.duration_seconds)
        return self.candidate_range

    def apply(self) -> TrimRange:
        if not self.candidate_range.is_wide_enough(self.min_span):
            raise RangeTooNarrow(
                f"trim span {self.candidate_range.duration:.3f}s is below {self.min_span}s"
            )
        return self.candidate_range

    def state(self, slot: MediaSlot) -> TrimSessionState:
        return TrimSessionState(
            slot=slot,
            duration_seconds=self.duration_seconds,
            candidate_range=self.candidate_range,
            playback_position=self.playback_position,
        )


__all__ = ["TrimSession"]
