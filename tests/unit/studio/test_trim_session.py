from __future__ import annotations

import math

import pytest

from src.lipsync.domain.models import MediaAsset, MediaSlot, TrimRange
from src.lipsync.exceptions import InvalidDuration, InvalidRange, UnsupportedKind
from src.lipsync.studio.trim_session import TrimSession

pytestmark = pytest.mark.unit


def test_new_session_selects_full_media() -> None:
    session = TrimSession(10.0)

    assert session.candidate_range == TrimRange(start=0.0, end=10.0)
    assert session.playback_position == 0.0


def test_session_requires_known_duration() -> None:
    with pytest.raises(InvalidDuration):
        TrimSession(None)


def test_seek_clamps_into_timeline() -> None:
    session = TrimSession(10.0)

    assert session.seek(4.5) == 4.5
    assert session.seek(-3.0) == 0.0
    assert session.seek(42.0) == 10.0


def test_seek_rejects_nan() -> None:
    session = TrimSession(10.0)

    with pytest.raises(InvalidRange):
        session.seek(math.nan)


def test_adjust_then_apply_commits_candidate() -> None:
    session = TrimSession(10.0)

    session.adjust_range(2.0, 6.5)

    assert session.apply() == TrimRange(start=2.0, end=6.5)


def test_adjust_clamps_end_to_duration() -> None:
    session = TrimSession(10.0)

    assert session.adjust_range(8.0, 12.0) == TrimRange(start=8.0, end=10.0)


@pytest.mark.parametrize("start, end", [(5.0, 5.0), (6.0, 2.0), (5.0, 5.05)])
def test_adjust_rejects_collapsed_or_inverted_range(start: float, end: float) -> None:
    session = TrimSession(10.0)

    with pytest.raises(InvalidRange):
        session.adjust_range(start, end)

    assert session.candidate_range == TrimRange(start=0.0, end=10.0)


def test_adjust_accepts_exact_minimum_span() -> None:
    session = TrimSession(20.0)

    assert session.adjust_range(10.0, 10.1) == TrimRange(start=10.0, end=10.1)


def test_reset_restores_full_range() -> None:
    session = TrimSession(10.0)
    session.adjust_range(1.0, 2.0)

    assert session.reset() == TrimRange(start=0.0, end=10.0)


def test_apply_can_be_repeated_after_new_adjustment() -> None:
    session = TrimSession(10.0)
    session.adjust_range(1.0, 3.0)
    first = session.apply()
    session.adjust_range(4.0, 9.0)

    assert first == TrimRange(start=1.0, end=3.0)
    assert session.apply() == TrimRange(start=4.0, end=9.0)


def test_images_have_no_trim_session(image_asset: MediaAsset) -> None:
    with pytest.raises(UnsupportedKind):
        TrimSession.for_asset(image_asset)


def test_state_reports_slot_and_cursor(video_asset: MediaAsset) -> None:
    session = TrimSession.for_asset(video_asset)
    session.seek(3.0)

    state = session.state(MediaSlot.VISUAL)

    assert state.slot is MediaSlot.VISUAL
    assert state.duration_seconds == 10.0
    assert state.playback_position == 3.0


def test_adjust_below_minimum_span_on_long_media_fails() -> None:
    session = TrimSession(95.3)

    with pytest.raises(InvalidRange):
        session.adjust_range(10.0, 10.05)
