from __future__ import annotations

import logging

import pytest

from src.lipsync.domain.models import (
    JobStatus,
    MediaAsset,
    MediaKind,
    MediaSlot,
    StudioSnapshot,
    TrimRange,
)
from src.lipsync.exceptions import MissingInput
from src.lipsync.jobs.job_queue import JobQueueController
from src.lipsync.logging import configure_logging
from src.lipsync.studio.studio_service import StudioService
from tests.mocks.reporters import RecordingReporter, SequenceIds

pytestmark = pytest.mark.unit


@pytest.fixture
def reporter() -> RecordingReporter:
    return RecordingReporter()


@pytest.fixture
def studio(reporter: RecordingReporter) -> StudioService:
    controller = JobQueueController(reporter, id_factory=SequenceIds())
    return StudioService(controller)


def test_attach_timed_asset_opens_trim_session(
    studio: StudioService, video_asset: MediaAsset
) -> None:
    studio.attach_asset(video_asset)

    session = studio.trim_session(MediaSlot.VISUAL)
    assert session.candidate_range == TrimRange(start=0.0, end=10.0)
    assert studio.asset(MediaSlot.VISUAL) == video_asset


def test_image_asset_fills_visual_slot_without_trim(
    studio: StudioService, image_asset: MediaAsset
) -> None:
    studio.attach_asset(image_asset)

    assert studio.asset(MediaSlot.VISUAL) == image_asset
    with pytest.raises(MissingInput):
        studio.trim_session(MediaSlot.VISUAL)


def test_replacing_asset_discards_previous_trim(
    studio: StudioService, video_asset: MediaAsset
) -> None:
    studio.attach_asset(video_asset)
    studio.adjust_trim(MediaSlot.VISUAL, 2.0, 4.0)
    studio.apply_trim(MediaSlot.VISUAL)

    replacement = MediaAsset(
        id="video-2",
        name="take-two.mp4",
        size_bytes=4096,
        kind=MediaKind.VIDEO,
        duration_seconds=30.0,
    )
    studio.attach_asset(replacement)

    assert studio.committed_trim(MediaSlot.VISUAL) is None
    assert studio.trim_session(MediaSlot.VISUAL).candidate_range == TrimRange(0.0, 30.0)


def test_remove_asset_clears_slot(
    studio: StudioService, audio_asset: MediaAsset
) -> None:
    studio.attach_asset(audio_asset)

    removed = studio.remove_asset(MediaSlot.AUDIO)

    assert removed == audio_asset
    assert studio.asset(MediaSlot.AUDIO) is None
    assert studio.remove_asset(MediaSlot.AUDIO) is None


def test_submit_requires_both_slots(
    studio: StudioService, video_asset: MediaAsset
) -> None:
    studio.attach_asset(video_asset)

    with pytest.raises(MissingInput):
        studio.submit_job()


def test_submit_forwards_committed_trims(
    studio: StudioService,
    reporter: RecordingReporter,
    video_asset: MediaAsset,
    audio_asset: MediaAsset,
) -> None:
    studio.attach_asset(video_asset)
    studio.attach_asset(audio_asset)
    studio.adjust_trim(MediaSlot.VISUAL, 1.0, 5.0)
    studio.apply_trim(MediaSlot.VISUAL)
    # Uncommitted audio adjustments are not submitted.
    studio.adjust_trim(MediaSlot.AUDIO, 2.0, 3.0)

    record = studio.submit_job()

    assert record.status is JobStatus.PROCESSING
    assert record.video_trim == TrimRange(start=1.0, end=5.0)
    assert record.audio_trim is None
    started = reporter.started[0]
    assert started.video.trim == TrimRange(start=1.0, end=5.0)
    assert started.audio.asset == audio_asset


def test_subscribers_receive_snapshots_for_studio_and_job_changes(
    studio: StudioService,
    reporter: RecordingReporter,
    video_asset: MediaAsset,
    audio_asset: MediaAsset,
) -> None:
    snapshots: list[StudioSnapshot] = []
    unsubscribe = studio.subscribe(snapshots.append)

    studio.attach_asset(video_asset)
    studio.attach_asset(audio_asset)
    record = studio.submit_job()
    reporter.progress(record.id, 40.0)

    assert MediaSlot.VISUAL in snapshots[0].assets
    assert snapshots[-1].jobs[0].progress == 40.0
    assert MediaSlot.AUDIO in snapshots[-1].trim_sessions

    unsubscribe()
    count = len(snapshots)
    reporter.progress(record.id, 60.0)
    assert len(snapshots) == count


def test_snapshot_is_read_only(studio: StudioService, video_asset: MediaAsset) -> None:
    studio.attach_asset(video_asset)

    snapshot = studio.snapshot()

    with pytest.raises(TypeError):
        snapshot.assets[MediaSlot.AUDIO] = video_asset  # type: ignore[index]


def test_attach_and_remove_log_at_info_level(
    studio: StudioService,
    video_asset: MediaAsset,
    caplog: pytest.LogCaptureFixture,
) -> None:
    configure_logging("INFO")
    caplog.set_level(logging.INFO)

    studio.attach_asset(video_asset)
    studio.remove_asset(MediaSlot.VISUAL)

    assert studio.asset(MediaSlot.VISUAL) is None
    assert any("studio.asset.attached" in message for message in caplog.messages)
    assert any("speaker.mp4" in message for message in caplog.messages)
