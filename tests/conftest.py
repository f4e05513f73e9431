from __future__ import annotations

import os
import tempfile
from pathlib import Path

import pytest

from src.lipsync.domain.models import MediaAsset, MediaKind

# Importing ``src.lipsync.main`` builds the module level app; keep its storage out of the repo.
os.environ.setdefault(
    "LIPSYNC_MEDIA_ROOT", str(Path(tempfile.gettempdir()) / "lipsync-tests-media")
)


@pytest.fixture
def video_asset() -> MediaAsset:
    return MediaAsset(
        id="video-1",
        name="speaker.mp4",
        size_bytes=2048,
        kind=MediaKind.VIDEO,
        duration_seconds=10.0,
        content_type="video/mp4",
    )


@pytest.fixture
def image_asset() -> MediaAsset:
    return MediaAsset(
        id="image-1",
        name="portrait.png",
        size_bytes=512,
        kind=MediaKind.IMAGE,
        content_type="image/png",
    )


@pytest.fixture
def audio_asset() -> MediaAsset:
    return MediaAsset(
        id="audio-1",
        name="voice.wav",
        size_bytes=1024,
        kind=MediaKind.AUDIO,
        duration_seconds=8.0,
        content_type="audio/wav",
    )
