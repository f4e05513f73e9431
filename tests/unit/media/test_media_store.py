from __future__ import annotations

import io
from pathlib import Path

import pytest
from fastapi import UploadFile
from starlette.datastructures import Headers

from src.lipsync.domain.models import MediaKind
from src.lipsync.exceptions import InvalidDuration, PayloadTooLarge
from src.lipsync.media.media_store import FALLBACK_FILENAME, MediaStore

pytestmark = pytest.mark.unit


def _upload(data: bytes, filename: str, content_type: str) -> UploadFile:
    return UploadFile(
        file=io.BytesIO(data),
        filename=filename,
        headers=Headers({"content-type": content_type}),
    )


@pytest.mark.asyncio
async def test_persist_upload_writes_file(tmp_path: Path) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=1024, chunk_size=4)

    asset = await store.persist_upload(
        _upload(b"0123456789", "clip.mp4", "video/mp4"),
        kind=MediaKind.VIDEO,
        duration_seconds=12.0,
    )

    assert asset.size_bytes == 10
    assert asset.duration_seconds == 12.0
    assert asset.content_type == "video/mp4"
    assert Path(asset.location).read_bytes() == b"0123456789"


@pytest.mark.asyncio
async def test_image_duration_is_dropped(tmp_path: Path) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=1024)

    asset = await store.persist_upload(
        _upload(b"png", "face.png", "image/png"),
        kind=MediaKind.IMAGE,
        duration_seconds=3.0,
    )

    assert asset.duration_seconds is None


@pytest.mark.asyncio
async def test_oversized_upload_is_removed(tmp_path: Path) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=5, chunk_size=2)

    with pytest.raises(PayloadTooLarge):
        await store.persist_upload(
            _upload(b"0123456789", "voice.wav", "audio/wav"), kind=MediaKind.AUDIO
        )

    assert list((tmp_path / "audio").iterdir()) == []


@pytest.mark.asyncio
async def test_negative_duration_is_rejected(tmp_path: Path) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=1024)

    with pytest.raises(InvalidDuration):
        await store.persist_upload(
            _upload(b"abc", "voice.wav", "audio/wav"),
            kind=MediaKind.AUDIO,
            duration_seconds=-1.0,
        )

    assert list((tmp_path / "audio").iterdir()) == []


@pytest.mark.asyncio
async def test_discard_removes_asset_directory(tmp_path: Path) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=1024)
    asset = await store.persist_upload(
        _upload(b"abc", "voice.wav", "audio/wav"), kind=MediaKind.AUDIO
    )

    store.discard(asset)

    assert not Path(asset.location).exists()


class BrokenReader(io.BytesIO):
    def read(self, size: int = -1) -> bytes:
        raise OSError("device went away")


@pytest.mark.asyncio
async def test_read_failure_leaves_no_directory(tmp_path: Path) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=1024)
    upload = UploadFile(
        file=BrokenReader(b"abc"),
        filename="clip.mp4",
        headers=Headers({"content-type": "video/mp4"}),
    )

    with pytest.raises(OSError):
        await store.persist_upload(upload, kind=MediaKind.VIDEO, duration_seconds=2.0)

    assert list((tmp_path / "video").iterdir()) == []


@pytest.mark.asyncio
@pytest.mark.parametrize("filename", ["..", ".", "../../escape.mp4", ""])
async def test_unsafe_filenames_stay_inside_asset_directory(
    tmp_path: Path, filename: str
) -> None:
    store = MediaStore(root=tmp_path, max_upload_bytes=1024)

    asset = await store.persist_upload(
        _upload(b"abc", filename, "video/mp4"), kind=MediaKind.VIDEO, duration_seconds=2.0
    )

    stored = Path(asset.location)
    assert stored.parent == store.asset_dir(MediaKind.VIDEO, asset.id)
    assert stored.read_bytes() == b"abc"


def test_derive_filename_replaces_dot_names() -> None:
    assert MediaStore._derive_filename("..") == FALLBACK_FILENAME
    assert MediaStore._derive_filename(None) == FALLBACK_FILENAME
    assert MediaStore._derive_filename("dir/take.mov") == "take.mov"
