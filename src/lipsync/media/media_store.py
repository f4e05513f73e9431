"""Filesystem storage for uploaded studio assets."""

from __future__ import annotations

import shutil
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any
from uuid import uuid4

import structlog
from fastapi import UploadFile

from ..domain.models import MediaAsset, MediaKind
from ..exceptions import InvalidDuration, PayloadTooLarge

CHUNK_SIZE = 1 * 1024 * 1024  # 1 MiB
FALLBACK_FILENAME = "upload.bin"


@dataclass(slots=True)
class MediaStore:
    """Persists uploads under ``root/<kind>/<asset id>/`` and builds assets.

    A failed upload never leaves its asset directory behind.
    """

    root: Path
    max_upload_bytes: int
    chunk_size: int = CHUNK_SIZE
    log: Any = field(default_factory=lambda: structlog.get_logger(__name__))

    def asset_dir(self, kind: MediaKind, asset_id: str) -> Path:
        return self.root / kind.value / asset_id

    async def persist_upload(
        self,
        upload: UploadFile,
        *,
        kind: MediaKind,
        duration_seconds: float | None = None,
    ) -> MediaAsset:
        """Copy upload contents to storage and describe them as a :class:`MediaAsset`."""
        asset_id = uuid4().hex
        directory = self.asset_dir(kind, asset_id)
        directory.mkdir(parents=True, exist_ok=True)
        target = directory / self._derive_filename(upload.filename)

        size = 0
        try:
            with target.open("wb") as sink:
                while True:
                    chunk = await upload.read(self.chunk_size)
                    if not chunk:
                        break
                    size += len(chunk)
                    if size > self.max_upload_bytes:
                        raise PayloadTooLarge(
                            f"upload exceeds {self.max_upload_bytes} bytes"
                        )
                    sink.write(chunk)
        except PayloadTooLarge:
            self._remove_directory(directory)
            self.log.warning(
                "media.upload.too_large",
                size_bytes=size,
                limit_bytes=self.max_upload_bytes,
            )
            raise
        except Exception:
            self._remove_directory(directory)
            self.log.exception("media.upload.failed", asset_id=asset_id, kind=kind.value)
            raise
        finally:
            await upload.seek(0)

        try:
            asset = MediaAsset(
                id=asset_id,
                name=upload.filename or target.name,
                size_bytes=size,
                kind=kind,
                duration_seconds=None if kind is MediaKind.IMAGE else duration_seconds,
                content_type=upload.content_type,
                location=str(target),
            )
        except InvalidDuration:
            self._remove_directory(directory)
            raise
        self.log.info(
            "media.upload.persisted",
            asset_id=asset_id,
            kind=kind.value,
            size_bytes=size,
            path=str(target),
        )
        return asset

    def discard(self, asset: MediaAsset) -> None:
        """Delete the stored bytes of ``asset``."""
        self._remove_directory(self.asset_dir(asset.kind, asset.id))
        self.log.info("media.asset.discarded", asset_id=asset.id)

    @staticmethod
    def _remove_directory(directory: Path) -> None:
        if directory.exists():
            shutil.rmtree(directory, ignore_errors=True)

    @staticmethod
    def _derive_filename(filename: str | None) -> str:
        # Only the final path component is kept; "." and ".." would escape the asset directory.
        name = Path(filename or "").name
        if name in ("", ".", ".."):
            return FALLBACK_FILENAME
        return name


__all__ = ["CHUNK_SIZE", "FALLBACK_FILENAME", "MediaStore"]
