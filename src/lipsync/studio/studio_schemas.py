"""Pydantic schemas for the studio API."""

from __future__ import annotations

from typing import Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field

from ..domain.models import MediaAsset, StudioSnapshot, TrimSessionState
from ..jobs.jobs_schemas import JobResponse, TrimRangeModel


class MediaAssetModel(BaseModel):
    """Uploaded asset as seen by the studio."""

    id: str
    name: str
    size_bytes: int = Field(..., ge=0)
    kind: Literal["video", "image", "audio"]
    content_type: Optional[str] = None
    duration_seconds: Optional[float] = None

    @classmethod
    def from_domain(cls, asset: MediaAsset) -> "MediaAssetModel":
        return cls(
            id=asset.id,
            name=asset.name,
            size_bytes=asset.size_bytes,
            kind=asset.kind.value,
            content_type=asset.content_type,
            duration_seconds=asset.duration_seconds,
        )


class TrimSessionModel(BaseModel):
    """Working trim state of one slot."""

    duration_seconds: float
    playback_position: float
    candidate_range: TrimRangeModel

    @classmethod
    def from_domain(cls, state: TrimSessionState) -> "TrimSessionModel":
        return cls(
            duration_seconds=state.duration_seconds,
            playback_position=state.playback_position,
            candidate_range=TrimRangeModel.of(state.candidate_range),
        )


class StudioResponse(BaseModel):
    """Full presentation snapshot of the studio."""

    assets: Dict[str, MediaAssetModel]
    trim_sessions: Dict[str, TrimSessionModel]
    committed_trims: Dict[str, TrimRangeModel]
    jobs: List[JobResponse]

    @classmethod
    def from_domain(cls, snapshot: StudioSnapshot) -> "StudioResponse":
        return cls(
            assets={
                slot.value: MediaAssetModel.from_domain(asset)
                for slot, asset in snapshot.assets.items()
            },
            trim_sessions={
                slot.value: TrimSessionModel.from_domain(state)
                for slot, state in snapshot.trim_sessions.items()
            },
            committed_trims={
                slot.value: TrimRangeModel.of(trim)
                for slot, trim in snapshot.committed_trims.items()
            },
            jobs=[JobResponse.from_domain(job) for job in snapshot.jobs],
        )


class SeekRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    position: float = Field(..., description="Requested playback position in seconds.")


class SeekResponse(BaseModel):
    playback_position: float


class TrimRequest(BaseModel):
    model_config = ConfigDict(extra="forbid")

    start: float = Field(..., description="Requested range start in seconds.")
    end: float = Field(..., description="Requested range end in seconds.")


__all__ = [
    "MediaAssetModel",
    "SeekRequest",
    "SeekResponse",
    "StudioResponse",
    "TrimRequest",
    "TrimSessionModel",
]
