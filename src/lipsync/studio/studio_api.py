"""HTTP routes for studio assets and trimming."""

from __future__ import annotations

from fastapi import APIRouter, Depends, File, Form, Request, Response, UploadFile, status

from ..domain.models import MediaSlot
from ..exceptions import LipSyncError
from ..jobs.jobs_api import get_studio_service
from ..jobs.jobs_schemas import TrimRangeModel
from ..media.classification import classify_for_slot
from ..media.media_store import MediaStore
from .studio_schemas import SeekRequest, SeekResponse, StudioResponse, TrimRequest
from .studio_service import StudioService

router = APIRouter(prefix="/api/studio", tags=["studio"])


def get_media_store(request: Request) -> MediaStore:
    """Fetch media storage from application state."""
    try:
        return request.app.state.media_store  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("MediaStore is not configured") from exc


@router.get("", response_model=StudioResponse)
async def get_studio(studio: StudioService = Depends(get_studio_service)) -> StudioResponse:
    """Return the presentation snapshot: assets, trim sessions and jobs."""
    return StudioResponse.from_domain(studio.snapshot())


@router.post(
    "/{slot}/asset", response_model=StudioResponse, status_code=status.HTTP_201_CREATED
)
async def upload_asset(
    slot: MediaSlot,
    file: UploadFile = File(...),
    duration_seconds: float | None = Form(None),
    studio: StudioService = Depends(get_studio_service),
    store: MediaStore = Depends(get_media_store),
) -> StudioResponse:
    """Store an upload and attach it to ``slot``, replacing the previous asset."""
    kind = classify_for_slot(file.content_type, slot)
    asset = await store.persist_upload(file, kind=kind, duration_seconds=duration_seconds)
    previous = studio.asset(slot)
    try:
        studio.attach_asset(asset)
    except LipSyncError:
        store.discard(asset)
        raise
    if previous is not None:
        store.discard(previous)
    return StudioResponse.from_domain(studio.snapshot())


@router.delete("/{slot}/asset", status_code=status.HTTP_204_NO_CONTENT)
async def remove_asset(
    slot: MediaSlot,
    studio: StudioService = Depends(get_studio_service),
    store: MediaStore = Depends(get_media_store),
) -> Response:
    removed = studio.remove_asset(slot)
    if removed is not None:
        store.discard(removed)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{slot}/seek", response_model=SeekResponse)
async def seek(
    slot: MediaSlot,
    body: SeekRequest,
    studio: StudioService = Depends(get_studio_service),
) -> SeekResponse:
    return SeekResponse(playback_position=studio.seek(slot, body.position))


@router.put("/{slot}/trim", response_model=TrimRangeModel)
async def adjust_trim(
    slot: MediaSlot,
    body: TrimRequest,
    studio: StudioService = Depends(get_studio_service),
) -> TrimRangeModel:
    return TrimRangeModel.of(studio.adjust_trim(slot, body.start, body.end))


@router.post("/{slot}/trim/reset", response_model=TrimRangeModel)
async def reset_trim(
    slot: MediaSlot,
    studio: StudioService = Depends(get_studio_service),
) -> TrimRangeModel:
    return TrimRangeModel.of(studio.reset_trim(slot))


@router.post("/{slot}/trim/apply", response_model=TrimRangeModel)
async def apply_trim(
    slot: MediaSlot,
    studio: StudioService = Depends(get_studio_service),
) -> TrimRangeModel:
    """Commit the candidate range; submissions use the latest committed range."""
    return TrimRangeModel.of(studio.apply_trim(slot))
