"""HTTP routes for the job queue and worker callbacks."""

from __future__ import annotations

import structlog
from fastapi import APIRouter, Depends, Request, Response, status

from ..studio.studio_service import StudioService
from .job_queue import JobQueueController
from .jobs_schemas import (
    FailureEvent,
    JobListResponse,
    JobResponse,
    ProgressEvent,
    SuccessEvent,
)

router = APIRouter(prefix="/api/jobs", tags=["jobs"])
logger = structlog.get_logger(__name__)


def get_studio_service(request: Request) -> StudioService:
    """Fetch the studio service from application state."""
    try:
        return request.app.state.studio_service  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("StudioService is not configured") from exc


def get_job_queue(request: Request) -> JobQueueController:
    """Fetch the job queue controller from application state."""
    try:
        return request.app.state.job_queue  # type: ignore[attr-defined]
    except AttributeError as exc:  # pragma: no cover - defensive path
        raise RuntimeError("JobQueueController is not configured") from exc


@router.post("", response_model=JobResponse, status_code=status.HTTP_202_ACCEPTED)
async def submit_job(studio: StudioService = Depends(get_studio_service)) -> JobResponse:
    """Submit the studio's current visual and audio assets for processing."""
    record = studio.submit_job()
    return JobResponse.from_domain(record)


@router.get("", response_model=JobListResponse)
async def list_jobs(queue: JobQueueController = Depends(get_job_queue)) -> JobListResponse:
    return JobListResponse(jobs=[JobResponse.from_domain(job) for job in queue.list_jobs()])


@router.get("/{job_id}", response_model=JobResponse)
async def get_job(
    job_id: str, queue: JobQueueController = Depends(get_job_queue)
) -> JobResponse:
    return JobResponse.from_domain(queue.get_job(job_id))


@router.post("/{job_id}/cancel", response_model=JobResponse)
async def cancel_job(
    job_id: str, queue: JobQueueController = Depends(get_job_queue)
) -> JobResponse:
    return JobResponse.from_domain(queue.cancel(job_id))


@router.delete("/{job_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_job(
    job_id: str, queue: JobQueueController = Depends(get_job_queue)
) -> Response:
    queue.delete(job_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


# Worker callbacks. Events for unknown or finished jobs are accepted and dropped.


@router.post("/{job_id}/progress", status_code=status.HTTP_202_ACCEPTED)
async def report_progress(
    job_id: str,
    event: ProgressEvent,
    queue: JobQueueController = Depends(get_job_queue),
) -> Response:
    queue.on_progress(job_id, event.percent)
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.post("/{job_id}/success", status_code=status.HTTP_202_ACCEPTED)
async def report_success(
    job_id: str,
    event: SuccessEvent,
    queue: JobQueueController = Depends(get_job_queue),
) -> Response:
    queue.on_success(job_id, event.result_handle)
    return Response(status_code=status.HTTP_202_ACCEPTED)


@router.post("/{job_id}/failure", status_code=status.HTTP_202_ACCEPTED)
async def report_failure(
    job_id: str,
    event: FailureEvent,
    queue: JobQueueController = Depends(get_job_queue),
) -> Response:
    logger.info("jobs.worker.failure_reported", job_id=job_id)
    queue.on_failure(job_id, event.reason)
    return Response(status_code=status.HTTP_202_ACCEPTED)
