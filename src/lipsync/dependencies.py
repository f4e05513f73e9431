"""Dependency wiring helpers."""

from __future__ import annotations

import structlog
from fastapi import FastAPI

from .api.errors import install_error_handlers
from .config import AppConfig
from .jobs.job_queue import JobQueueController
from .jobs.jobs_api import router as jobs_router
from .media.media_store import MediaStore
from .providers.providers_base import ProgressReporter
from .providers.providers_factory import create_reporter
from .studio.studio_api import router as studio_router
from .studio.studio_service import StudioService

logger = structlog.get_logger(__name__)


def include_routers(
    app: FastAPI,
    config: AppConfig,
    *,
    reporter: ProgressReporter | None = None,
) -> None:
    """Mount module routers and attach services."""
    progress_reporter = reporter or create_reporter(config)
    job_queue = JobQueueController(
        progress_reporter,
        estimated_job_seconds=config.estimated_job_seconds,
        max_concurrent_jobs=config.max_concurrent_jobs,
    )
    studio_service = StudioService(
        job_queue, min_trim_span=config.min_trim_span_seconds
    )
    media_store = MediaStore(
        root=config.media_root,
        max_upload_bytes=config.max_upload_bytes,
        chunk_size=config.upload_chunk_bytes,
    )

    app.state.config = config
    app.state.reporter = progress_reporter
    app.state.job_queue = job_queue
    app.state.studio_service = studio_service
    app.state.media_store = media_store

    install_error_handlers(app)
    app.include_router(studio_router)
    app.include_router(jobs_router)
    logger.info(
        "app.wired",
        reporter=type(progress_reporter).__name__,
        media_root=str(config.media_root),
    )


async def shutdown_services(app: FastAPI) -> None:
    """Stop publishing studio snapshots and cancel in-flight jobs."""
    studio_service: StudioService = app.state.studio_service
    job_queue: JobQueueController = app.state.job_queue
    studio_service.close()
    await job_queue.aclose()
