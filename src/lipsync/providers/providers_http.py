"""Progress reporter backed by a remote inference worker."""

from __future__ import annotations

import asyncio
from collections.abc import Callable, Coroutine
from typing import Any

import httpx
import structlog

from ..domain.models import MediaReference
from .providers_base import ProgressReporter

logger = structlog.get_logger(__name__)


def _reference_payload(reference: MediaReference) -> dict[str, Any]:
    asset = reference.asset
    payload: dict[str, Any] = {
        "asset_id": asset.id,
        "name": asset.name,
        "kind": asset.kind.value,
        "content_type": asset.content_type,
        "location": asset.location,
        "duration_seconds": asset.duration_seconds,
        "trim": None,
    }
    if reference.trim is not None:
        payload["trim"] = {"start": reference.trim.start, "end": reference.trim.end}
    return payload


class HttpWorkerReporter(ProgressReporter):
    """Forward jobs to a worker over HTTP.

    The worker receives ``POST {base_url}/jobs`` with both media references and
    the callback URLs it must call to report progress, success or failure.
    Cancellation is ``DELETE {base_url}/jobs/{job_id}``. A worker that cannot be
    reached, or that rejects the job, fails the job locally.
    """

    def __init__(
        self,
        *,
        base_url: str,
        callback_base_url: str,
        timeout_seconds: float = 5.0,
        client_factory: Callable[[], httpx.AsyncClient] | None = None,
    ) -> None:
        super().__init__()
        self._base_url = base_url.rstrip("/")
        self._callback_base_url = callback_base_url.rstrip("/")
        self._timeout = max(0.1, timeout_seconds)
        self._client_factory = client_factory or (
            lambda: httpx.AsyncClient(timeout=self._timeout)
        )
        self._tasks: set[asyncio.Task[None]] = set()

    def begin_job(
        self, job_id: str, video: MediaReference, audio: MediaReference
    ) -> None:
        callback_root = f"{self._callback_base_url}/api/jobs/{job_id}"
        payload = {
            "job_id": job_id,
            "video": _reference_payload(video),
            "audio": _reference_payload(audio),
            "callbacks": {
                "progress": f"{callback_root}/progress",
                "success": f"{callback_root}/success",
                "failure": f"{callback_root}/failure",
            },
        }
        self._spawn(self._submit(job_id, payload), name=f"lipsync-worker-submit-{job_id}")

    def cancel_job(self, job_id: str) -> None:
        self._spawn(self._cancel(job_id), name=f"lipsync-worker-cancel-{job_id}")

    async def aclose(self) -> None:
        tasks = list(self._tasks)
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _spawn(self, coro: Coroutine[Any, Any, None], *, name: str) -> None:
        task = asyncio.get_running_loop().create_task(coro, name=name)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)

    async def _submit(self, job_id: str, payload: dict[str, Any]) -> None:
        try:
            async with self._client_factory() as client:
                response = await client.post(f"{self._base_url}/jobs", json=payload)
        except httpx.HTTPError as exc:
            logger.warning("worker.submit.unreachable", job_id=job_id, error=str(exc))
            self.listener.on_failure(job_id, f"worker unreachable: {exc}")
            return
        if response.status_code >= 400:
            logger.warning(
                "worker.submit.rejected",
                job_id=job_id,
                status_code=response.status_code,
            )
            self.listener.on_failure(
                job_id, f"worker rejected job with status {response.status_code}"
            )
            return
        logger.info("worker.submit.accepted", job_id=job_id)

    async def _cancel(self, job_id: str) -> None:
        try:
            async with self._client_factory() as client:
                response = await client.delete(f"{self._base_url}/jobs/{job_id}")
        except httpx.HTTPError as exc:
            logger.warning("worker.cancel.unreachable", job_id=job_id, error=str(exc))
            return
        if response.status_code >= 400:
            logger.warning(
                "worker.cancel.rejected",
                job_id=job_id,
                status_code=response.status_code,
            )


__all__ = ["HttpWorkerReporter"]
