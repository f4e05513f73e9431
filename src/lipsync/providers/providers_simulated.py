"""Timer driven stand-in for a real lip-sync worker."""

from __future__ import annotations

import asyncio
import inspect
import random
from collections.abc import Awaitable, Callable
from typing import Any

import structlog

from ..domain.models import MediaReference
from .providers_base import ProgressReporter


class SimulatedProgressReporter(ProgressReporter):
    """Advance progress by random increments until it reaches 100 percent.

    After ``start_delay_seconds`` the job ticks every ``tick_interval_seconds``
    and gains between ``min_increment`` and ``max_increment`` percent per tick.
    Crossing 100 reports success with the handle ``#result-<job id>``. A
    non-zero ``failure_probability`` makes any tick fail the job instead.
    """

    def __init__(
        self,
        *,
        start_delay_seconds: float = 1.0,
        tick_interval_seconds: float = 1.0,
        min_increment: float = 5.0,
        max_increment: float = 20.0,
        failure_probability: float = 0.0,
        rng: random.Random | None = None,
        sleep: Callable[[float], Any] | None = None,
    ) -> None:
        super().__init__()
        if min_increment <= 0 or max_increment < min_increment:
            raise ValueError("increments must satisfy 0 < min_increment <= max_increment")
        if not 0.0 <= failure_probability <= 1.0:
            raise ValueError("failure_probability must be within [0, 1]")
        self._start_delay = max(0.0, start_delay_seconds)
        self._tick_interval = max(0.0, tick_interval_seconds)
        self._min_increment = min_increment
        self._max_increment = max_increment
        self._failure_probability = failure_probability
        self._rng = rng or random.Random()
        self._sleep = self._wrap_sleep(sleep)
        self._tasks: dict[str, asyncio.Task[None]] = {}
        self._logger = structlog.get_logger(__name__)

    @staticmethod
    def _wrap_sleep(
        sleep: Callable[[float], Any] | None,
    ) -> Callable[[float], Awaitable[None]]:
        if sleep is None:
            return asyncio.sleep

        async def _async_sleep(seconds: float) -> None:
            result = sleep(seconds)
            if inspect.isawaitable(result):
                await result  # type: ignore[no-any-return]

        return _async_sleep

    @property
    def active_jobs(self) -> frozenset[str]:
        return frozenset(self._tasks)

    def begin_job(
        self, job_id: str, video: MediaReference, audio: MediaReference
    ) -> None:
        if job_id in self._tasks:
            self._logger.warning("simulator.job.duplicate", job_id=job_id)
            return
        task = asyncio.get_running_loop().create_task(
            self._run(job_id), name=f"lipsync-simulator-{job_id}"
        )
        self._tasks[job_id] = task
        task.add_done_callback(lambda done, job_id=job_id: self._forget(job_id, done))
        self._logger.info(
            "simulator.job.started",
            job_id=job_id,
            video=video.name,
            audio=audio.name,
        )

    def cancel_job(self, job_id: str) -> None:
        task = self._tasks.pop(job_id, None)
        if task is None:
            return
        task.cancel()
        self._logger.info("simulator.job.cancelled", job_id=job_id)

    async def aclose(self) -> None:
        tasks = list(self._tasks.values())
        self._tasks.clear()
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    def _forget(self, job_id: str, task: asyncio.Task[None]) -> None:
        if self._tasks.get(job_id) is task:
            del self._tasks[job_id]

    async def _run(self, job_id: str) -> None:
        await self._sleep(self._start_delay)
        progress = 0.0
        while True:
            await self._sleep(self._tick_interval)
            if self._failure_probability and self._rng.random() < self._failure_probability:
                self.listener.on_failure(job_id, "simulated processing failure")
                return
            progress += self._rng.uniform(self._min_increment, self._max_increment)
            self.listener.on_progress(job_id, min(progress, 100.0))
            if progress >= 100.0:
                self.listener.on_success(job_id, f"#result-{job_id}")
                return


__all__ = ["SimulatedProgressReporter"]
