"""Listener doubles recording reporter events."""

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from typing import Any


@dataclass
class RecordingListener:
    events: list[tuple[str, str, Any]] = field(default_factory=list)

    def on_progress(self, job_id: str, percent: float) -> None:
        self.events.append(("progress", job_id, percent))

    def on_success(self, job_id: str, result_handle: str) -> None:
        self.events.append(("success", job_id, result_handle))

    def on_failure(self, job_id: str, reason: str) -> None:
        self.events.append(("failure", job_id, reason))

    def of_kind(self, kind: str) -> list[Any]:
        return [value for event, _, value in self.events if event == kind]


async def drain(iterations: int = 5) -> None:
    """Let scheduled reporter tasks run."""
    for _ in range(iterations):
        await asyncio.sleep(0)
