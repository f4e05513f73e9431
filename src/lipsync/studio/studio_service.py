"""Studio workspace: the two input slots, their trim sessions and submissions."""

from __future__ import annotations

from types import MappingProxyType
from typing import Callable

import structlog

from ..domain.models import (
    MIN_TRIM_SPAN_SECONDS,
    JobRecord,
    MediaAsset,
    MediaSlot,
    StudioSnapshot,
    TrimRange,
)
from ..exceptions import MissingInput
from ..jobs.job_queue import JobQueueController
from .trim_session import TrimSession

logger = structlog.get_logger(__name__)

StudioListener = Callable[[StudioSnapshot], None]


class StudioService:
    """Holds the visual and audio inputs of one studio.

    Attaching an asset replaces whatever the slot held before and discards
    its trim session and committed trim. Jobs are submitted through the
    shared :class:`JobQueueController`; every studio or queue mutation is
    republished to subscribers as a :class:`StudioSnapshot`.
    """

    def __init__(
        self,
        controller: JobQueueController,
        *,
        min_trim_span: float = MIN_TRIM_SPAN_SECONDS,
    ) -> None:
        self._controller = controller
        self._min_trim_span = min_trim_span
        self._assets: dict[MediaSlot, MediaAsset] = {}
        self._sessions: dict[MediaSlot, TrimSession] = {}
        self._committed: dict[MediaSlot, TrimRange] = {}
        self._listeners: list[StudioListener] = []
        self._unsubscribe_jobs = controller.subscribe(self._on_jobs_changed)

    # ------------------------------------------------------------------
    # Assets
    # ------------------------------------------------------------------
    def attach_asset(self, asset: MediaAsset) -> MediaAsset:
        slot = asset.slot
        self._discard_slot(slot)
        self._assets[slot] = asset
        if asset.kind.is_timed and asset.duration_seconds:
            self._sessions[slot] = TrimSession.for_asset(asset, min_span=self._min_trim_span)
        logger.info(
            "studio.asset.attached",
            slot=slot.value,
            asset_id=asset.id,
            asset_name=asset.name,
            kind=asset.kind.value,
            trimmable=slot in self._sessions,
        )
        self._publish()
        return asset

    def remove_asset(self, slot: MediaSlot) -> MediaAsset | None:
        removed = self._discard_slot(slot)
        if removed is not None:
            logger.info("studio.asset.removed", slot=slot.value, asset_id=removed.id)
            self._publish()
        return removed

    def asset(self, slot: MediaSlot) -> MediaAsset | None:
        return self._assets.get(slot)

    # ------------------------------------------------------------------
    # Trimming
    # ------------------------------------------------------------------
    def trim_session(self, slot: MediaSlot) -> TrimSession:
        session = self._sessions.get(slot)
        if session is None:
            raise MissingInput(f"no trimmable asset in the {slot.value} slot")
        return session

    def seek(self, slot: MediaSlot, position: float) -> float:
        result = self.trim_session(slot).seek(position)
        self._publish()
        return result

    def adjust_trim(self, slot: MediaSlot, start: float, end: float) -> TrimRange:
        result = self.trim_session(slot).adjust_range(start, end)
        self._publish()
        return result

    def reset_trim(self, slot: MediaSlot) -> TrimRange:
        result = self.trim_session(slot).reset()
        logger.info("studio.trim.reset", slot=slot.value)
        self._publish()
        return result

    def apply_trim(self, slot: MediaSlot) -> TrimRange:
        committed = self.trim_session(slot).apply()
        self._committed[slot] = committed
        logger.info(
            "studio.trim.applied",
            slot=slot.value,
            start=committed.start,
            end=committed.end,
        )
        self._publish()
        return committed

    def committed_trim(self, slot: MediaSlot) -> TrimRange | None:
        return self._committed.get(slot)

    # ------------------------------------------------------------------
    # Jobs
    # ------------------------------------------------------------------
    def submit_job(self) -> JobRecord:
        """Submit the current pair together with its committed trim ranges."""

        return self._controller.submit(
            self._assets.get(MediaSlot.VISUAL),
            self._assets.get(MediaSlot.AUDIO),
            video_trim=self._committed.get(MediaSlot.VISUAL),
            audio_trim=self._committed.get(MediaSlot.AUDIO),
        )

    # ------------------------------------------------------------------
    # Presentation
    # ------------------------------------------------------------------
    def snapshot(self) -> StudioSnapshot:
        return self._build_snapshot(self._controller.list_jobs())

    def subscribe(self, listener: StudioListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    def close(self) -> None:
        self._unsubscribe_jobs()
        self._listeners.clear()

    def _build_snapshot(self, jobs: tuple[JobRecord, ...]) -> StudioSnapshot:
        return StudioSnapshot(
            assets=MappingProxyType(dict(self._assets)),
            trim_sessions=MappingProxyType(
                {slot: session.state(slot) for slot, session in self._sessions.items()}
            ),
            committed_trims=MappingProxyType(dict(self._committed)),
            jobs=jobs,
        )

    def _discard_slot(self, slot: MediaSlot) -> MediaAsset | None:
        self._sessions.pop(slot, None)
        self._committed.pop(slot, None)
        return self._assets.pop(slot, None)

    def _on_jobs_changed(self, jobs: tuple[JobRecord, ...]) -> None:
        self._notify(self._build_snapshot(jobs))

    def _publish(self) -> None:
        if self._listeners:
            self._notify(self.snapshot())

    def _notify(self, snapshot: StudioSnapshot) -> None:
        for listener in list(self._listeners):
            try:
                listener(snapshot)
            except Exception:
                logger.exception("studio.listener.failed")


__all__ = ["StudioListener", "StudioService"]
