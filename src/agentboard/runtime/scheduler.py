"""
Periodic tick scheduler.

Drives a SnapshotSource at a fixed interval. Ticks never overlap: each
iteration awaits the fetch before sleeping, and a lock serializes manual
ticks against the loop. A paused scheduler skips the source entirely, so
state is frozen rather than only hidden. A SourceUnavailable failure is
logged and the previous snapshot keeps being served.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from agentboard.contracts.models import FeedItem, Snapshot
from agentboard.errors import SourceUnavailable
from agentboard.runtime.view import ViewState
from agentboard.sim.config import TimeRange
from agentboard.sim.engine import TickEngine
from agentboard.source.base import SnapshotSource

if TYPE_CHECKING:
    from agentboard.service.exporter import MetricsExporter

logger = logging.getLogger(__name__)


@dataclass
class SchedulerMetrics:
    """Counters for scheduler activity."""

    ticks: int = 0
    skipped_paused: int = 0
    failures: int = 0
    last_snapshot_ts: int = 0
    last_duration_ms: float = 0.0


class EngineUnavailableError(RuntimeError):
    """Operation needs a local engine but the source is remote."""


class TickScheduler:
    """
    Single logical scheduler for the dashboard.

    Usage:
        scheduler = TickScheduler(SimulatedSource(TickEngine()), interval_ms=2000)
        scheduler.start()
        ...
        await scheduler.stop()
    """

    def __init__(
        self,
        source: SnapshotSource,
        *,
        interval_ms: int = 2000,
        view: ViewState | None = None,
        exporter: MetricsExporter | None = None,
        time_fn: Callable[[], float] = time.perf_counter,
    ) -> None:
        """
        Args:
            source: Snapshot source invoked once per tick.
            interval_ms: Delay between the end of one tick and the next.
            view: Control state. Defaults follow the engine's active range.
            exporter: Optional Prometheus exporter synced after each tick.
            time_fn: Monotonic seconds, used for tick durations.
        """
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {interval_ms}")
        self._source = source
        self._interval_ms = interval_ms
        self._exporter = exporter
        self._time_fn = time_fn
        self._metrics = SchedulerMetrics()
        self._lock = asyncio.Lock()
        self._task: asyncio.Task[None] | None = None
        self._latest: Snapshot | None = None

        engine = source.engine
        if view is None:
            view = ViewState(time_range=engine.time_range if engine else TimeRange.MEDIUM)
        elif engine is not None:
            engine.set_range(view.time_range)
        if view.selected_entity is None and engine is not None:
            view.selected_entity = engine.roster[0].id
        self._view = view

    @property
    def source(self) -> SnapshotSource:
        return self._source

    @property
    def engine(self) -> TickEngine | None:
        """Local engine, or None for remote sources."""
        return self._source.engine

    @property
    def view(self) -> ViewState:
        return self._view

    @property
    def metrics(self) -> SchedulerMetrics:
        return self._metrics

    @property
    def exporter(self) -> MetricsExporter | None:
        return self._exporter

    @property
    def interval_ms(self) -> int:
        return self._interval_ms

    @property
    def latest(self) -> Snapshot | None:
        """Last successful snapshot."""
        return self._latest

    @property
    def running(self) -> bool:
        return self._task is not None and not self._task.done()

    @property
    def paused(self) -> bool:
        return self._view.paused

    def pause(self) -> None:
        """Freeze the simulation; in-flight ticks complete."""
        if not self._view.paused:
            logger.info("Scheduler paused")
        self._view.paused = True
        self._sync_exporter()

    def resume(self) -> None:
        if self._view.paused:
            logger.info("Scheduler resumed")
        self._view.paused = False
        self._sync_exporter()

    def require_engine(self) -> TickEngine:
        """
        Raises:
            EngineUnavailableError: If snapshots come from a remote source.
        """
        engine = self._source.engine
        if engine is None:
            raise EngineUnavailableError("no local engine behind this snapshot source")
        return engine

    def set_range(self, time_range: TimeRange | str) -> TimeRange:
        """
        Switch display range.

        Raises:
            ValueError: If the range name is unknown.
        """
        new_range = TimeRange.parse(time_range)
        engine = self._source.engine
        if engine is not None:
            engine.set_range(new_range)
        self._view.time_range = new_range
        return new_range

    def select(self, entity_id: str) -> str:
        """
        Select the agent whose feed and positions are shown.

        Raises:
            UnknownEntityError: If a local engine does not know the id.
        """
        engine = self._source.engine
        if engine is not None:
            engine.store.index_of(entity_id)
        self._view.selected_entity = entity_id
        return entity_id

    def add_note(self, entity_id: str, text: str) -> FeedItem | None:
        """Append a user note through the engine (blank notes are dropped)."""
        return self.require_engine().add_note(entity_id, text)

    async def run_once(self) -> Snapshot | None:
        """
        Scheduler tick callback.

        Returns:
            The new snapshot, or None when paused or the source failed.
        """
        async with self._lock:
            if self._view.paused:
                self._metrics.skipped_paused += 1
                self._sync_exporter()
                return None

            started = self._time_fn()
            try:
                snapshot = await self._source.fetch_snapshot()
            except SourceUnavailable as e:
                self._metrics.failures += 1
                logger.warning(
                    "Snapshot source unavailable, keeping previous snapshot: %s",
                    e,
                    extra={"failures": self._metrics.failures},
                )
                self._sync_exporter()
                return None
            finally:
                duration = self._time_fn() - started
                self._metrics.last_duration_ms = duration * 1000
                if self._exporter is not None:
                    self._exporter.observe_tick(duration)

            self._latest = snapshot
            self._metrics.ticks += 1
            self._metrics.last_snapshot_ts = snapshot.ts
            self._sync_exporter()
            return snapshot

    def _sync_exporter(self) -> None:
        if self._exporter is None:
            return
        engine = self._source.engine
        self._exporter.update(
            scheduler_metrics=self._metrics,
            store=engine.store if engine is not None else None,
            paused=self._view.paused,
        )

    async def run(self, max_ticks: int | None = None) -> None:
        """
        Tick immediately, then every ``interval_ms`` until cancelled.

        The sleep after a tick is shortened by the time the tick took, so
        the period stays at ``interval_ms``. A tick longer than the
        interval is followed immediately by the next one.

        Args:
            max_ticks: Stop after this many scheduler callbacks (None = forever).
        """
        interval_s = self._interval_ms / 1000
        calls = 0
        logger.info("Scheduler loop started", extra={"interval_ms": self._interval_ms})
        while max_ticks is None or calls < max_ticks:
            started = self._time_fn()
            await self.run_once()
            calls += 1
            if max_ticks is not None and calls >= max_ticks:
                break
            elapsed = self._time_fn() - started
            await asyncio.sleep(max(0.0, interval_s - elapsed))
        logger.info("Scheduler loop finished", extra={"calls": calls})

    def start(self, max_ticks: int | None = None) -> asyncio.Task[None]:
        """Start the loop as a background task."""
        if self.running:
            raise RuntimeError("scheduler already running")
        self._task = asyncio.create_task(self.run(max_ticks))
        return self._task

    async def stop(self) -> None:
        """
        Stop the loop.

        Waits for an in-flight tick to finish before cancelling, so a tick
        is never interrupted mid-update.
        """
        task = self._task
        self._task = None
        if task is None:
            return
        async with self._lock:
            task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await task
        logger.info("Scheduler stopped")

    def health(self) -> dict[str, Any]:
        """Health summary for /healthz."""
        return {
            "status": "ok" if self._latest is not None or self._metrics.failures == 0 else "degraded",
            "running": self.running,
            "paused": self._view.paused,
            "ticks": self._metrics.ticks,
            "failures": self._metrics.failures,
            "skipped_paused": self._metrics.skipped_paused,
            "last_snapshot_ts": self._metrics.last_snapshot_ts,
            "range": self._view.time_range.value,
        }
