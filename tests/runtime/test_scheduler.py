"""Tests for TickScheduler."""

from __future__ import annotations

import asyncio
import logging

import pytest
from prometheus_client import CollectorRegistry, generate_latest

from agentboard.errors import SourceUnavailable, UnknownEntityError
from agentboard.runtime import EngineUnavailableError, TickScheduler, ViewState
from agentboard.service import MetricsExporter
from agentboard.sim import ManualClock, SimConfig, TickEngine, TimeRange
from agentboard.source import SimulatedSource
from tests.fixtures.agents import StaticSource, make_snapshot


def make_scheduler(**kwargs) -> TickScheduler:
    engine = TickEngine(SimConfig(), clock=ManualClock(start_ms=0, step_ms=2000))
    return TickScheduler(SimulatedSource(engine), interval_ms=1, **kwargs)


class TestConstruction:
    """Tests for scheduler wiring."""

    def test_defaults_follow_engine(self) -> None:
        scheduler = make_scheduler()

        assert scheduler.view.time_range is TimeRange.MEDIUM
        assert scheduler.view.selected_entity == "deepseek"
        assert not scheduler.paused
        assert scheduler.latest is None

    def test_view_range_applied_to_engine(self) -> None:
        scheduler = make_scheduler(view=ViewState(time_range=TimeRange.SHORT))

        assert scheduler.engine is not None
        assert scheduler.engine.capacity == 90
        assert all(len(s.values) == 90 for _, _, s in scheduler.engine.store.items())

    def test_invalid_interval(self) -> None:
        engine = TickEngine(SimConfig(), clock=ManualClock())
        with pytest.raises(ValueError):
            TickScheduler(SimulatedSource(engine), interval_ms=0)

    def test_remote_source_has_no_selection(self) -> None:
        scheduler = TickScheduler(StaticSource([make_snapshot()]))

        assert scheduler.engine is None
        assert scheduler.view.selected_entity is None


class TestRunOnce:
    """Tests for a single scheduler callback."""

    @pytest.mark.asyncio
    async def test_tick_produces_snapshot(self) -> None:
        scheduler = make_scheduler()

        snapshot = await scheduler.run_once()

        assert snapshot is not None
        assert scheduler.latest is snapshot
        assert scheduler.metrics.ticks == 1
        assert scheduler.metrics.last_snapshot_ts == snapshot.ts
        assert scheduler.engine is not None
        assert scheduler.engine.tick_count == 1

    @pytest.mark.asyncio
    async def test_paused_freezes_state(self) -> None:
        """While paused, no draws are consumed and state is bit-identical."""
        scheduler = make_scheduler()
        await scheduler.run_once()
        engine = scheduler.engine
        assert engine is not None
        digest = engine.store.digest()

        scheduler.pause()
        for _ in range(5):
            assert await scheduler.run_once() is None

        assert engine.store.digest() == digest
        assert engine.tick_count == 1
        assert scheduler.metrics.skipped_paused == 5
        assert scheduler.metrics.ticks == 1

    @pytest.mark.asyncio
    async def test_resume_continues_stream(self) -> None:
        """Pausing does not shift the random stream of later ticks."""
        paused = make_scheduler()
        straight = make_scheduler()

        await paused.run_once()
        paused.pause()
        await paused.run_once()
        paused.resume()
        await paused.run_once()

        await straight.run_once()
        await straight.run_once()

        assert paused.engine is not None and straight.engine is not None
        assert paused.engine.store.digest() == straight.engine.store.digest()

    @pytest.mark.asyncio
    async def test_source_failure_keeps_previous(self, caplog: pytest.LogCaptureFixture) -> None:
        first = make_snapshot(ts=1000)
        source = StaticSource([first, SourceUnavailable("backend down", status=502)])
        scheduler = TickScheduler(source)

        await scheduler.run_once()
        with caplog.at_level(logging.WARNING, logger="agentboard.runtime.scheduler"):
            result = await scheduler.run_once()

        assert result is None
        assert scheduler.latest is first
        assert scheduler.metrics.failures == 1
        assert scheduler.metrics.ticks == 1
        assert "backend down" in caplog.text

    @pytest.mark.asyncio
    async def test_recovers_after_failure(self) -> None:
        source = StaticSource(
            [SourceUnavailable("down"), make_snapshot(ts=3000)]
        )
        scheduler = TickScheduler(source)

        assert await scheduler.run_once() is None
        snapshot = await scheduler.run_once()

        assert snapshot is not None
        assert snapshot.ts == 3000
        assert scheduler.health()["status"] == "ok"

    @pytest.mark.asyncio
    async def test_duration_uses_time_fn(self) -> None:
        ticks = iter([10.0, 10.25])
        scheduler = make_scheduler(time_fn=lambda: next(ticks))

        await scheduler.run_once()

        assert scheduler.metrics.last_duration_ms == pytest.approx(250.0)


class TestLoop:
    """Tests for run/start/stop."""

    @pytest.mark.asyncio
    async def test_run_bounded(self) -> None:
        scheduler = make_scheduler()

        await scheduler.run(max_ticks=3)

        assert scheduler.metrics.ticks == 3
        assert scheduler.engine is not None
        assert scheduler.engine.tick_count == 3

    @pytest.mark.asyncio
    async def test_sleep_subtracts_tick_time(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Period stays at interval_ms; an overlong tick is followed without delay."""
        now = [0.0]
        tick_costs = iter([0.4, 1.5, 0.0])

        class TimedSource(StaticSource):
            async def fetch_snapshot(self):
                now[0] += next(tick_costs)
                return await super().fetch_snapshot()

        delays: list[float] = []

        async def fake_sleep(delay: float) -> None:
            delays.append(delay)

        monkeypatch.setattr("agentboard.runtime.scheduler.asyncio.sleep", fake_sleep)
        scheduler = TickScheduler(
            TimedSource([make_snapshot()]), interval_ms=1000, time_fn=lambda: now[0]
        )

        await scheduler.run(max_ticks=3)

        assert scheduler.metrics.ticks == 3
        assert delays == [pytest.approx(0.6), 0.0]

    @pytest.mark.asyncio
    async def test_start_and_stop(self) -> None:
        scheduler = make_scheduler()

        task = scheduler.start()
        await asyncio.sleep(0.05)
        assert scheduler.running

        await scheduler.stop()

        assert task.done()
        assert not scheduler.running
        assert scheduler.metrics.ticks >= 1

    @pytest.mark.asyncio
    async def test_start_twice(self) -> None:
        scheduler = make_scheduler()
        scheduler.start()
        try:
            with pytest.raises(RuntimeError):
                scheduler.start()
        finally:
            await scheduler.stop()

    @pytest.mark.asyncio
    async def test_stop_without_start(self) -> None:
        scheduler = make_scheduler()

        await scheduler.stop()

        assert not scheduler.running


class TestControl:
    """Tests for range, selection and notes."""

    def test_set_range(self) -> None:
        scheduler = make_scheduler()

        assert scheduler.set_range("24h") is TimeRange.LONG
        assert scheduler.view.time_range is TimeRange.LONG
        assert scheduler.engine is not None
        assert scheduler.engine.capacity == 720

    def test_set_range_invalid(self) -> None:
        scheduler = make_scheduler()

        with pytest.raises(ValueError):
            scheduler.set_range("2d")
        assert scheduler.view.time_range is TimeRange.MEDIUM

    def test_select(self) -> None:
        scheduler = make_scheduler()

        scheduler.select("gemini")

        assert scheduler.view.selected_entity == "gemini"

    def test_select_unknown(self) -> None:
        scheduler = make_scheduler()

        with pytest.raises(UnknownEntityError):
            scheduler.select("nobody")
        assert scheduler.view.selected_entity == "deepseek"

    def test_add_note(self) -> None:
        scheduler = make_scheduler()

        note = scheduler.add_note("grok", "watch funding")

        assert note is not None
        assert scheduler.engine is not None
        assert scheduler.engine.store.get("grok").feed.latest(1) == [note]

    def test_add_note_remote(self) -> None:
        scheduler = TickScheduler(StaticSource([make_snapshot()]))

        with pytest.raises(EngineUnavailableError):
            scheduler.add_note("grok", "hello")


class TestExporterSync:
    """Tests for Prometheus sync after ticks."""

    @pytest.mark.asyncio
    async def test_counters_follow_scheduler(self) -> None:
        registry = CollectorRegistry()
        scheduler = make_scheduler(exporter=MetricsExporter(registry=registry))

        await scheduler.run_once()
        scheduler.pause()
        await scheduler.run_once()

        text = generate_latest(registry).decode()
        assert "agentboard_ticks_total 1.0" in text
        assert "agentboard_ticks_skipped_paused_total 1.0" in text
        assert "agentboard_paused 1.0" in text
        assert 'agentboard_agent_value{agent="claude"}' in text
        assert "agentboard_tick_duration_seconds_count 1.0" in text

    @pytest.mark.asyncio
    async def test_failures_counted(self) -> None:
        registry = CollectorRegistry()
        scheduler = TickScheduler(
            StaticSource([SourceUnavailable("down")]),
            exporter=MetricsExporter(registry=registry),
        )

        await scheduler.run_once()
        await scheduler.run_once()

        text = generate_latest(registry).decode()
        assert "agentboard_tick_failures_total 2.0" in text
        assert "agentboard_agent_value{" not in text


class TestHealth:
    """Tests for health summary."""

    @pytest.mark.asyncio
    async def test_health_fields(self) -> None:
        scheduler = make_scheduler()
        await scheduler.run_once()

        health = scheduler.health()

        assert health["status"] == "ok"
        assert health["ticks"] == 1
        assert health["paused"] is False
        assert health["range"] == "medium"
        assert health["running"] is False

    @pytest.mark.asyncio
    async def test_degraded_without_snapshot(self) -> None:
        scheduler = TickScheduler(StaticSource([SourceUnavailable("down")]))

        await scheduler.run_once()

        assert scheduler.health()["status"] == "degraded"
