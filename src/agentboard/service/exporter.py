"""
Prometheus metrics exporter for agentboard.

Exports scheduler health and per-agent gauges. The only label is
``agent``, bounded by the fixed roster.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from prometheus_client import Counter, Gauge, Histogram
from prometheus_client.registry import CollectorRegistry

if TYPE_CHECKING:
    from agentboard.runtime.scheduler import SchedulerMetrics
    from agentboard.sim.state import StateStore


# Labels that would cause cardinality explosion
FORBIDDEN_LABELS = frozenset(
    {
        "symbol",
        "endpoint",
        "path",
        "query",
        "ip",
        "request_id",
        "note",
        "ts",
    }
)


class MetricsExporter:
    """
    Prometheus exporter for the tick scheduler and agent state.

    Usage:
        registry = CollectorRegistry()
        exporter = MetricsExporter(registry=registry)
        exporter.update(scheduler_metrics=scheduler.metrics, store=engine.store)
        # generate_latest(registry) -> bytes for /metrics endpoint
    """

    def __init__(self, registry: CollectorRegistry | None = None) -> None:
        """
        Args:
            registry: Prometheus CollectorRegistry. A private one is created if None.
        """
        self._registry = registry or CollectorRegistry()

        # Scheduler
        self._ticks = Counter(
            "agentboard_ticks",
            "Ticks that produced a snapshot",
            registry=self._registry,
        )
        self._ticks_skipped_paused = Counter(
            "agentboard_ticks_skipped_paused",
            "Scheduler callbacks skipped because the dashboard was paused",
            registry=self._registry,
        )
        self._tick_failures = Counter(
            "agentboard_tick_failures",
            "Ticks where the snapshot source was unavailable",
            registry=self._registry,
        )
        self._tick_duration = Histogram(
            "agentboard_tick_duration_seconds",
            "Wall time spent producing one snapshot",
            buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0),
            registry=self._registry,
        )
        self._paused = Gauge(
            "agentboard_paused",
            "1 while the dashboard is paused",
            registry=self._registry,
        )

        # Per agent
        self._agent_value = Gauge(
            "agentboard_agent_value",
            "Current account value",
            ["agent"],
            registry=self._registry,
        )
        self._agent_drawdown = Gauge(
            "agentboard_agent_drawdown",
            "Current drawdown fraction",
            ["agent"],
            registry=self._registry,
        )
        self._agent_turnover = Gauge(
            "agentboard_agent_turnover",
            "Current turnover score",
            ["agent"],
            registry=self._registry,
        )
        self._agent_exposure = Gauge(
            "agentboard_agent_exposure",
            "Current exposure score",
            ["agent"],
            registry=self._registry,
        )

        # Track last seen values for counter increments (counters are monotonic)
        self._last_ticks = 0
        self._last_skipped = 0
        self._last_failures = 0

    @property
    def registry(self) -> CollectorRegistry:
        """Get the Prometheus CollectorRegistry."""
        return self._registry

    def observe_tick(self, duration_s: float) -> None:
        """Record the duration of one snapshot fetch."""
        self._tick_duration.observe(duration_s)

    def update(
        self,
        scheduler_metrics: SchedulerMetrics | None = None,
        store: StateStore | None = None,
        *,
        paused: bool | None = None,
    ) -> None:
        """
        Sync metrics from component states.

        Args:
            scheduler_metrics: Scheduler counters.
            store: Agent state for the per-agent gauges.
            paused: Current pause flag.
        """
        if scheduler_metrics is not None:
            self._update_scheduler_metrics(scheduler_metrics)

        if store is not None:
            self._update_agent_metrics(store)

        if paused is not None:
            self._paused.set(1 if paused else 0)

    def _update_scheduler_metrics(self, sm: SchedulerMetrics) -> None:
        """Increment counters by delta since last update."""
        delta = sm.ticks - self._last_ticks
        if delta > 0:
            self._ticks.inc(delta)
        self._last_ticks = sm.ticks

        delta = sm.skipped_paused - self._last_skipped
        if delta > 0:
            self._ticks_skipped_paused.inc(delta)
        self._last_skipped = sm.skipped_paused

        delta = sm.failures - self._last_failures
        if delta > 0:
            self._tick_failures.inc(delta)
        self._last_failures = sm.failures

    def _update_agent_metrics(self, store: StateStore) -> None:
        for _, entity, state in store.items():
            self._agent_value.labels(agent=entity.id).set(state.current)
            self._agent_drawdown.labels(agent=entity.id).set(state.drawdown)
            self._agent_turnover.labels(agent=entity.id).set(state.turnover)
            self._agent_exposure.labels(agent=entity.id).set(state.exposure)


# Note: Counters are exported with _total suffix by prometheus_client
REQUIRED_METRIC_NAMES: frozenset[str] = frozenset(
    {
        "agentboard_ticks_total",
        "agentboard_ticks_skipped_paused_total",
        "agentboard_tick_failures_total",
        "agentboard_tick_duration_seconds_count",
        "agentboard_paused",
        "agentboard_agent_value",
        "agentboard_agent_drawdown",
        "agentboard_agent_turnover",
        "agentboard_agent_exposure",
    }
)
