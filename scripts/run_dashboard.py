#!/usr/bin/env python3
"""
Run the agentboard telemetry service.

Starts the tick scheduler over a simulated (or remote) snapshot source and
serves the HTTP API, /metrics and /healthz.

Usage:
    python scripts/run_dashboard.py
    python scripts/run_dashboard.py --seed 42 --range short --port 8080
    python scripts/run_dashboard.py --ticks 30 --interval-ms 100  # Bounded run
    python scripts/run_dashboard.py --source-url http://backend/api/snapshot

Graceful shutdown via SIGINT/SIGTERM, --duration-s or --ticks.
"""

from __future__ import annotations

import argparse
import asyncio
import contextlib
import logging
import signal
import sys
from dataclasses import dataclass

from agentboard.logging_config import get_logger, setup_logging
from agentboard.runtime import TickScheduler, ViewState
from agentboard.service import MetricsExporter, create_app, start_server, stop_server
from agentboard.sim import SimConfig, TickEngine, TimeRange
from agentboard.source import HttpSnapshotSource, SimulatedSource, SnapshotSource

logger = get_logger("agentboard.run_dashboard")


@dataclass
class DashboardConfig:
    """Runtime configuration for the dashboard service."""

    seed: int = 20251214
    start_capital: float = 10000.0
    interval_ms: int = 2000
    time_range: str = "medium"

    host: str = "127.0.0.1"
    port: int = 8080  # 0 = HTTP server disabled

    # Duration in seconds (None = run until SIGINT/SIGTERM)
    duration_s: int | None = None
    # Scheduler callbacks before exit (None = unbounded)
    ticks: int | None = None

    # Remote snapshot endpoint (None = simulate in-process)
    source_url: str | None = None
    source_timeout_s: float = 5.0

    json_logs: bool = False
    verbose: bool = False

    def __post_init__(self) -> None:
        """Validate config values at construction time."""
        if self.interval_ms <= 0:
            raise ValueError(f"interval_ms must be > 0, got {self.interval_ms}")
        if not 0 <= self.port <= 65535:
            raise ValueError(f"port must be in [0, 65535], got {self.port}")
        if self.duration_s is not None and self.duration_s <= 0:
            raise ValueError(f"duration_s must be > 0, got {self.duration_s}")
        if self.ticks is not None and self.ticks <= 0:
            raise ValueError(f"ticks must be > 0, got {self.ticks}")
        if not 0 <= self.seed < 2**32:
            raise ValueError(f"seed must be a 32-bit unsigned integer, got {self.seed}")
        TimeRange.parse(self.time_range)


def build_scheduler(config: DashboardConfig) -> TickScheduler:
    """Wire source, engine, exporter and scheduler."""
    time_range = TimeRange.parse(config.time_range)
    source: SnapshotSource
    if config.source_url:
        source = HttpSnapshotSource(config.source_url, timeout_s=config.source_timeout_s)
    else:
        sim_config = SimConfig(
            seed=config.seed,
            start_capital=config.start_capital,
            update_ms=config.interval_ms,
            default_range=time_range,
        )
        source = SimulatedSource(TickEngine(sim_config))

    return TickScheduler(
        source,
        interval_ms=config.interval_ms,
        view=ViewState(time_range=time_range),
        exporter=MetricsExporter(),
    )


async def run(config: DashboardConfig) -> int:
    """Run until signalled, timed out, or out of ticks."""
    scheduler = build_scheduler(config)

    runner = None
    if config.port:
        runner = await start_server(create_app(scheduler), config.host, config.port)

    stop_event = asyncio.Event()
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, stop_event.set)

    task = scheduler.start(max_ticks=config.ticks)
    waiters = {asyncio.ensure_future(stop_event.wait()), task}
    try:
        await asyncio.wait(
            waiters,
            timeout=config.duration_s,
            return_when=asyncio.FIRST_COMPLETED,
        )
    finally:
        for waiter in waiters:
            if waiter is not task:
                waiter.cancel()
        await scheduler.stop()
        await scheduler.source.close()
        if runner is not None:
            await stop_server(runner)

    health = scheduler.health()
    logger.info(
        "Dashboard finished",
        extra={"ticks": health["ticks"], "failures": health["failures"]},
    )
    return 0


def parse_args(argv: list[str] | None = None) -> DashboardConfig:
    parser = argparse.ArgumentParser(description="Run agentboard telemetry service")
    parser.add_argument("--seed", type=int, default=20251214, help="PRNG seed (default: 20251214)")
    parser.add_argument(
        "--capital", type=float, default=10000.0, help="Starting capital (default: 10000)"
    )
    parser.add_argument(
        "--interval-ms", type=int, default=2000, help="Tick interval in ms (default: 2000)"
    )
    parser.add_argument(
        "--range",
        dest="time_range",
        default="medium",
        help="Display range: short|medium|long or 1h|6h|24h (default: medium)",
    )
    parser.add_argument("--host", default="127.0.0.1", help="Bind address (default: 127.0.0.1)")
    parser.add_argument(
        "--port", type=int, default=8080, help="HTTP port, 0 disables (default: 8080)"
    )
    parser.add_argument("--duration-s", type=int, default=None, help="Stop after N seconds")
    parser.add_argument("--ticks", type=int, default=None, help="Stop after N scheduler ticks")
    parser.add_argument(
        "--source-url", default=None, help="Fetch snapshots from this URL instead of simulating"
    )
    parser.add_argument("--json-logs", action="store_true", help="Emit JSON log lines")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    return DashboardConfig(
        seed=args.seed,
        start_capital=args.capital,
        interval_ms=args.interval_ms,
        time_range=args.time_range,
        host=args.host,
        port=args.port,
        duration_s=args.duration_s,
        ticks=args.ticks,
        source_url=args.source_url,
        json_logs=args.json_logs,
        verbose=args.verbose,
    )


def main(argv: list[str] | None = None) -> int:
    try:
        config = parse_args(argv)
    except ValueError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    setup_logging(
        level=logging.DEBUG if config.verbose else logging.INFO,
        json_format=config.json_logs,
    )
    return asyncio.run(run(config))


if __name__ == "__main__":
    sys.exit(main())
