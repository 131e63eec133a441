"""Simulation engine for agentboard.

Deterministic random-walk telemetry for a fixed roster of agents: seeded
PRNG, rolling windows, risk metrics, synthetic feed and position books.
"""

from __future__ import annotations

from agentboard.sim.clock import Clock, ManualClock, SystemClock
from agentboard.sim.config import RANGE_CAPACITY, SimConfig, TimeRange
from agentboard.sim.engine import TickEngine
from agentboard.sim.feed import FeedSynthesizer
from agentboard.sim.metrics import MetricsCalculator, classify_status
from agentboard.sim.positions import PositionSynthesizer
from agentboard.sim.rng import RandomSource, SeededRng
from agentboard.sim.roster import DEFAULT_ROSTER
from agentboard.sim.state import FeedBuffer, SeriesState, StateStore

__all__ = [
    "DEFAULT_ROSTER",
    "RANGE_CAPACITY",
    "Clock",
    "FeedBuffer",
    "FeedSynthesizer",
    "ManualClock",
    "MetricsCalculator",
    "PositionSynthesizer",
    "RandomSource",
    "SeededRng",
    "SeriesState",
    "SimConfig",
    "StateStore",
    "SystemClock",
    "TickEngine",
    "TimeRange",
    "classify_status",
]
