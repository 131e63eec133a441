"""Tick engine: advances every agent by one random-walk step per call."""

from __future__ import annotations

import logging

from agentboard.contracts.models import Entity, FeedItem, Snapshot, SnapshotEntry
from agentboard.features.rolling_window import RollingWindow
from agentboard.sim.clock import Clock, SystemClock
from agentboard.sim.config import SimConfig, TimeRange
from agentboard.sim.feed import FeedSynthesizer, make_note
from agentboard.sim.metrics import MetricsCalculator
from agentboard.sim.positions import PositionSynthesizer
from agentboard.sim.rng import RandomSource, SeededRng
from agentboard.sim.roster import DEFAULT_ROSTER, validate_roster
from agentboard.sim.state import FeedBuffer, SeriesState, StateStore

logger = logging.getLogger(__name__)


class TickEngine:
    """
    Owns the StateStore and is the only writer to it.

    Per agent and per tick the order is fixed: window update, metrics,
    conditional feed signal, position book. Each agent's update reads
    only its own state.

    Usage:
        engine = TickEngine(SimConfig(seed=42), clock=ManualClock(0, 2000))
        snapshot = engine.tick()
        state = engine.store.get("deepseek")
    """

    def __init__(
        self,
        config: SimConfig | None = None,
        *,
        rng: RandomSource | None = None,
        clock: Clock | None = None,
        roster: tuple[Entity, ...] = DEFAULT_ROSTER,
        time_range: TimeRange | str | None = None,
    ) -> None:
        """
        Initialize and seed the engine.

        Args:
            config: Simulation configuration. Uses defaults if not provided.
            rng: Random stream. Defaults to SeededRng(config.seed).
            clock: Time source. Defaults to the system clock.
            roster: Agents to simulate.
            time_range: Initial display range. Defaults to config.default_range.
        """
        self._config = config or SimConfig()
        self._rng: RandomSource = rng if rng is not None else SeededRng(self._config.seed)
        self._clock: Clock = clock or SystemClock()
        self._roster = validate_roster(roster)
        self._range = TimeRange.parse(time_range or self._config.default_range)

        self._metrics = MetricsCalculator(self._rng, max_drawdown=self._config.max_drawdown)
        self._feed = FeedSynthesizer(
            self._rng,
            self._clock,
            start_capital=self._config.start_capital,
            probability=self._config.feed_probability,
        )
        self._positions = PositionSynthesizer(self._rng)

        self._tick_count = 0
        self._store = self._seed()
        self._boot()

    @property
    def config(self) -> SimConfig:
        """Get engine configuration."""
        return self._config

    @property
    def store(self) -> StateStore:
        """Read access to the state store."""
        return self._store

    @property
    def roster(self) -> tuple[Entity, ...]:
        """Agents in roster order."""
        return self._roster

    @property
    def time_range(self) -> TimeRange:
        """Active display range."""
        return self._range

    @property
    def capacity(self) -> int:
        """Window capacity for the active range."""
        return self._range.capacity

    @property
    def tick_count(self) -> int:
        """Ticks applied since construction."""
        return self._tick_count

    def _seed(self) -> StateStore:
        """Fill every window with the initial samples, agent by agent."""
        cfg = self._config
        states: dict[str, SeriesState] = {}
        for i, entity in enumerate(self._roster):
            level = cfg.start_capital * (1 + (i - 2) * cfg.initial_spread)
            window: RollingWindow[float] = RollingWindow(capacity=self.capacity)
            for _ in range(cfg.initial_points):
                window.push(level + (self._rng() - 0.5) * cfg.initial_noise)
            states[entity.id] = SeriesState(values=window, feed=FeedBuffer(cfg.feed_limit))
        return StateStore(self._roster, states)

    def _boot(self) -> None:
        """Seed initial feed signals and position books."""
        for _, entity, state in self._store.items():
            for _ in range(self._config.initial_feed_items):
                state.feed.push(self._feed.synthesize(entity.id, state.current, state.drawdown))
            state.positions = self._positions.synthesize(entity.id, state.current)

    def _advance(self, index: int, entity: Entity, state: SeriesState) -> None:
        """Apply one tick to one agent."""
        cfg = self._config
        last = state.values.last
        shock = (self._rng() - 0.5) * cfg.vol(index)
        value = max(cfg.value_floor, last + cfg.drift(index) + shock)

        state.values.push(value)

        metrics = self._metrics.compute(index, state.values, value)
        state.drawdown = metrics.drawdown
        state.turnover = metrics.turnover
        state.exposure = metrics.exposure

        if self._feed.should_emit():
            state.feed.push(self._feed.synthesize(entity.id, value, state.drawdown))

        state.positions = self._positions.synthesize(entity.id, value)

    def tick(self) -> Snapshot:
        """
        Advance the whole roster by one interval.

        Returns:
            Snapshot of every agent's new value.
        """
        ts = self._clock.now_ms()
        for index, entity, state in self._store.items():
            self._advance(index, entity, state)
        self._tick_count += 1
        logger.debug("Tick %d applied", self._tick_count, extra={"tick": self._tick_count})
        return self.snapshot(ts)

    def snapshot(self, ts: int | None = None) -> Snapshot:
        """Current values without advancing."""
        if ts is None:
            ts = self._clock.now_ms()
        return Snapshot(
            ts=ts,
            agents=tuple(
                SnapshotEntry(id=entity.id, name=entity.name, value=state.current)
                for _, entity, state in self._store.items()
            ),
        )

    def set_range(self, time_range: TimeRange | str) -> TimeRange:
        """
        Switch display range.

        Shrinking drops the oldest samples immediately; growing lets the
        windows fill organically on later ticks.

        Raises:
            ValueError: If the range name is unknown.
        """
        new_range = TimeRange.parse(time_range)
        if new_range is self._range:
            return new_range
        dropped = 0
        for _, _, state in self._store.items():
            dropped += state.values.resize(new_range.capacity)
        logger.info(
            "Range switched %s -> %s",
            self._range.value,
            new_range.value,
            extra={"capacity": new_range.capacity, "dropped": dropped},
        )
        self._range = new_range
        return new_range

    def add_note(self, entity_id: str, text: str) -> FeedItem | None:
        """
        Append a user note to an agent's feed.

        Returns:
            The stored note, or None if the text was blank and dropped.

        Raises:
            UnknownEntityError: If the id is not in the roster.
        """
        state = self._store.get(entity_id)
        note = make_note(text, self._clock.now_ms())
        if note is None:
            logger.debug("Dropped blank note", extra={"agent": entity_id})
            return None
        state.feed.push(note)
        return note
