"""Per-agent series state and the store that owns it."""

from __future__ import annotations

import hashlib
from collections import deque
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Any

import orjson

from agentboard.contracts.models import Entity, FeedItem, Position
from agentboard.errors import UnknownEntityError
from agentboard.features.rolling_window import RollingWindow


class FeedBuffer:
    """
    Most-recent-first feed, bounded to ``limit`` items.

    Pushing onto a full buffer drops the oldest item from the tail.
    """

    def __init__(self, limit: int = 60) -> None:
        if limit <= 0:
            raise ValueError(f"limit must be > 0, got {limit}")
        self._items: deque[FeedItem] = deque(maxlen=limit)

    @property
    def limit(self) -> int:
        """Maximum number of retained items."""
        return self._items.maxlen or 0

    def push(self, item: FeedItem) -> None:
        """Insert at the head."""
        self._items.appendleft(item)

    def latest(self, n: int | None = None) -> list[FeedItem]:
        """Newest ``n`` items (all when None), newest first."""
        items = list(self._items)
        return items if n is None else items[: max(n, 0)]

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[FeedItem]:
        return iter(self._items)


@dataclass
class SeriesState:
    """
    Mutable simulation state for one agent.

    Only the tick engine writes to it.

    Attributes:
        values: Rolling history of account values, most-recent-last.
        drawdown: Decline from the window peak, in [0, max_drawdown].
        turnover: Simulated activity score in [0, 1].
        exposure: Simulated capital-at-risk score in [0, 1].
        positions: Current synthetic book, replaced wholesale each tick.
        feed: Signals and notes, most-recent-first.
    """

    values: RollingWindow[float]
    drawdown: float = 0.0
    turnover: float = 0.0
    exposure: float = 0.0
    positions: tuple[Position, ...] = ()
    feed: FeedBuffer = field(default_factory=FeedBuffer)

    @property
    def current(self) -> float:
        """Latest account value."""
        return self.values.last

    def to_dict(self) -> dict[str, Any]:
        """Plain representation (used for digests and the HTTP layer)."""
        return {
            "values": self.values.values(),
            "drawdown": self.drawdown,
            "turnover": self.turnover,
            "exposure": self.exposure,
            "positions": [p.model_dump(mode="json") for p in self.positions],
            "feed": [f.model_dump(mode="json") for f in self.feed],
        }


class StateStore:
    """
    Explicit store of every agent's SeriesState, in roster order.

    Owned by the TickEngine; the leaderboard, scheduler and HTTP layer
    receive it by reference and only read.
    """

    def __init__(self, roster: tuple[Entity, ...], states: dict[str, SeriesState]) -> None:
        missing = [e.id for e in roster if e.id not in states]
        if missing:
            raise ValueError(f"no series state for agents: {missing}")
        self._roster = roster
        self._states = states
        self._index = {e.id: i for i, e in enumerate(roster)}

    @property
    def roster(self) -> tuple[Entity, ...]:
        """Agents in roster order."""
        return self._roster

    def entity(self, entity_id: str) -> Entity:
        """
        Look up an agent's identity.

        Raises:
            UnknownEntityError: If the id is not in the roster.
        """
        return self._roster[self.index_of(entity_id)]

    def index_of(self, entity_id: str) -> int:
        """Roster index of an agent."""
        try:
            return self._index[entity_id]
        except KeyError:
            raise UnknownEntityError(entity_id) from None

    def get(self, entity_id: str) -> SeriesState:
        """
        Get an agent's series state.

        Raises:
            UnknownEntityError: If the id is not in the roster.
        """
        try:
            return self._states[entity_id]
        except KeyError:
            raise UnknownEntityError(entity_id) from None

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._index

    def items(self) -> Iterator[tuple[int, Entity, SeriesState]]:
        """Yield (index, entity, state) in roster order."""
        for i, entity in enumerate(self._roster):
            yield i, entity, self._states[entity.id]

    def to_dict(self) -> dict[str, dict[str, Any]]:
        """Plain representation of every agent's state."""
        return {entity.id: state.to_dict() for _, entity, state in self.items()}

    def digest(self) -> str:
        """SHA256 of the serialized state, for determinism checks."""
        payload = orjson.dumps(self.to_dict(), option=orjson.OPT_SORT_KEYS)
        return hashlib.sha256(payload).hexdigest()
