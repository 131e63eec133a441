"""
Data contracts for the agentboard engine.

These are the canonical shapes shared between the simulation engine, the
leaderboard, the scheduler and the HTTP layer. Everything crossing the
engine boundary is frozen.
"""

from __future__ import annotations

from enum import Enum

import orjson
from pydantic import BaseModel, ConfigDict, Field, field_validator


class FeedKind(str, Enum):
    """Kind of feed item."""

    SIGNAL = "signal"
    NOTE = "note"  # User-authored, never generated by the engine


class PositionSide(str, Enum):
    """Direction of a synthetic position."""

    LONG = "LONG"
    SHORT = "SHORT"


class AgentStatus(str, Enum):
    """Leaderboard status classification."""

    RISK = "Risk"
    HOT = "Hot"
    OK = "OK"


class SortKey(str, Enum):
    """Leaderboard sort key.

    VALUE and PNL sort descending, DD and TURNOVER ascending.
    """

    VALUE = "value"
    PNL = "pnl"
    DD = "dd"
    TURNOVER = "turnover"

    @property
    def descending(self) -> bool:
        """True when higher is better for this key."""
        return self in (SortKey.VALUE, SortKey.PNL)


class Entity(BaseModel):
    """
    Static identity of one competing agent.

    Attributes:
        id: Unique identifier (lowercase, e.g. "deepseek").
        name: Display name.
        style: Strategy label.
        color: Display color (hex).
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1, description="Unique agent identifier")
    name: str = Field(..., min_length=1, description="Display name")
    style: str = Field(..., description="Strategy label")
    color: str = Field(..., pattern=r"^#[0-9a-fA-F]{6}$", description="Display color")

    @field_validator("id")
    @classmethod
    def validate_id(cls, v: str) -> str:
        """Ensure identifier is lowercase."""
        return v.lower()


class FeedItem(BaseModel):
    """Decision or note record in an agent's feed."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    kind: FeedKind = Field(..., description="signal or note")
    text: str = Field(..., min_length=1, description="Message text, may contain **emphasis**")
    ts: int = Field(..., ge=0, description="Creation timestamp (ms)")


class Position(BaseModel):
    """Synthetic open position."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    symbol: str = Field(..., min_length=1, description="Instrument identifier (e.g. BTC-PERP)")
    side: PositionSide = Field(..., description="LONG or SHORT")
    entry: float = Field(..., gt=0, description="Entry price")
    stop: float = Field(..., gt=0, description="Stop price")
    tp: float = Field(..., gt=0, description="Take-profit price")
    leverage: float = Field(..., ge=1, description="Leverage multiple")
    size: float = Field(..., ge=0, description="Position size")


class SnapshotEntry(BaseModel):
    """Per-agent line of a snapshot."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    value: float = Field(..., gt=0, description="Current account value")


class Snapshot(BaseModel):
    """
    Result of one tick: timestamp plus every agent's current value.

    The only artifact crossing from the engine to rendering. A network
    backed source produces the same type from JSON.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    ts: int = Field(..., ge=0, description="Tick timestamp (ms)")
    agents: tuple[SnapshotEntry, ...] = Field(default_factory=tuple)

    def to_json(self) -> bytes:
        """Serialize to JSON bytes using orjson."""
        return orjson.dumps(self.model_dump(mode="json"))

    @classmethod
    def from_json(cls, data: bytes | str) -> Snapshot:
        """Deserialize from JSON."""
        if isinstance(data, str):
            data = data.encode()
        return cls.model_validate(orjson.loads(data))


class LeaderboardRow(BaseModel):
    """One row of the leaderboard view."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    id: str
    name: str
    style: str
    value: float
    pnl: float = Field(..., description="Fractional P&L vs starting capital")
    drawdown: float = Field(..., ge=0, le=1)
    turnover: float = Field(..., ge=0, le=1)
    status: AgentStatus
