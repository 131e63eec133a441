"""Data contracts for agentboard."""

from agentboard.contracts.models import (
    AgentStatus,
    Entity,
    FeedItem,
    FeedKind,
    LeaderboardRow,
    Position,
    PositionSide,
    Snapshot,
    SnapshotEntry,
    SortKey,
)

__all__ = [
    "AgentStatus",
    "Entity",
    "FeedItem",
    "FeedKind",
    "LeaderboardRow",
    "Position",
    "PositionSide",
    "Snapshot",
    "SnapshotEntry",
    "SortKey",
]
