"""Snapshot source interface."""

from __future__ import annotations

from typing import TYPE_CHECKING, Protocol

if TYPE_CHECKING:
    from agentboard.contracts.models import Snapshot
    from agentboard.sim.engine import TickEngine


class SnapshotSource(Protocol):
    """
    Produces one snapshot per scheduler tick.

    ``engine`` is the local TickEngine when the source simulates, or None
    when snapshots come from elsewhere (feeds, positions and the
    leaderboard are then unavailable).
    """

    @property
    def engine(self) -> TickEngine | None: ...

    async def fetch_snapshot(self) -> Snapshot:
        """
        Produce the next snapshot.

        Raises:
            SourceUnavailable: If the backing source cannot be reached.
        """
        ...

    async def close(self) -> None: ...
