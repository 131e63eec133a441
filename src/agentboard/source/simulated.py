"""In-process simulated snapshot source."""

from __future__ import annotations

from agentboard.contracts.models import Snapshot
from agentboard.sim.engine import TickEngine


class SimulatedSource:
    """Each fetch applies one engine tick. Never fails."""

    def __init__(self, engine: TickEngine) -> None:
        self._engine = engine

    @property
    def engine(self) -> TickEngine:
        return self._engine

    async def fetch_snapshot(self) -> Snapshot:
        return self._engine.tick()

    async def close(self) -> None:
        return None
