"""Dashboard control state set by the UI layer (not persisted)."""

from __future__ import annotations

from dataclasses import dataclass

from agentboard.sim.config import TimeRange


@dataclass
class ViewState:
    """
    Commands issued by the rendering layer.

    Attributes:
        time_range: Active display range (drives window capacity).
        selected_entity: Agent whose feed/positions are requested. Has no
            effect on the simulation.
        paused: When set the scheduler skips ticks entirely.
    """

    time_range: TimeRange = TimeRange.MEDIUM
    selected_entity: str | None = None
    paused: bool = False

    def to_dict(self) -> dict[str, str | bool | None]:
        return {
            "range": self.time_range.value,
            "selected_entity": self.selected_entity,
            "paused": self.paused,
        }
