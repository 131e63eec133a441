"""Simulation configuration.

SimConfig is frozen (immutable) and defines all simulation parameters.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class TimeRange(str, Enum):
    """Display range selecting the rolling window capacity."""

    SHORT = "short"
    MEDIUM = "medium"
    LONG = "long"

    @classmethod
    def parse(cls, value: str | TimeRange) -> TimeRange:
        """Parse a range name or its UI label (1h / 6h / 24h)."""
        if isinstance(value, TimeRange):
            return value
        key = value.strip().lower()
        alias = _RANGE_LABELS.get(key)
        if alias is not None:
            return alias
        return cls(key)

    @property
    def capacity(self) -> int:
        """Rolling window capacity for this range."""
        return RANGE_CAPACITY[self]


# At a 2s cadence these approximate 1h / 6h / 24h of history
RANGE_CAPACITY: dict[TimeRange, int] = {
    TimeRange.SHORT: 90,
    TimeRange.MEDIUM: 270,
    TimeRange.LONG: 720,
}

_RANGE_LABELS: dict[str, TimeRange] = {
    "1h": TimeRange.SHORT,
    "6h": TimeRange.MEDIUM,
    "24h": TimeRange.LONG,
}


class SimConfig(BaseModel):
    """Simulation configuration (frozen)."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    seed: int = Field(default=20251214, ge=0, lt=2**32, description="PRNG seed (32-bit)")
    start_capital: float = Field(default=10000.0, gt=0, description="Starting account value")
    update_ms: int = Field(default=2000, gt=0, description="Tick interval in milliseconds")
    default_range: TimeRange = Field(default=TimeRange.MEDIUM)

    # Seeding
    initial_points: int = Field(default=120, ge=1, description="Samples per agent at start")
    initial_spread: float = Field(
        default=0.002, description="Per-index offset of the seed level (fraction of capital)"
    )
    initial_noise: float = Field(default=80.0, ge=0, description="Seed sample noise amplitude")
    initial_feed_items: int = Field(default=6, ge=0, description="Signals pushed per agent at boot")

    # Random walk
    value_floor: float = Field(default=2000.0, gt=0, description="No sample below this value")
    drift_unit: float = Field(default=0.35, description="Drift per tick per index step")
    drift_center: float = Field(default=2.5, description="Index with zero drift")
    base_vol: float = Field(default=60.0, ge=0, description="Volatility of index 0")
    vol_step: float = Field(default=5.0, ge=0, description="Volatility added per index")

    # Metrics
    max_drawdown: float = Field(default=0.60, gt=0, le=1, description="Drawdown clamp")

    # Feed
    feed_probability: float = Field(default=0.45, ge=0, le=1, description="P(signal) per tick")
    feed_limit: int = Field(default=60, ge=1, description="Max feed items per agent")

    def drift(self, index: int) -> float:
        """Per-tick drift for the agent at roster ``index``."""
        return (index - self.drift_center) * self.drift_unit

    def vol(self, index: int) -> float:
        """Per-tick volatility scale for the agent at roster ``index``."""
        return self.base_vol + index * self.vol_step
