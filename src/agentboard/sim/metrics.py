"""Risk metrics derived per tick: drawdown, turnover, exposure, status."""

from __future__ import annotations

import math
from collections.abc import Iterable
from dataclasses import dataclass

from agentboard.contracts.models import AgentStatus
from agentboard.sim.roster import exposure_multiplier, turnover_multiplier
from agentboard.sim.rng import RandomSource

RISK_DRAWDOWN = 0.25
HOT_TURNOVER = 0.80


def clamp(x: float, lo: float, hi: float) -> float:
    """Clamp ``x`` into [lo, hi]."""
    return min(hi, max(lo, x))


def round_half_up(x: float, ndigits: int = 0) -> float:
    """Round to ``ndigits`` places with halves going up (2.5 -> 3, -2.5 -> -2)."""
    scale = 10**ndigits
    return math.floor(x * scale + 0.5) / scale


def compute_drawdown(values: Iterable[float], current: float, cap: float = 0.60) -> float:
    """
    Fractional decline of ``current`` from the peak of ``values``.

    The peak is taken over the whole retained window every call, so
    shrinking the window can lower it.

    Args:
        values: Retained window samples (must include ``current``).
        current: Latest value.
        cap: Upper clamp.

    Returns:
        Drawdown in [0, cap].
    """
    peak = max(values, default=current)
    if peak <= 0:
        return 0.0
    return clamp((peak - current) / peak, 0.0, cap)


def classify_status(drawdown: float, turnover: float) -> AgentStatus:
    """Risk beats Hot: drawdown is checked first."""
    if drawdown > RISK_DRAWDOWN:
        return AgentStatus.RISK
    if turnover > HOT_TURNOVER:
        return AgentStatus.HOT
    return AgentStatus.OK


@dataclass(frozen=True)
class RiskMetrics:
    """Metrics computed for one agent on one tick."""

    drawdown: float
    turnover: float
    exposure: float

    @property
    def status(self) -> AgentStatus:
        return classify_status(self.drawdown, self.turnover)


class MetricsCalculator:
    """
    Computes per-tick risk metrics.

    Turnover and exposure are random draws scaled by per-agent multipliers,
    not functions of the price path; they stand in for internal agent
    behavior that the dashboard cannot observe.
    """

    def __init__(self, rng: RandomSource, max_drawdown: float = 0.60) -> None:
        """
        Args:
            rng: Random stream (two draws per call: turnover then exposure).
            max_drawdown: Drawdown clamp.
        """
        self._rng = rng
        self._max_drawdown = max_drawdown

    def compute(self, index: int, values: Iterable[float], current: float) -> RiskMetrics:
        """
        Compute metrics for the agent at roster ``index``.

        Args:
            index: Roster index (selects multipliers).
            values: Current window samples.
            current: Latest value.
        """
        drawdown = compute_drawdown(values, current, self._max_drawdown)
        turnover = clamp((0.12 + self._rng() * 0.88) * turnover_multiplier(index), 0.0, 1.0)
        exposure = clamp((0.10 + self._rng() * 0.90) * exposure_multiplier(index), 0.0, 1.0)
        return RiskMetrics(drawdown=drawdown, turnover=turnover, exposure=exposure)
