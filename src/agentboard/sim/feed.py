"""Synthetic decision feed."""

from __future__ import annotations

import math

from agentboard.contracts.models import FeedItem, FeedKind
from agentboard.sim.clock import Clock
from agentboard.sim.metrics import clamp, round_half_up
from agentboard.sim.roster import bias_for
from agentboard.sim.rng import RandomSource

ACTIONS: tuple[str, ...] = (
    "Maintain exposure; wait for confirmation.",
    "Trim risk; reduce leverage until volatility cools.",
    "Add position on breakout; tight stop placement.",
    "Rotate to relative-strength pair; keep turnover budget.",
    "Hold core; hedge tail risk with small short.",
    "Take profit into strength; re-enter on pullback.",
)


def format_money(value: float) -> str:
    """USD with thousands separators, no decimals: ``$10,234``."""
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_pct(fraction: float) -> str:
    """Signed percentage with two decimals: ``+2.34%``."""
    sign = "+" if fraction >= 0 else ""
    return f"{sign}{fraction * 100:.2f}%"


def pnl_fraction(value: float, start_capital: float) -> float:
    """P&L since start as a fraction of starting capital."""
    return (value - start_capital) / start_capital


def confidence(draw: float, drawdown: float) -> float:
    """Signal confidence, penalized by drawdown."""
    return clamp(0.55 + draw * 0.35 - drawdown * 0.4, 0.20, 0.90)


def make_note(text: str, ts: int) -> FeedItem | None:
    """
    Build a user note.

    Returns:
        The note, or None when the text is empty or whitespace.
    """
    text = text.strip()
    if not text:
        return None
    return FeedItem(kind=FeedKind.NOTE, text=text, ts=ts)


class FeedSynthesizer:
    """
    Composes signal items from an agent's current state.

    Draw order per signal: action index, then confidence. The Bernoulli
    gate deciding whether to emit lives in ``should_emit``.
    """

    def __init__(
        self,
        rng: RandomSource,
        clock: Clock,
        *,
        start_capital: float = 10000.0,
        probability: float = 0.45,
    ) -> None:
        self._rng = rng
        self._clock = clock
        self._start_capital = start_capital
        self._probability = probability

    def should_emit(self) -> bool:
        """One Bernoulli draw."""
        return self._rng() < self._probability

    def synthesize(self, entity_id: str, value: float, drawdown: float) -> FeedItem:
        """
        Build a signal item.

        Args:
            entity_id: Agent identifier (selects the bias label).
            value: Current account value.
            drawdown: Current drawdown fraction.
        """
        action = ACTIONS[math.floor(self._rng() * len(ACTIONS))]
        conf = confidence(self._rng(), drawdown)
        pnl = pnl_fraction(value, self._start_capital)
        conf_pct = int(round_half_up(conf * 100))

        text = (
            f"Bias: **{bias_for(entity_id)}** · Confidence: **{conf_pct}%**\n"
            f"Account: {format_money(value)} ({format_pct(pnl)}) · "
            f"Drawdown: {drawdown * 100:.1f}%\n"
            f"{action}"
        )
        return FeedItem(kind=FeedKind.SIGNAL, text=text, ts=self._clock.now_ms())
