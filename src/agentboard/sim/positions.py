"""Synthetic open-position books."""

from __future__ import annotations

import math

from agentboard.contracts.models import Position, PositionSide
from agentboard.sim.metrics import round_half_up
from agentboard.sim.roster import HIGH_TURNOVER_AGENTS
from agentboard.sim.rng import RandomSource

INSTRUMENTS: tuple[str, ...] = ("BTC", "ETH", "SOL", "DOGE", "XRP", "BNB")

# Entry price scale by instrument class
PRICE_MULTIPLIER: dict[str, float] = {"BTC": 60.0, "ETH": 20.0}
DEFAULT_PRICE_MULTIPLIER = 1.2

HIGH_LEVERAGE_CAP = 6.0
LEVERAGE_CAP = 4.0
LONG_THRESHOLD = 0.48


def price_multiplier(symbol: str) -> float:
    """Entry price multiplier for an instrument symbol (e.g. ``ETH-PERP``)."""
    base = symbol.split("-", 1)[0]
    return PRICE_MULTIPLIER.get(base, DEFAULT_PRICE_MULTIPLIER)


class PositionSynthesizer:
    """
    Regenerates an agent's book from scratch every call.

    Book size is 2 to 4. Per position the draw order is: symbol rotation,
    side, entry, leverage, stop band, take-profit band, size factor.
    """

    def __init__(self, rng: RandomSource) -> None:
        self._rng = rng

    def synthesize(self, entity_id: str, value: float) -> tuple[Position, ...]:
        """
        Build a fresh book.

        Args:
            entity_id: Agent identifier (selects leverage cap).
            value: Current account value (scales size).
        """
        rng = self._rng
        n = 2 + math.floor(rng() * 3)
        lev_cap = HIGH_LEVERAGE_CAP if entity_id in HIGH_TURNOVER_AGENTS else LEVERAGE_CAP

        book: list[Position] = []
        for k in range(n):
            base = INSTRUMENTS[(k + math.floor(rng() * len(INSTRUMENTS))) % len(INSTRUMENTS)]
            symbol = f"{base}-PERP"
            side = PositionSide.LONG if rng() > LONG_THRESHOLD else PositionSide.SHORT
            entry = (100 + rng() * 900) * price_multiplier(symbol)
            leverage = 1 + rng() * lev_cap

            stop_band = 0.01 + rng() * 0.03
            tp_band = 0.015 + rng() * 0.06
            if side is PositionSide.LONG:
                stop = entry * (1 - stop_band)
                tp = entry * (1 + tp_band)
            else:
                stop = entry * (1 + stop_band)
                tp = entry * (1 - tp_band)

            size = round_half_up((value / 9000) * (0.2 + rng() * 0.8), 1)
            book.append(
                Position(
                    symbol=symbol,
                    side=side,
                    entry=entry,
                    stop=stop,
                    tp=tp,
                    leverage=leverage,
                    size=size,
                )
            )
        return tuple(book)
