"""Seeded pseudo-random stream (Mulberry32).

Everything random in the engine draws from one injected ``RandomSource``
so two engines built with the same seed and driven the same way produce
identical state.
"""

from __future__ import annotations

from collections.abc import Callable

RandomSource = Callable[[], float]

_MASK32 = 0xFFFFFFFF
_GOLDEN = 0x6D2B79F5
_TWO_32 = 4294967296.0


def _imul(a: int, b: int) -> int:
    """32-bit wrapping multiply."""
    return (a * b) & _MASK32


class SeededRng:
    """
    Mulberry32 generator producing floats in [0, 1).

    Stateful and restartable only by constructing a new instance with the
    same seed. Instances are callable so they satisfy ``RandomSource``.
    """

    def __init__(self, seed: int) -> None:
        """
        Args:
            seed: Seed, reduced to 32 bits.
        """
        self._seed = seed & _MASK32
        self._state = self._seed
        self._draws = 0

    @property
    def seed(self) -> int:
        """Seed this generator was built with."""
        return self._seed

    @property
    def draws(self) -> int:
        """Number of values produced so far."""
        return self._draws

    def next_float(self) -> float:
        """Return the next value in [0, 1)."""
        self._state = (self._state + _GOLDEN) & _MASK32
        t = self._state
        r = _imul(t ^ (t >> 15), 1 | t)
        r ^= (r + _imul(r ^ (r >> 7), 61 | r)) & _MASK32
        self._draws += 1
        return ((r ^ (r >> 14)) & _MASK32) / _TWO_32

    def __call__(self) -> float:
        return self.next_float()

    def __repr__(self) -> str:
        return f"SeededRng(seed={self._seed}, draws={self._draws})"
