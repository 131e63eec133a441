"""Tests for RollingWindow."""

import pytest

from agentboard.features.rolling_window import RollingWindow


class TestRollingWindow:
    """Tests for RollingWindow."""

    def test_push_and_values(self) -> None:
        """Pushed values come back oldest first."""
        win: RollingWindow[int] = RollingWindow(capacity=5)

        win.push(1)
        win.push(2)
        win.push(3)

        assert win.values() == [1, 2, 3]
        assert win.last == 3

    def test_drops_from_head_past_capacity(self) -> None:
        """Oldest samples are dropped once capacity is exceeded."""
        win: RollingWindow[int] = RollingWindow(capacity=3)

        win.extend([1, 2, 3, 4, 5])

        assert win.values() == [3, 4, 5]
        assert len(win) == 3

    def test_length_never_exceeds_capacity(self) -> None:
        """Bound holds after every push."""
        win: RollingWindow[int] = RollingWindow(capacity=90)

        for i in range(500):
            win.push(i)
            assert len(win) == min(90, i + 1)

    def test_shrink_drops_head_immediately(self) -> None:
        """Shrinking trims the oldest excess at once."""
        win: RollingWindow[int] = RollingWindow(capacity=270)
        win.extend(range(270))

        dropped = win.resize(90)

        assert dropped == 180
        assert win.values() == list(range(180, 270))

    def test_grow_does_not_backfill(self) -> None:
        """Growing keeps existing samples and fills on later pushes."""
        win: RollingWindow[int] = RollingWindow(capacity=3)
        win.extend([1, 2, 3])

        assert win.resize(5) == 0
        assert win.values() == [1, 2, 3]

        win.push(4)
        win.push(5)
        win.push(6)
        assert win.values() == [2, 3, 4, 5, 6]

    def test_initial_data_trimmed(self) -> None:
        """Construction with more data than capacity keeps the newest."""
        win: RollingWindow[int] = RollingWindow(capacity=2, _data=[1, 2, 3])  # type: ignore[arg-type]

        assert win.values() == [2, 3]

    def test_tail(self) -> None:
        """tail returns the newest n samples."""
        win: RollingWindow[int] = RollingWindow(capacity=10)
        win.extend(range(10))

        assert win.tail(3) == [7, 8, 9]
        assert win.tail(0) == []
        assert win.tail(50) == list(range(10))

    def test_empty(self) -> None:
        """Empty window has no last."""
        win: RollingWindow[float] = RollingWindow(capacity=4)

        assert len(win) == 0
        assert win.tail(3) == []
        with pytest.raises(IndexError):
            _ = win.last

    def test_invalid_capacity(self) -> None:
        """Capacity must be positive."""
        with pytest.raises(ValueError):
            RollingWindow(capacity=0)
        win: RollingWindow[int] = RollingWindow(capacity=1)
        with pytest.raises(ValueError):
            win.resize(-1)
