"""Tests for SeededRng."""

from agentboard.sim.rng import SeededRng


class TestSeededRng:
    """Tests for the Mulberry32 stream."""

    def test_same_seed_same_sequence(self) -> None:
        """Two generators with one seed agree draw for draw."""
        a = SeededRng(20251214)
        b = SeededRng(20251214)

        assert [a() for _ in range(1000)] == [b() for _ in range(1000)]

    def test_different_seeds_diverge(self) -> None:
        """Different seeds give different streams."""
        a = SeededRng(1)
        b = SeededRng(2)

        assert [a() for _ in range(10)] != [b() for _ in range(10)]

    def test_values_in_unit_interval(self) -> None:
        """Every draw is in [0, 1)."""
        rng = SeededRng(7)

        for _ in range(10000):
            x = rng.next_float()
            assert 0.0 <= x < 1.0

    def test_roughly_uniform(self) -> None:
        """Mean and decile counts look uniform."""
        rng = SeededRng(20251214)
        draws = [rng() for _ in range(20000)]

        assert abs(sum(draws) / len(draws) - 0.5) < 0.02
        buckets = [0] * 10
        for x in draws:
            buckets[int(x * 10)] += 1
        for count in buckets:
            assert 1600 < count < 2400

    def test_seed_reduced_to_32_bits(self) -> None:
        """Seeds wrap modulo 2**32."""
        assert SeededRng(2**32 + 5).seed == 5
        assert SeededRng(2**32 + 5)() == SeededRng(5)()

    def test_draw_counter(self) -> None:
        """draws counts values produced."""
        rng = SeededRng(3)
        assert rng.draws == 0

        rng()
        rng.next_float()

        assert rng.draws == 2

    def test_restart_by_reseeding(self) -> None:
        """A new instance with the same seed restarts the stream."""
        rng = SeededRng(99)
        first = [rng() for _ in range(5)]
        for _ in range(5):
            rng()

        fresh = SeededRng(99)
        assert [fresh() for _ in range(5)] == first
