"""Tests for the deterministic random number source."""

import pytest

from irregular_puzzle.services.seeded_random import MODULUS, SeededRandom


class TestSeededRandom:
    """Tests for SeededRandom."""

    def test_same_seed_same_sequence(self) -> None:
        """Two generators with the same seed produce the same values."""
        a = SeededRandom(1234)
        b = SeededRandom(1234)
        assert [a.next() for _ in range(50)] == [b.next() for _ in range(50)]

    def test_different_seeds_differ(self) -> None:
        """Different seeds produce different sequences."""
        a = SeededRandom(1)
        b = SeededRandom(2)
        assert [a.next() for _ in range(5)] != [b.next() for _ in range(5)]

    def test_known_first_value(self) -> None:
        """The first value follows the linear congruential recurrence."""
        assert SeededRandom(102).next() == 64879 / MODULUS

    def test_values_in_unit_interval(self) -> None:
        """Every value lies in [0, 1)."""
        random = SeededRandom(42)
        for _ in range(1000):
            value = random.next()
            assert 0.0 <= value < 1.0

    def test_next_float_range(self) -> None:
        """next_float stays within its bounds."""
        random = SeededRandom(7)
        for _ in range(200):
            value = random.next_float(0.8, 1.2)
            assert 0.8 <= value < 1.2

    def test_next_int_inclusive_bounds(self) -> None:
        """next_int can return both bounds and nothing outside them."""
        random = SeededRandom(99)
        values = {random.next_int(1, 3) for _ in range(500)}
        assert values == {1, 2, 3}

    def test_negative_seed_rejected(self) -> None:
        """Negative seeds are rejected."""
        with pytest.raises(ValueError):
            SeededRandom(-1)
