"""Deterministic pseudo-random number source.

A small linear congruential generator whose output depends only on its
integer seed, so the same seed reproduces the same edge shapes on any
platform and in any process.
"""

import math

MULTIPLIER = 9301
INCREMENT = 49297
MODULUS = 233280


class SeededRandom:
    """Linear congruential generator with a fixed, portable sequence."""

    def __init__(self, seed: int):
        """Initialize the generator.

        Args:
            seed: Non-negative integer seed.
        """
        if seed < 0:
            raise ValueError(f"Seed must be non-negative, got {seed}")
        self.seed = int(seed)

    def next(self) -> float:
        """Return the next value in [0, 1)."""
        self.seed = (self.seed * MULTIPLIER + INCREMENT) % MODULUS
        return self.seed / MODULUS

    def next_float(self, min_value: float, max_value: float) -> float:
        """Return the next value in [min_value, max_value)."""
        return min_value + self.next() * (max_value - min_value)

    def next_int(self, min_value: int, max_value: int) -> int:
        """Return the next integer in [min_value, max_value], both inclusive."""
        return math.floor(self.next_float(min_value, max_value + 1))
