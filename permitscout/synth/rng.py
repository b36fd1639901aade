"""
Seeded Pseudo-Random Sequences

Park-Miller (Lehmer) multiplicative congruential generator. Every synthesis
operation owns its own instance so that two operations never interleave draws.
"""
from __future__ import annotations

import math

from permitscout.config import IDENTITY_SEED_MULTIPLIER, STATE_STATS_SEED

MODULUS = 2147483647
MULTIPLIER = 16807
DEFAULT_SEED = STATE_STATS_SEED


class SeededSequenceGenerator:
    """
    Deterministic float/int source.

    The same seed always yields the same sequence, across runs and across
    instances.
    """

    def __init__(self, seed: int = DEFAULT_SEED):
        self._state = DEFAULT_SEED
        self.set_seed(seed)

    @property
    def state(self) -> int:
        return self._state

    def set_seed(self, value: int) -> None:
        state = int(value) % MODULUS
        # 0 is a fixed point of the recurrence
        self._state = state if state else DEFAULT_SEED

    def next(self) -> float:
        """Advance the state and return a float in [0, 1)."""
        self._state = (self._state * MULTIPLIER) % MODULUS
        return (self._state - 1) / (MODULUS - 1)

    def next_int(self, low: int, high: int) -> int:
        """Integer in [low, high], inclusive on both ends."""
        return math.floor(self.next() * (high - low + 1)) + low


def seed_from_identity(identity: str) -> int:
    """Sum of character codes scaled by a constant multiplier."""
    return sum(ord(ch) for ch in str(identity)) * IDENTITY_SEED_MULTIPLIER


def generator_for(identity: str) -> SeededSequenceGenerator:
    return SeededSequenceGenerator(seed_from_identity(identity))
