"""Pseudo-random generator strategies.

Both strategies seed a fresh generator with the key on every call and draw
``hash_count`` uniform positions from it. They differ only in the generator:
a Mersenne Twister, or a 48-bit linear congruential generator.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from bloomkit.hashing.base import MASK32, HashStrategy, to_int32
from bloomkit.models import HashStrategyKind

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterator


class LinearCongruentialGenerator:
    """48-bit linear congruential generator.

    Uses multiplier ``0x5DEECE66D`` and increment ``0xB``, with the seed
    scrambled by the multiplier on construction. Bounded draws use rejection
    sampling on 31-bit outputs so every value is equally likely.
    """

    MULTIPLIER = 0x5DEECE66D
    INCREMENT = 0xB
    MASK = (1 << 48) - 1

    __slots__ = ("_seed",)

    def __init__(self, seed: int):
        """Initialize generator from a (possibly negative) integer seed."""
        self._seed = (seed ^ self.MULTIPLIER) & self.MASK

    def next_bits(self, bits: int) -> int:
        """Advance the generator and return its top ``bits`` bits."""
        self._seed = (self._seed * self.MULTIPLIER + self.INCREMENT) & self.MASK
        return self._seed >> (48 - bits)

    def next_below(self, bound: int) -> int:
        """Return a uniform integer in ``[0, bound)``.

        Args:
            bound: Exclusive upper bound, between 1 and 2**31 - 1

        """
        if bound <= 0 or bound >= 1 << 31:
            msg = f"bound must be in [1, 2**31), got {bound}"
            raise ValueError(msg)

        # Powers of two take the high bits directly
        if bound & -bound == bound:
            return (bound * self.next_bits(31)) >> 31

        while True:
            bits = self.next_bits(31)
            value = bits % bound
            if bits - value + (bound - 1) < 1 << 31:
                return value


class MersenneTwisterStrategy(HashStrategy):
    """Positions drawn from a Mersenne Twister seeded with the key."""

    kind = HashStrategyKind.MERSENNE_TWISTER

    __slots__ = ()

    def positions(self, key: int, length: int) -> Iterator[int]:
        """Yield ``hash_count`` positions for ``key``."""
        # Seed with the unsigned form; random.Random ignores the sign of ints
        rng = random.Random(to_int32(key) & MASK32)  # noqa: S311
        for _ in range(self.hash_count):
            yield rng.randrange(length)


class LinearCongruentialStrategy(HashStrategy):
    """Positions drawn from a linear congruential generator seeded with the key."""

    kind = HashStrategyKind.LINEAR_CONGRUENTIAL
    max_length = (1 << 31) - 1

    __slots__ = ()

    def positions(self, key: int, length: int) -> Iterator[int]:
        """Yield ``hash_count`` positions for ``key``."""
        rng = LinearCongruentialGenerator(to_int32(key))
        for _ in range(self.hash_count):
            yield rng.next_below(length)
