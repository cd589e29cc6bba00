"""Double hashing strategy.

Two base values are derived from the key: a scrambled value from a
Wang/Jenkins style integer mix, and a probe step ``1 + |key mod length|``.
Position ``i`` is ``|scrambled XOR (i * probe)| mod length``, which simulates
``hash_count`` independent hash functions from a single key hash.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from bloomkit.hashing.base import MASK32, HashStrategy, to_int32
from bloomkit.models import HashStrategyKind

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterator


def scramble(key: int) -> int:
    """Spread the bits of a 32-bit key with a shift-xor-add avalanche mix.

    Arithmetic wraps at 32 bits and right shifts are unsigned.

    Args:
        key: Key to mix

    Returns:
        Mixed value as a signed 32-bit integer

    """
    h = key & MASK32
    h = (h + (((h << 15) ^ 0xFFFFCD7D) & MASK32)) & MASK32
    h ^= h >> 10
    h = (h + (h << 3)) & MASK32
    h ^= h >> 6
    h = (h + (h << 2) + (h << 14)) & MASK32
    h ^= h >> 16
    return to_int32(h)


class DoubleHashStrategy(HashStrategy):
    """Default strategy: double hashing over a scrambled key."""

    kind = HashStrategyKind.DOUBLE_HASHING

    __slots__ = ()

    def positions(self, key: int, length: int) -> Iterator[int]:
        """Yield ``hash_count`` positions for ``key``."""
        key = to_int32(key)
        probe = 1 + abs(key) % length
        seed = scramble(key)
        for i in range(self.hash_count):
            yield abs(seed ^ to_int32(i * probe)) % length
