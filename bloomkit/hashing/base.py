"""Hash strategy contract.

A strategy maps an integer key to ``hash_count`` bit positions of a bit array.
Strategies hold nothing but their hash count, so the same instance can be used
from several threads at once; any pseudo-random generator is created per call.
"""

from __future__ import annotations

import dataclasses
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, ClassVar

from bloomkit.utils.exceptions import ConfigurationError, IncompleteConfigurationError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterator

    from bloomkit.bitarray import BitArray
    from bloomkit.models import HashStrategyKind

MASK32 = 0xFFFFFFFF


def to_int32(value: int) -> int:
    """Fold an arbitrary Python int into a signed 32-bit integer."""
    value &= MASK32
    if value & 0x80000000:
        return value - (1 << 32)
    return value


class HashStrategy(ABC):
    """Deterministic mapping from a key to bit positions."""

    kind: ClassVar[HashStrategyKind]
    max_length: ClassVar[int | None] = None

    __slots__ = ("_hash_count",)

    def __init__(self, hash_count: int):
        """Initialize strategy.

        Args:
            hash_count: Number of bit positions per key, at least 1

        Raises:
            ConfigurationError: If hash_count is smaller than 1

        """
        if hash_count < 1:
            msg = "hash_count must be larger than 0"
            raise ConfigurationError(msg, {"hash_count": hash_count})
        self._hash_count = hash_count

    @property
    def hash_count(self) -> int:
        """Number of bit positions touched per key."""
        return self._hash_count

    @abstractmethod
    def positions(self, key: int, length: int) -> Iterator[int]:
        """Yield ``hash_count`` positions in ``[0, length)`` for ``key``.

        Implementations must be deterministic for a given key and length, and
        must not share generator state between calls.
        """

    def add_key(self, key: int, bits: BitArray) -> int:
        """Set the positions of ``key`` in ``bits``.

        Returns:
            Number of bits that changed from 0 to 1

        """
        added = 0
        for position in self.positions(key, len(bits)):
            if bits.set(position):
                added += 1
        return added

    def test_key(self, key: int, bits: BitArray) -> bool:
        """Check whether every position of ``key`` is set in ``bits``."""
        for position in self.positions(key, len(bits)):
            if not bits.get(position):
                return False
        return True

    @classmethod
    def factory(cls, hash_count: int | None = None) -> HashStrategyFactory:
        """Return a factory for this strategy, optionally with a hash count."""
        return HashStrategyFactory(cls, hash_count)

    def __eq__(self, other: object) -> bool:
        """Strategies are equal when they are the same variant and hash count."""
        if not isinstance(other, HashStrategy):
            return NotImplemented
        return type(self) is type(other) and self._hash_count == other._hash_count

    def __hash__(self) -> int:
        """Hash on variant and hash count."""
        return hash((type(self), self._hash_count))

    def __repr__(self) -> str:
        """Return string representation."""
        return f"{type(self).__name__}(hash_count={self._hash_count})"


@dataclasses.dataclass(frozen=True)
class HashStrategyFactory:
    """Description of a strategy variant and, optionally, its hash count.

    Attributes:
        strategy_class: Concrete HashStrategy subclass
        hash_count: Bound hash count, or None until the configurator binds one

    """

    strategy_class: type[HashStrategy]
    hash_count: int | None = None

    def __post_init__(self) -> None:
        """Validate a hash count given up front."""
        if self.hash_count is not None and self.hash_count < 1:
            msg = "hash_count must be larger than 0"
            raise ConfigurationError(msg, {"hash_count": self.hash_count})

    @property
    def kind(self) -> HashStrategyKind:
        """Identity of the strategy variant."""
        return self.strategy_class.kind

    def with_hash_count(self, hash_count: int) -> HashStrategyFactory:
        """Return a copy of this factory bound to ``hash_count``."""
        return dataclasses.replace(self, hash_count=hash_count)

    def create(self) -> HashStrategy:
        """Instantiate the strategy.

        Raises:
            IncompleteConfigurationError: If no hash count is bound

        """
        if self.hash_count is None:
            msg = f"No hash_count bound for {self.strategy_class.__name__}"
            raise IncompleteConfigurationError(msg)
        return self.strategy_class(self.hash_count)
