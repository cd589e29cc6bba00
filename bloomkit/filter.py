"""Bloom filter implementation for efficient set membership testing.

Provides a space-efficient probabilistic data structure for testing whether
an element is a member of a set. False positives are possible, but false
negatives are not.
"""

from __future__ import annotations

import logging
import math
import threading
from typing import TYPE_CHECKING, Generic, TypeVar

from bloomkit.bitarray import BitArray
from bloomkit.hashing import get_strategy_class
from bloomkit.models import FilterSnapshot
from bloomkit.sizing import expected_false_positive_probability
from bloomkit.utils.exceptions import ConfigurationError, IncompatibleFilterError

if TYPE_CHECKING:  # pragma: no cover
    from collections.abc import Iterable

    from bloomkit.hashing import HashStrategy

logger = logging.getLogger(__name__)

E = TypeVar("E")

NONE_KEY = 0


def element_key(element: object) -> int:
    """Derive the integer key of an element from its ``__hash__``.

    ``None`` maps to a fixed key so that it can be stored like any other value.
    """
    if element is None:
        return NONE_KEY
    return hash(element)


class BloomFilter(Generic[E]):
    """A probabilistic "shadow" of a set of elements.

    Adding an element guarantees that :meth:`might_contain` returns ``True``
    for it, but ``True`` does not guarantee that the element was ever added.
    Filters are normally created with
    :class:`~bloomkit.configurator.FilterConfigurator`.

    Length and hashing strategy are fixed at construction. Mutating methods are
    not synchronised; see :class:`SynchronizedBloomFilter`.
    """

    def __init__(
        self,
        strategy: HashStrategy,
        length: int,
        bits: BitArray | None = None,
    ):
        """Initialize Bloom filter.

        Args:
            strategy: Hashing strategy, owning the hash count
            length: Number of bits in the array
            bits: Existing bit array to copy (for reconstruction)

        Raises:
            ConfigurationError: If the length is invalid for the strategy

        """
        if length < 1:
            msg = "length must be larger than 0"
            raise ConfigurationError(msg, {"length": length})
        if strategy.max_length is not None and length > strategy.max_length:
            msg = f"{type(strategy).__name__} supports at most {strategy.max_length} bits"
            raise ConfigurationError(msg, {"length": length})

        if bits is None:
            bits = BitArray(length)
        elif len(bits) != length:
            msg = f"Bit array size mismatch: expected {length} bits, got {len(bits)}"
            raise ConfigurationError(msg, {"length": length})

        self._strategy = strategy
        self._bits = bits.copy()
        self._true_bit_count = bits.count()

    @classmethod
    def from_snapshot(cls, snapshot: FilterSnapshot) -> BloomFilter[E]:
        """Reconstruct a filter equal to the one the snapshot was taken from."""
        strategy = get_strategy_class(snapshot.strategy)(snapshot.hash_count)
        return cls(strategy, snapshot.length, BitArray(snapshot.length, snapshot.bits))

    def snapshot(self) -> FilterSnapshot:
        """Capture length, hash count, strategy identity and bits."""
        return FilterSnapshot(
            length=self.length,
            hash_count=self.hash_count,
            strategy=self._strategy.kind,
            bits=self._bits.to_bytes(),
        )

    @property
    def length(self) -> int:
        """Number of bits used to represent the set."""
        return len(self._bits)

    @property
    def hash_count(self) -> int:
        """Number of bit positions per element."""
        return self._strategy.hash_count

    @property
    def hash_strategy(self) -> HashStrategy:
        """Hashing strategy of this filter."""
        return self._strategy

    @property
    def true_bit_count(self) -> int:
        """Current number of set bits."""
        return self._true_bit_count

    @property
    def bits(self) -> BitArray:
        """Copy of the bit array representing the added elements.

        Mutating the returned array does not change the filter.
        """
        return self._bits.copy()

    def might_contain(self, element: E) -> bool:
        """Check if element might be in the filter.

        Returns:
            False if the element is definitely absent, True if it may be
            present (with probability :meth:`false_positive_probability` of
            being a false positive)

        """
        return self._strategy.test_key(element_key(element), self._bits)

    __contains__ = might_contain

    def add(self, element: E) -> bool:
        """Add element to the filter.

        Returns:
            True if the filter changed as a result of this call

        """
        added = self._strategy.add_key(element_key(element), self._bits)
        self._true_bit_count += added
        return added > 0

    def add_all(self, elements: Iterable[E]) -> bool:
        """Add all elements to the filter.

        Returns:
            True if the filter changed as a result of this call

        """
        changed = False
        for element in elements:
            changed = self.add(element) or changed
        return changed

    def is_compatible(self, other: BloomFilter[E]) -> bool:
        """Whether ``other`` has the same length and hashing strategy."""
        return self.length == other.length and self._strategy == other._strategy

    def _check_compatible(self, other: BloomFilter[E], operation: str) -> None:
        if self.is_compatible(other):
            return
        details = {
            "length": (self.length, other.length),
            "strategy": (repr(self._strategy), repr(other._strategy)),
        }
        logger.warning("Refusing %s of incompatible Bloom filters: %s", operation, details)
        msg = f"Cannot {operation} Bloom filters with different length or hash strategy"
        raise IncompatibleFilterError(msg, details)

    def union(self, other: BloomFilter[E]) -> None:
        """Add all elements of another filter to this one, in place.

        This is the union of the represented sets, plus possibly additional
        false positives.

        Raises:
            IncompatibleFilterError: If length or strategy differ

        """
        self._check_compatible(other, "union")
        self._bits.or_update(other._bits)
        self._true_bit_count = self._bits.count()
        logger.debug("Union complete, %d bits set", self._true_bit_count)

    def intersection(self, other: BloomFilter[E]) -> None:
        """Retain only the elements also present in another filter, in place.

        This is the intersection of the represented sets, plus possibly
        false positives.

        Raises:
            IncompatibleFilterError: If length or strategy differ

        """
        self._check_compatible(other, "intersection")
        self._bits.and_update(other._bits)
        self._true_bit_count = self._bits.count()
        logger.debug("Intersection complete, %d bits set", self._true_bit_count)

    def clear(self) -> None:
        """Remove all elements from the filter."""
        self._bits.clear()
        self._true_bit_count = 0

    def is_empty(self) -> bool:
        """Return True if the filter contains no elements."""
        return self._true_bit_count == 0

    def copy(self) -> BloomFilter[E]:
        """Return an independent filter with the same strategy and bits."""
        return type(self)(self._strategy, self.length, self._bits)

    def estimated_size(self) -> int:
        """Estimate the number of distinct elements added.

        Inverts the expected number of set bits; a saturated filter returns
        ``length // hash_count``.
        """
        m = self.length
        t = self._true_bit_count
        k = self.hash_count
        if t == 0:
            return 0
        if t == m:
            return m // k
        estimate = math.log(1.0 - t / m) / (k * math.log(1.0 - 1.0 / m))
        return math.floor(estimate + 0.5)

    def false_positive_probability(self) -> float:
        """Probability that :meth:`might_contain` is True for an absent element.

        Evaluated at the current :meth:`estimated_size`.
        """
        return expected_false_positive_probability(
            self.length, self.hash_count, self.estimated_size()
        )

    def __ior__(self, other: BloomFilter[E]) -> BloomFilter[E]:
        """In-place union, ``a |= b``."""
        self.union(other)
        return self

    def __iand__(self, other: BloomFilter[E]) -> BloomFilter[E]:
        """In-place intersection, ``a &= b``."""
        self.intersection(other)
        return self

    def __or__(self, other: BloomFilter[E]) -> BloomFilter[E]:
        """Return a new filter holding the union."""
        result = self.copy()
        result.union(other)
        return result

    def __and__(self, other: BloomFilter[E]) -> BloomFilter[E]:
        """Return a new filter holding the intersection."""
        result = self.copy()
        result.intersection(other)
        return result

    def __eq__(self, other: object) -> bool:
        """Filters are equal when strategies match and bits are identical."""
        if not isinstance(other, BloomFilter):
            return NotImplemented
        if self is other:
            return True
        return self._strategy == other._strategy and self._bits == other._bits

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        """Return string representation."""
        return (
            f"BloomFilter(length={self.length}, hash_count={self.hash_count}, "
            f"strategy={self._strategy.kind.value}, "
            f"true_bits={self._true_bit_count})"
        )


class SynchronizedBloomFilter(Generic[E]):
    """Bloom filter wrapper that serialises writers with a lock.

    Membership tests stay lock-free; every mutation and merge holds the lock.
    Merging from another synchronised filter copies its state under that
    filter's own lock first, so two locks are never held together.
    """

    def __init__(
        self,
        bloom: BloomFilter[E],
        lock: threading.RLock | None = None,
    ):
        """Wrap ``bloom``, optionally sharing an existing lock."""
        self._filter = bloom
        self._lock = lock if lock is not None else threading.RLock()

    @property
    def filter(self) -> BloomFilter[E]:
        """The wrapped filter."""
        return self._filter

    @property
    def length(self) -> int:
        """Number of bits used to represent the set."""
        return self._filter.length

    @property
    def hash_count(self) -> int:
        """Number of bit positions per element."""
        return self._filter.hash_count

    def might_contain(self, element: E) -> bool:
        """Check if element might be in the filter."""
        return self._filter.might_contain(element)

    __contains__ = might_contain

    def add(self, element: E) -> bool:
        """Add element under the lock."""
        with self._lock:
            return self._filter.add(element)

    def add_all(self, elements: Iterable[E]) -> bool:
        """Add all elements under the lock."""
        with self._lock:
            return self._filter.add_all(elements)

    def _unwrap(
        self,
        other: BloomFilter[E] | SynchronizedBloomFilter[E],
    ) -> BloomFilter[E]:
        if isinstance(other, SynchronizedBloomFilter):
            return other.copy()
        return other

    def union(self, other: BloomFilter[E] | SynchronizedBloomFilter[E]) -> None:
        """Union under the lock."""
        source = self._unwrap(other)
        with self._lock:
            self._filter.union(source)

    def intersection(self, other: BloomFilter[E] | SynchronizedBloomFilter[E]) -> None:
        """Intersection under the lock."""
        source = self._unwrap(other)
        with self._lock:
            self._filter.intersection(source)

    def clear(self) -> None:
        """Clear under the lock."""
        with self._lock:
            self._filter.clear()

    def copy(self) -> BloomFilter[E]:
        """Return an unsynchronised copy taken under the lock."""
        with self._lock:
            return self._filter.copy()

    def is_empty(self) -> bool:
        """Return True if the filter contains no elements."""
        with self._lock:
            return self._filter.is_empty()

    def estimated_size(self) -> int:
        """Estimate the number of distinct elements added."""
        with self._lock:
            return self._filter.estimated_size()

    def false_positive_probability(self) -> float:
        """False positive probability at the current estimated size."""
        with self._lock:
            return self._filter.false_positive_probability()

    def snapshot(self) -> FilterSnapshot:
        """Capture the filter state under the lock."""
        with self._lock:
            return self._filter.snapshot()

    def __repr__(self) -> str:
        """Return string representation."""
        return f"SynchronizedBloomFilter({self._filter!r})"
