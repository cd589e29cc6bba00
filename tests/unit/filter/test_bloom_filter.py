"""Unit tests for BloomFilter.

The filter relies on ``hash()`` to derive keys; the tests use ints to keep
keys predictable.
"""

from __future__ import annotations

import pytest

from bloomkit.bitarray import BitArray
from bloomkit.configurator import FilterConfigurator
from bloomkit.filter import BloomFilter, element_key
from bloomkit.hashing import DoubleHashStrategy, MersenneTwisterStrategy
from bloomkit.models import HashStrategyKind
from bloomkit.utils.exceptions import ConfigurationError, IncompatibleFilterError

pytestmark = [pytest.mark.unit, pytest.mark.filter]


class TestBloomFilterBasics:
    """Getters, empty state and single-element behavior."""

    def test_getters(self, filter_maker):
        bf = filter_maker.build()
        assert bf.length == 64
        assert bf.hash_count == 2
        assert isinstance(bf.hash_strategy, DoubleHashStrategy)

    def test_empty_filter(self, filter_maker, test_instances):
        bf = filter_maker.build()
        assert bf.is_empty()
        assert bf.true_bit_count == 0

        for i in test_instances:
            assert not bf.might_contain(i)

        assert bf.estimated_size() == 0
        assert bf.false_positive_probability() == 0.0

    def test_add(self, filter_maker, test_instances):
        for i in test_instances:
            bf = filter_maker.build()
            assert bf.add(i) is True
            assert bf.might_contain(i)
            assert i in bf
            assert not bf.is_empty()

    def test_add_same_element_twice_reports_no_change(self, filter_maker):
        bf = filter_maker.build()
        assert bf.add(42) is True
        assert bf.add(42) is False

    def test_add_all(self, filter_maker, test_instances):
        bf = filter_maker.build()
        assert bf.add_all(test_instances) is True

        for i in test_instances:
            assert bf.might_contain(i)

        assert bf.add_all(test_instances) is False

    def test_add_all_empty_iterable(self, filter_maker):
        bf = filter_maker.build()
        assert bf.add_all([]) is False
        assert bf.is_empty()

    def test_none_element(self, filter_maker):
        bf = filter_maker.build()
        bf.add(None)
        assert bf.might_contain(None)
        # None shares the fixed key with 0
        assert element_key(None) == element_key(0)

    def test_string_elements(self, filter_maker):
        bf = filter_maker.build()
        bf.add_all(["alpha", "beta", "gamma"])
        for word in ("alpha", "beta", "gamma"):
            assert word in bf

    def test_single_key_scenario(self, filter_maker):
        bf = filter_maker.build()
        bf.add(42)
        assert bf.might_contain(42)
        assert bf.estimated_size() == 1

        bf.add_all([0, 7, -3235698, 1000])
        assert bf.true_bit_count <= 10
        assert bf.true_bit_count == bf.bits.count()


class TestBloomFilterClear:
    """clear() and the empty state."""

    def test_clear(self, filter_maker, test_instances):
        bf = filter_maker.build()
        bf.add_all(test_instances)
        bf.clear()

        assert bf.is_empty()
        assert bf.true_bit_count == 0
        assert bf.bits.count() == 0
        for i in test_instances:
            assert not bf.might_contain(i)

    def test_clear_then_reuse(self, filter_maker):
        bf = filter_maker.build()
        bf.add(1)
        bf.clear()
        assert bf.add(1) is True
        assert bf.might_contain(1)


class TestBloomFilterMerge:
    """union() and intersection()."""

    def test_intersection(self, filter_maker, test_instances):
        for i in test_instances:
            bf1 = filter_maker.build()
            bf1.add_all(test_instances)

            bf2 = filter_maker.build()
            bf2.add(i)

            bf1.intersection(bf2)

            assert bf1 == bf2
            assert bf1.true_bit_count == bf2.true_bit_count

    def test_union(self, filter_maker, test_instances):
        for i in test_instances:
            bf1 = filter_maker.build()
            bf1.add_all(test_instances)
            bf2 = filter_maker.build()
            bf2.add_all(test_instances)

            bf3 = filter_maker.build()
            bf3.add(i)

            bf1.union(bf3)

            assert bf1 == bf2
            assert bf1.true_bit_count == bf1.bits.count()

    def test_union_contains_both(self, filter_maker):
        a = filter_maker.build()
        b = filter_maker.build()
        a.add_all([1, 2, 3])
        b.add_all([100, 200])

        a.union(b)

        for e in (1, 2, 3, 100, 200):
            assert a.might_contain(e)
        assert a.true_bit_count == a.bits.count()

    def test_union_with_self_is_identity(self, filter_maker, test_instances):
        bf = filter_maker.build()
        bf.add_all(test_instances)
        before = bf.copy()

        bf.union(bf)

        assert bf == before
        assert bf.true_bit_count == before.true_bit_count

    def test_union_overlap_does_not_double_count(self, filter_maker):
        a = filter_maker.build()
        b = filter_maker.build()
        a.add(5)
        b.add(5)

        a.union(b)

        assert a.true_bit_count == b.true_bit_count

    def test_union_incompatible_length(self):
        a = FilterConfigurator().length(64).hash_count(2).build()
        b = FilterConfigurator().length(128).hash_count(2).build()
        a.add(1)
        before = a.copy()

        with pytest.raises(IncompatibleFilterError):
            a.union(b)

        assert a == before

    def test_intersection_incompatible_length(self):
        a = FilterConfigurator().length(64).hash_count(2).build()
        b = FilterConfigurator().length(65).hash_count(2).build()

        with pytest.raises(IncompatibleFilterError):
            a.intersection(b)

    def test_merge_incompatible_hash_count(self):
        a = FilterConfigurator().length(64).hash_count(2).build()
        b = FilterConfigurator().length(64).hash_count(3).build()

        with pytest.raises(IncompatibleFilterError):
            a.union(b)

    def test_merge_incompatible_strategy(self):
        a = FilterConfigurator().length(64).hash_count(2).build()
        b = (
            FilterConfigurator()
            .length(64)
            .hash_count(2)
            .hash_strategy(HashStrategyKind.MERSENNE_TWISTER)
            .build()
        )

        assert not a.is_compatible(b)
        with pytest.raises(IncompatibleFilterError) as exc_info:
            a.intersection(b)
        assert "strategy" in exc_info.value.details

    def test_operators(self, filter_maker):
        a = filter_maker.build()
        b = filter_maker.build()
        a.add(1)
        b.add(2)
        a_before = a.copy()

        union = a | b
        assert union.might_contain(1)
        assert union.might_contain(2)
        # Operands are left untouched
        assert a == a_before

        intersection = union & a
        assert intersection == a

        a |= b
        assert a == union
        a &= b
        assert a == b


class TestBloomFilterEstimators:
    """estimated_size() and false_positive_probability()."""

    def test_saturated_filter(self):
        full = BitArray(8, b"\xff")
        saturated = BloomFilter(DoubleHashStrategy(3), 8, full)

        assert saturated.true_bit_count == 8
        assert saturated.estimated_size() == 8 // 3
        assert 0.0 < saturated.false_positive_probability() <= 1.0

    def test_estimate_grows_with_elements(self):
        bf = FilterConfigurator().false_positive_probability(0.01, 1000).build()
        bf.add_all(range(100))
        small = bf.estimated_size()
        bf.add_all(range(100, 500))
        large = bf.estimated_size()

        assert 80 <= small <= 120
        assert large > small

    def test_false_positive_probability_increases(self):
        bf = FilterConfigurator().false_positive_probability(0.05, 200).build()
        bf.add_all(range(50))
        low = bf.false_positive_probability()
        bf.add_all(range(50, 200))
        high = bf.false_positive_probability()

        assert 0.0 < low < high < 1.0

    def test_length_one_filter(self):
        bf = FilterConfigurator().length(1).hash_count(1).build()
        assert bf.estimated_size() == 0
        bf.add("x")
        assert bf.estimated_size() == 1


class TestBloomFilterEquality:
    """Structural equality, copy and snapshots."""

    def test_equal_filters(self, filter_maker, test_instances):
        a = filter_maker.build()
        b = filter_maker.build()
        assert a == b

        a.add_all(test_instances)
        assert a != b
        b.add_all(test_instances)
        assert a == b

    def test_not_equal_to_other_types(self, filter_maker):
        assert filter_maker.build() != "not a filter"

    def test_filters_are_unhashable(self, filter_maker):
        with pytest.raises(TypeError):
            hash(filter_maker.build())

    def test_copy_is_independent(self, filter_maker):
        a = filter_maker.build()
        a.add(1)
        a_bits = a.bits.to_bytes()
        b = a.copy()
        b.add(2)

        assert b.might_contain(1)
        assert b.might_contain(2)
        assert a.bits.to_bytes() == a_bits
        assert a.true_bit_count == a.bits.count()

    def test_snapshot_roundtrip(self):
        bf = (
            FilterConfigurator()
            .length(100)
            .hash_count(4)
            .hash_strategy(HashStrategyKind.LINEAR_CONGRUENTIAL)
            .build()
        )
        bf.add_all(["a", "b", 3, None])

        snapshot = bf.snapshot()
        assert snapshot.length == 100
        assert snapshot.hash_count == 4
        assert snapshot.strategy is HashStrategyKind.LINEAR_CONGRUENTIAL
        assert len(snapshot.bits) == 13

        restored = BloomFilter.from_snapshot(snapshot)
        assert restored == bf
        assert restored.true_bit_count == bf.true_bit_count
        assert restored.might_contain("a")

    def test_repr(self, filter_maker):
        text = repr(filter_maker.build())
        assert "length=64" in text
        assert "double_hashing" in text


class TestBloomFilterConstruction:
    """Direct construction validation."""

    def test_invalid_length(self):
        with pytest.raises(ConfigurationError):
            BloomFilter(DoubleHashStrategy(2), 0)

    def test_bits_length_mismatch(self):
        with pytest.raises(ConfigurationError):
            BloomFilter(DoubleHashStrategy(2), 64, BitArray(32))

    def test_initial_bits_sync_count(self):
        bits = BitArray(16)
        bits.set(3)
        bits.set(9)
        bf = BloomFilter(MersenneTwisterStrategy(1), 16, bits)
        assert bf.true_bit_count == 2
        assert not bf.is_empty()

    def test_initial_bits_are_copied(self):
        bits = BitArray(64)
        a = BloomFilter(DoubleHashStrategy(2), 64, bits)
        b = BloomFilter(DoubleHashStrategy(2), 64, bits)

        a.add(42)
        bits.set(5)

        assert b.is_empty()
        assert not b.might_contain(42)
        assert b.true_bit_count == b.bits.count() == 0
        assert a.true_bit_count == a.bits.count() == 2

    def test_bits_property_returns_copy(self, filter_maker):
        bf = filter_maker.build()
        bf.bits.set(5)

        assert bf.is_empty()
        assert bf.true_bit_count == bf.bits.count() == 0


class TestBloomFilterMonotonicity:
    """true_bit_count never decreases under add, add_all and union."""

    def test_add_and_add_all(self, filter_maker):
        bf = filter_maker.build()
        counts = [bf.true_bit_count]
        for i in range(40):
            bf.add(i)
            counts.append(bf.true_bit_count)
        bf.add_all(range(40, 80))
        counts.append(bf.true_bit_count)

        assert counts == sorted(counts)
        assert counts[-1] == bf.bits.count()

    def test_union(self, filter_maker, test_instances):
        bf = filter_maker.build()
        counts = [bf.true_bit_count]
        for i in test_instances:
            other = filter_maker.build()
            other.add(i)
            bf.union(other)
            counts.append(bf.true_bit_count)
        bf.union(filter_maker.build())
        counts.append(bf.true_bit_count)

        assert counts == sorted(counts)
        assert counts[-1] > 0
        assert counts[-1] == bf.bits.count()
