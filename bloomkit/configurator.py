"""Bloom filter configuration builder.

Usage::

    bloom = (
        FilterConfigurator()
        .false_positive_probability(0.01, 100_000)
        .hash_strategy(HashStrategyKind.MERSENNE_TWISTER)
        .build()
    )

Sizing is either explicit (``length`` and ``hash_count``) or derived from a
false positive bound (``false_positive_probability``). The two routes are
mutually exclusive and every value can be set only once. ``build()`` does not
change the configurator, so one configurator can produce many independent
filters with identical configuration.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Generic, TypeVar

from bloomkit.filter import BloomFilter
from bloomkit.hashing import DEFAULT_STRATEGY, HashStrategyFactory, strategy_factory
from bloomkit.models import DEFAULT_WORD_ALIGNMENT, HashStrategyKind
from bloomkit.sizing import (
    FilterParameters,
    optimal_parameters,
    validate_explicit,
    validate_false_positive_probability,
)
from bloomkit.utils.exceptions import (
    ConfigurationConflictError,
    ConfigurationError,
    IncompleteConfigurationError,
)

if TYPE_CHECKING:  # pragma: no cover
    from bloomkit.models import FilterConfig

logger = logging.getLogger(__name__)

E = TypeVar("E")


def _require_int(field: str, value: object) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        msg = f"{field} must be an integer, got {type(value).__name__}"
        raise ConfigurationError(msg, {field: value})


class SizingMode(str, Enum):
    """How the filter size is determined."""

    UNSET = "unset"
    EXPLICIT = "explicit"
    PROBABILITY = "probability"


class FilterConfigurator(Generic[E]):
    """Collects filter parameters and builds BloomFilter instances."""

    def __init__(self, word_alignment: int = DEFAULT_WORD_ALIGNMENT):
        """Initialize an empty configurator.

        Args:
            word_alignment: Granularity of derived lengths

        """
        _require_int("word_alignment", word_alignment)
        if word_alignment < 1:
            msg = "word_alignment must be larger than 0"
            raise ConfigurationError(msg, {"word_alignment": word_alignment})

        self.word_alignment = word_alignment
        self.mode = SizingMode.UNSET
        self._length: int | None = None
        self._hash_count: int | None = None
        self._false_positive_probability: float | None = None
        self._max_elements: int | None = None
        self._strategy_factory: HashStrategyFactory | None = None

    @classmethod
    def from_config(cls, config: FilterConfig) -> FilterConfigurator[E]:
        """Create a configurator from a validated FilterConfig."""
        configurator: FilterConfigurator[E] = cls(word_alignment=config.word_alignment)
        configurator.hash_strategy(config.hash_strategy)
        if config.is_explicit:
            configurator.length(config.length).hash_count(config.hash_count)  # type: ignore[arg-type]
        else:
            configurator.false_positive_probability(
                config.false_positive_probability,  # type: ignore[arg-type]
                config.max_elements,  # type: ignore[arg-type]
            )
        return configurator

    def _require_not_probability(self, field: str) -> None:
        if self.mode is SizingMode.PROBABILITY:
            msg = f"specifying false positive probability and {field} is not allowed"
            raise ConfigurationConflictError(msg, {field: "conflict"})

    def length(self, length: int) -> FilterConfigurator[E]:
        """Specify the length of the bit array."""
        _require_int("length", length)
        if length < 1:
            msg = "length must be larger than 0"
            raise ConfigurationError(msg, {"length": length})
        if self._length is not None:
            msg = f"length already set to {self._length}"
            raise ConfigurationConflictError(msg, {"length": self._length})
        self._require_not_probability("length")

        self._length = length
        self.mode = SizingMode.EXPLICIT
        return self

    def hash_count(self, hash_count: int) -> FilterConfigurator[E]:
        """Specify the number of bit positions per element."""
        _require_int("hash_count", hash_count)
        if hash_count < 1:
            msg = "hash_count must be larger than 0"
            raise ConfigurationError(msg, {"hash_count": hash_count})
        if self._hash_count is not None:
            msg = f"hash_count already set to {self._hash_count}"
            raise ConfigurationConflictError(msg, {"hash_count": self._hash_count})
        self._require_not_probability("hash_count")

        self._hash_count = hash_count
        self.mode = SizingMode.EXPLICIT
        return self

    def false_positive_probability(
        self,
        fpp: float,
        max_elements: int,
    ) -> FilterConfigurator[E]:
        """Derive optimal length and hash count from a false positive bound.

        Args:
            fpp: Upper bound for the false positive probability
            max_elements: Expected maximum number of elements in the filter

        """
        _require_int("max_elements", max_elements)
        validate_false_positive_probability(fpp, max_elements)
        if self._false_positive_probability is not None:
            msg = (
                "false positive probability already set to "
                f"{self._false_positive_probability}"
            )
            raise ConfigurationConflictError(
                msg, {"false_positive_probability": self._false_positive_probability}
            )
        if self._length is not None:
            msg = "specifying length and false positive probability is not allowed"
            raise ConfigurationConflictError(msg, {"length": self._length})
        if self._hash_count is not None:
            msg = "specifying hash_count and false positive probability is not allowed"
            raise ConfigurationConflictError(msg, {"hash_count": self._hash_count})

        self._false_positive_probability = fpp
        self._max_elements = max_elements
        self.mode = SizingMode.PROBABILITY
        return self

    def hash_strategy(
        self,
        factory: HashStrategyFactory | HashStrategyKind | str,
    ) -> FilterConfigurator[E]:
        """Specify the hashing strategy. Default is double hashing.

        A factory that already carries a hash count binds it as this
        configurator's hash count.
        """
        if self._strategy_factory is not None:
            msg = f"hash strategy already set to {self._strategy_factory.kind.value}"
            raise ConfigurationConflictError(
                msg, {"hash_strategy": self._strategy_factory.kind.value}
            )
        if not isinstance(factory, HashStrategyFactory):
            factory = strategy_factory(factory)

        if factory.hash_count is not None:
            self.hash_count(factory.hash_count)
        self._strategy_factory = factory
        return self

    def parameters(self) -> FilterParameters:
        """Resolve the sizing of the filter to be built.

        Raises:
            IncompleteConfigurationError: Unless exactly one sizing group is complete

        """
        explicit = self._length is not None and self._hash_count is not None
        derived = (
            self._false_positive_probability is not None
            and self._max_elements is not None
        )
        if explicit == derived:
            msg = (
                "either length and hash_count, or false positive probability "
                "and max_elements must be specified"
            )
            raise IncompleteConfigurationError(
                msg,
                {
                    "mode": self.mode.value,
                    "length": self._length,
                    "hash_count": self._hash_count,
                },
            )

        if derived:
            return optimal_parameters(
                self._false_positive_probability,  # type: ignore[arg-type]
                self._max_elements,  # type: ignore[arg-type]
                self.word_alignment,
            )
        return validate_explicit(self._length, self._hash_count)  # type: ignore[arg-type]

    def build(self) -> BloomFilter[E]:
        """Build a new filter with the configured characteristics.

        Returns:
            An empty BloomFilter

        """
        params = self.parameters()
        factory = self._strategy_factory or strategy_factory(DEFAULT_STRATEGY)
        strategy = factory.with_hash_count(params.hash_count).create()

        logger.debug(
            "Building Bloom filter length=%d hash_count=%d strategy=%s",
            params.length,
            params.hash_count,
            strategy.kind.value,
        )
        return BloomFilter(strategy, params.length)

    make_filter = build

    def __repr__(self) -> str:
        """Return string representation."""
        strategy = self._strategy_factory.kind.value if self._strategy_factory else None
        return (
            f"FilterConfigurator(mode={self.mode.value}, length={self._length}, "
            f"hash_count={self._hash_count}, "
            f"fpp={self._false_positive_probability}, "
            f"max_elements={self._max_elements}, strategy={strategy})"
        )
