"""Hash strategies for Bloom filters.

Three interchangeable variants share the HashStrategy contract:
double hashing (the default), a Mersenne Twister generator and a
linear congruential generator.
"""

from __future__ import annotations

from bloomkit.hashing.base import HashStrategy, HashStrategyFactory, to_int32
from bloomkit.hashing.double import DoubleHashStrategy, scramble
from bloomkit.hashing.generators import (
    LinearCongruentialGenerator,
    LinearCongruentialStrategy,
    MersenneTwisterStrategy,
)
from bloomkit.models import HashStrategyKind
from bloomkit.utils.exceptions import ConfigurationError

_STRATEGIES: dict[HashStrategyKind, type[HashStrategy]] = {
    cls.kind: cls
    for cls in (
        DoubleHashStrategy,
        MersenneTwisterStrategy,
        LinearCongruentialStrategy,
    )
}

DEFAULT_STRATEGY = HashStrategyKind.DOUBLE_HASHING


def get_strategy_class(kind: HashStrategyKind | str) -> type[HashStrategy]:
    """Look up the strategy class for a strategy kind or its name.

    Raises:
        ConfigurationError: If the name is unknown

    """
    try:
        return _STRATEGIES[HashStrategyKind(kind)]
    except ValueError as e:
        msg = f"Unknown hash strategy: {kind!r}"
        raise ConfigurationError(
            msg, {"available": [k.value for k in _STRATEGIES]}
        ) from e


def available_strategies() -> list[HashStrategyKind]:
    """Return all registered strategy kinds."""
    return list(_STRATEGIES)


def strategy_factory(
    kind: HashStrategyKind | str = DEFAULT_STRATEGY,
    hash_count: int | None = None,
) -> HashStrategyFactory:
    """Return a factory for the named strategy."""
    return HashStrategyFactory(get_strategy_class(kind), hash_count)


__all__ = [
    "DEFAULT_STRATEGY",
    "DoubleHashStrategy",
    "HashStrategy",
    "HashStrategyFactory",
    "LinearCongruentialGenerator",
    "LinearCongruentialStrategy",
    "MersenneTwisterStrategy",
    "available_strategies",
    "get_strategy_class",
    "scramble",
    "strategy_factory",
    "to_int32",
]
