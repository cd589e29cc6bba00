"""bloomkit - Bloom filters with derived sizing and pluggable hashing."""

from __future__ import annotations

__version__ = "0.1.0"

from bloomkit.bitarray import BitArray
from bloomkit.configurator import FilterConfigurator, SizingMode
from bloomkit.filter import BloomFilter, SynchronizedBloomFilter, element_key
from bloomkit.hashing import (
    DoubleHashStrategy,
    HashStrategy,
    HashStrategyFactory,
    LinearCongruentialStrategy,
    MersenneTwisterStrategy,
    available_strategies,
    get_strategy_class,
    strategy_factory,
)
from bloomkit.models import (
    Config,
    FilterConfig,
    FilterSnapshot,
    HashStrategyKind,
    LogLevel,
    ObservabilityConfig,
)
from bloomkit.sizing import FilterParameters, optimal_parameters
from bloomkit.utils.exceptions import (
    BloomKitError,
    ConfigurationConflictError,
    ConfigurationError,
    IncompatibleFilterError,
    IncompleteConfigurationError,
    ValidationError,
)

__all__ = [
    "BitArray",
    "BloomFilter",
    "BloomKitError",
    "Config",
    "ConfigurationConflictError",
    "ConfigurationError",
    "DoubleHashStrategy",
    "FilterConfig",
    "FilterConfigurator",
    "FilterParameters",
    "FilterSnapshot",
    "HashStrategy",
    "HashStrategyFactory",
    "HashStrategyKind",
    "IncompatibleFilterError",
    "IncompleteConfigurationError",
    "LinearCongruentialStrategy",
    "LogLevel",
    "MersenneTwisterStrategy",
    "ObservabilityConfig",
    "SizingMode",
    "SynchronizedBloomFilter",
    "ValidationError",
    "available_strategies",
    "element_key",
    "get_strategy_class",
    "optimal_parameters",
    "strategy_factory",
]
