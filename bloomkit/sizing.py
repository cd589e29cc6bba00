"""Optimal Bloom filter sizing.

Given an upper bound ``p`` for the false positive probability and the expected
number of elements ``n``, the minimal bit array length is
``m = ceil(|n * ln(p) / (ln 2)^2|)`` and the matching number of hash functions
is ``k = max(1, ceil((m / n) * ln 2))``. The length is rounded up to a multiple
of a word alignment before ``k`` is derived.
"""

from __future__ import annotations

import logging
import math
from typing import NamedTuple

from bloomkit.models import DEFAULT_WORD_ALIGNMENT
from bloomkit.utils.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

_LN2 = math.log(2)


class FilterParameters(NamedTuple):
    """Bit array length and hash count of a filter."""

    length: int
    hash_count: int


def validate_false_positive_probability(fpp: float, max_elements: int) -> None:
    """Check the probability-based sizing inputs.

    Raises:
        ConfigurationError: If ``fpp`` is outside (0, 1) or ``max_elements`` < 1

    """
    if not 0.0 < fpp < 1.0:
        msg = "false positive probability must be between 0.0 and 1.0"
        raise ConfigurationError(msg, {"false_positive_probability": fpp})
    if max_elements < 1:
        msg = "max_elements must be larger than 0"
        raise ConfigurationError(msg, {"max_elements": max_elements})


def validate_explicit(length: int, hash_count: int) -> FilterParameters:
    """Check explicitly given sizing values.

    Raises:
        ConfigurationError: If either value is smaller than 1

    """
    if length < 1:
        msg = "length must be larger than 0"
        raise ConfigurationError(msg, {"length": length})
    if hash_count < 1:
        msg = "hash_count must be larger than 0"
        raise ConfigurationError(msg, {"hash_count": hash_count})
    return FilterParameters(length, hash_count)


def align(value: int, alignment: int) -> int:
    """Round ``value`` up to the next multiple of ``alignment``."""
    return -(-value // alignment) * alignment


def optimal_parameters(
    fpp: float,
    max_elements: int,
    word_alignment: int = DEFAULT_WORD_ALIGNMENT,
) -> FilterParameters:
    """Compute the smallest filter meeting a false positive bound.

    Args:
        fpp: Upper bound for the false positive probability, in (0, 1)
        max_elements: Expected maximum number of elements, at least 1
        word_alignment: Length granularity, at least 1

    Returns:
        FilterParameters with an aligned length and a hash count >= 1

    Raises:
        ConfigurationError: If any input is out of range

    """
    validate_false_positive_probability(fpp, max_elements)
    if word_alignment < 1:
        msg = "word_alignment must be larger than 0"
        raise ConfigurationError(msg, {"word_alignment": word_alignment})

    length = math.ceil(abs(max_elements * math.log(fpp) / _LN2**2))
    length = align(max(length, 1), word_alignment)
    hash_count = max(1, math.ceil((length / max_elements) * _LN2))

    logger.debug(
        "Derived sizing fpp=%s max_elements=%d -> length=%d hash_count=%d",
        fpp,
        max_elements,
        length,
        hash_count,
    )
    return FilterParameters(length, hash_count)


def expected_false_positive_probability(
    length: int,
    hash_count: int,
    elements: int,
) -> float:
    """Textbook false positive probability ``(1 - (1 - 1/m)^(k*n))^k``."""
    if elements <= 0:
        return 0.0
    return (1.0 - (1.0 - 1.0 / length) ** (hash_count * elements)) ** hash_count
