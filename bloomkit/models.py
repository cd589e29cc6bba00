"""Pydantic models for bloomkit.

Provides validated configuration and snapshot models.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

DEFAULT_FALSE_POSITIVE_PROBABILITY = 0.01
DEFAULT_MAX_ELEMENTS = 10_000
DEFAULT_WORD_ALIGNMENT = 64


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class HashStrategyKind(str, Enum):
    """Hashing strategies mapping a key to bit positions."""

    DOUBLE_HASHING = "double_hashing"
    MERSENNE_TWISTER = "mersenne_twister"
    LINEAR_CONGRUENTIAL = "linear_congruential"


class FilterConfig(BaseModel):
    """Bloom filter sizing and hashing configuration.

    Either ``length`` and ``hash_count`` are given explicitly, or
    ``false_positive_probability`` and ``max_elements`` are given and the
    sizing is derived from them. When neither group is present, probability
    sizing with the module defaults is used.
    """

    length: int | None = Field(default=None, ge=1, description="Bit array length")
    hash_count: int | None = Field(
        default=None,
        ge=1,
        description="Number of bit positions per element",
    )
    false_positive_probability: float | None = Field(
        default=None,
        gt=0.0,
        lt=1.0,
        description="Upper bound for the false positive probability",
    )
    max_elements: int | None = Field(
        default=None,
        ge=1,
        description="Expected maximum number of elements",
    )
    hash_strategy: HashStrategyKind = Field(
        default=HashStrategyKind.DOUBLE_HASHING,
        description="Hashing strategy",
    )
    word_alignment: int = Field(
        default=DEFAULT_WORD_ALIGNMENT,
        ge=1,
        description="Derived lengths are rounded up to a multiple of this value",
    )

    @field_validator("hash_strategy", mode="before")
    @classmethod
    def normalize_hash_strategy(cls, v: object) -> object:
        """Accept strategy names case-insensitively."""
        if isinstance(v, str):
            return v.strip().lower()
        return v

    @model_validator(mode="after")
    def validate_sizing(self) -> FilterConfig:
        """Validate that exactly one sizing group is used."""
        explicit = (self.length, self.hash_count)
        probability = (self.false_positive_probability, self.max_elements)
        has_explicit = any(v is not None for v in explicit)
        has_probability = any(v is not None for v in probability)

        if has_explicit and has_probability:
            msg = (
                "length/hash_count and false_positive_probability/max_elements "
                "are mutually exclusive"
            )
            raise ValueError(msg)
        if has_explicit and None in explicit:
            msg = "length and hash_count must be set together"
            raise ValueError(msg)
        if has_probability and None in probability:
            msg = "false_positive_probability and max_elements must be set together"
            raise ValueError(msg)
        if not has_explicit and not has_probability:
            self.false_positive_probability = DEFAULT_FALSE_POSITIVE_PROBABILITY
            self.max_elements = DEFAULT_MAX_ELEMENTS
        return self

    @property
    def is_explicit(self) -> bool:
        """Whether length and hash_count were given explicitly."""
        return self.length is not None


class ObservabilityConfig(BaseModel):
    """Observability configuration."""

    log_level: LogLevel = Field(default=LogLevel.INFO, description="Log level")
    log_file: str | None = Field(default=None, description="Log file path")
    structured_logging: bool = Field(
        default=False,
        description="Write JSON lines to the log file",
    )
    log_correlation_id: bool = Field(
        default=True,
        description="Include correlation IDs",
    )


class Config(BaseModel):
    """Root configuration."""

    filter: FilterConfig = Field(default_factory=FilterConfig)
    observability: ObservabilityConfig = Field(default_factory=ObservabilityConfig)


class FilterSnapshot(BaseModel):
    """Everything needed to reconstruct an equal Bloom filter."""

    model_config = ConfigDict(
        frozen=True,
        ser_json_bytes="base64",
        val_json_bytes="base64",
    )

    length: int = Field(ge=1, description="Bit array length")
    hash_count: int = Field(ge=1, description="Number of bit positions per element")
    strategy: HashStrategyKind = Field(description="Hashing strategy identity")
    bits: bytes = Field(description="Raw bit array storage")

    @model_validator(mode="after")
    def validate_bits(self) -> FilterSnapshot:
        """Validate that the bit storage matches the length."""
        expected = (self.length + 7) // 8
        if len(self.bits) != expected:
            msg = f"bits must hold {expected} bytes for length {self.length}, got {len(self.bits)}"
            raise ValueError(msg)
        return self
