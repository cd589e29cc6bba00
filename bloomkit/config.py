"""Configuration management for bloomkit.

Provides centralized configuration with TOML support and validation, loaded
hierarchically from defaults → config file → environment.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import TYPE_CHECKING, Any

import toml
from pydantic import ValidationError as PydanticValidationError

from bloomkit.configurator import FilterConfigurator
from bloomkit.models import Config
from bloomkit.utils.exceptions import ConfigurationError
from bloomkit.utils.logging_config import get_logger, log_exception, setup_logging

if TYPE_CHECKING:  # pragma: no cover
    from bloomkit.filter import BloomFilter

CONFIG_FILE_NAME = "bloomkit.toml"

# Global configuration instance
_config_manager: ConfigManager | None = None

logger = get_logger(__name__)


class ConfigManager:
    """Manages configuration loading and validation."""

    # Mapping of environment variables to config paths
    ENV_MAPPINGS: dict[str, str] = {
        "BLOOMKIT_LENGTH": "filter.length",
        "BLOOMKIT_HASH_COUNT": "filter.hash_count",
        "BLOOMKIT_FALSE_POSITIVE_PROBABILITY": "filter.false_positive_probability",
        "BLOOMKIT_MAX_ELEMENTS": "filter.max_elements",
        "BLOOMKIT_HASH_STRATEGY": "filter.hash_strategy",
        "BLOOMKIT_WORD_ALIGNMENT": "filter.word_alignment",
        "BLOOMKIT_LOG_LEVEL": "observability.log_level",
        "BLOOMKIT_LOG_FILE": "observability.log_file",
        "BLOOMKIT_STRUCTURED_LOGGING": "observability.structured_logging",
        "BLOOMKIT_LOG_CORRELATION_ID": "observability.log_correlation_id",
    }

    def __init__(self, config_file: str | Path | None = None, setup_logs: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Path to TOML config file. If None, searches for bloomkit.toml
            setup_logs: Whether to configure logging from the loaded config

        """
        self.config_file = self._find_config_file(config_file)
        self.config = self._load_config()
        if setup_logs:
            self._setup_logging()

    def _find_config_file(
        self,
        config_file: str | Path | None,
    ) -> Path | None:
        """Find configuration file in standard locations."""
        if config_file:
            return Path(config_file)

        search_paths = [
            Path.cwd() / CONFIG_FILE_NAME,
            Path.home() / ".config" / "bloomkit" / CONFIG_FILE_NAME,
        ]
        for path in search_paths:
            if path.exists():
                return path

        return None

    def _load_config(self) -> Config:
        """Load configuration from file and environment."""
        config_data: dict[str, Any] = {}

        if self.config_file is not None:
            if not self.config_file.exists():
                msg = f"Config file not found: {self.config_file}"
                raise ConfigurationError(msg, {"path": str(self.config_file)})
            try:
                with open(self.config_file, encoding="utf-8") as f:
                    config_data.update(toml.load(f))
            except toml.TomlDecodeError as e:
                error = ConfigurationError(
                    f"Failed to parse config file {self.config_file}",
                    {"path": str(self.config_file), "error": str(e)},
                )
                log_exception(logger, error, "Loading configuration")
                raise error from e

        env_config = self._get_env_config()
        config_data = self._merge_config(config_data, env_config)

        try:
            return Config(**config_data)
        except PydanticValidationError as e:
            msg = f"Invalid configuration: {e}"
            raise ConfigurationError(msg, {"errors": e.errors()}) from e

    def _get_env_config(self) -> dict[str, Any]:
        """Get configuration from environment variables."""
        env_config: dict[str, Any] = {}

        def _parse_env_value(raw: str) -> bool | int | float | str:
            low = raw.lower()
            if low in {"true", "yes", "on"}:
                return True
            if low in {"false", "no", "off"}:
                return False
            try:
                if "." in raw or "e" in low:
                    return float(raw)
                return int(raw)
            except ValueError:
                return raw

        def _set_nested(d: dict[str, Any], path: str, value: Any) -> None:
            parts = path.split(".")
            cur = d
            for p in parts[:-1]:
                cur = cur.setdefault(p, {})
            cur[parts[-1]] = value

        for env_name, cfg_path in self.ENV_MAPPINGS.items():
            raw = os.getenv(env_name)
            if raw is None:
                continue
            _set_nested(env_config, cfg_path, _parse_env_value(raw))

        return env_config

    def _merge_config(
        self,
        base: dict[str, Any],
        override: dict[str, Any],
    ) -> dict[str, Any]:
        """Merge configuration dictionaries recursively."""
        result = base.copy()

        for key, value in override.items():
            if (
                key in result
                and isinstance(result[key], dict)
                and isinstance(value, dict)
            ):
                result[key] = self._merge_config(result[key], value)
            else:
                result[key] = value

        return result

    def _setup_logging(self) -> None:
        """Set up logging based on configuration."""
        setup_logging(self.config.observability)

    def export(self) -> str:
        """Export current configuration as TOML."""
        return toml.dumps(self.config.model_dump(mode="json", exclude_none=True))

    def configurator(self) -> FilterConfigurator:
        """Return a configurator for the configured filter."""
        return FilterConfigurator.from_config(self.config.filter)


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager()
    return _config_manager.config


def init_config(config_file: str | Path | None = None) -> ConfigManager:
    """Initialize the global configuration manager."""
    global _config_manager
    _config_manager = ConfigManager(config_file)
    return _config_manager


def reload_config() -> Config:
    """Reload configuration from file and environment."""
    if _config_manager is None:
        msg = "Configuration not initialized"
        raise ConfigurationError(msg)

    _config_manager.config = _config_manager._load_config()  # noqa: SLF001
    _config_manager._setup_logging()  # noqa: SLF001
    return _config_manager.config


def set_config(new_config: Config) -> None:
    """Replace the global configuration at runtime."""
    global _config_manager
    if _config_manager is None:
        _config_manager = ConfigManager(None, setup_logs=False)
    _config_manager.config = new_config
    _config_manager._setup_logging()  # noqa: SLF001


def reset_config() -> None:
    """Drop the global configuration manager."""
    global _config_manager
    _config_manager = None


def create_filter(config: Config | None = None) -> BloomFilter:
    """Build an empty filter from ``config`` or the global configuration."""
    if config is None:
        config = get_config()
    bloom: BloomFilter = FilterConfigurator.from_config(config.filter).build()
    logger.debug("Created filter from configuration: %r", bloom)
    return bloom
