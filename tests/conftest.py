"""Pytest configuration and shared fixtures for bloomkit tests."""

from __future__ import annotations

import logging
import os
import random

import pytest

from bloomkit.configurator import FilterConfigurator

DEFAULT_LENGTH = 64
DEFAULT_HASH_COUNT = 2

# Keys spanning zero, negatives and both 32-bit extremes
TEST_INSTANCES = [42, 0, -3235698, 2**31 - 1, -(2**31)]


def pytest_configure(config):
    """Register all project markers to avoid warnings when ini isn't loaded."""
    markers = [
        ("unit", "marks tests as unit tests"),
        ("property", "marks tests as property-based tests"),
        ("filter", "marks tests as Bloom filter tests"),
        ("hashing", "marks tests as hash strategy tests"),
        ("sizing", "marks tests as sizing policy tests"),
        ("config", "marks tests as configuration tests"),
        ("logging", "marks tests as logging tests"),
    ]
    for name, desc in markers:
        config.addinivalue_line("markers", f"{name}: {desc}")


@pytest.fixture(autouse=True)
def _isolate_bloomkit_env(monkeypatch):
    """Remove BLOOMKIT_* variables so the host environment can't leak in."""
    for name in list(os.environ):
        if name.startswith("BLOOMKIT_"):
            monkeypatch.delenv(name, raising=False)


@pytest.fixture(autouse=True)
def cleanup_logging():
    """Clean up logging handlers after each test to prevent closed file errors."""
    yield
    for logger_name in list(logging.Logger.manager.loggerDict.keys()):
        logger = logging.getLogger(logger_name)
        for handler in logger.handlers[:]:
            handler.close()
            logger.removeHandler(handler)

    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        handler.close()
        root_logger.removeHandler(handler)

    # setup_logging detaches the package logger from the root
    logging.getLogger("bloomkit").propagate = True


@pytest.fixture(autouse=True)
def reset_global_config():
    """Drop the global ConfigManager between tests for isolation."""
    yield
    from bloomkit import config as config_module

    config_module.reset_config()


@pytest.fixture(autouse=True)
def seed_rng() -> None:
    """Deterministically seed RNGs to make tests reproducible."""
    seed = int(os.environ.get("BLOOMKIT_TEST_SEED", "123456"))
    random.seed(seed)


@pytest.fixture
def filter_maker() -> FilterConfigurator:
    """Configurator for a 64-bit, 2-hash filter with the default strategy."""
    return FilterConfigurator().length(DEFAULT_LENGTH).hash_count(DEFAULT_HASH_COUNT)


@pytest.fixture
def test_instances() -> list[int]:
    """Integer elements used across filter tests."""
    return list(TEST_INSTANCES)
