"""Pytest configuration and fixtures."""

import random

import pytest

from powerchess.settings import get_settings


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Make every test read settings from its own environment."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def rng() -> random.Random:
    """Seeded random source so spawns and offers are reproducible."""
    return random.Random(1234)
