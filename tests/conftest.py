"""Pytest configuration and shared fixtures."""

import pytest

from crooksfield.field import FieldConfig, FieldRenderer
from crooksfield.unirand import initialise

# Seed used by every worker unless a test says otherwise
TEST_SEED = 12345


@pytest.fixture
def generator():
    """A freshly seeded generator."""
    return initialise(TEST_SEED)


@pytest.fixture
def small_config() -> FieldConfig:
    """A tiny frame with a short series so renders stay fast."""
    return FieldConfig(width=32, height=24, terms=12, workers=2, seed=TEST_SEED)


@pytest.fixture
def renderer(small_config):
    """A renderer over ``small_config``; the pool is shut down afterwards."""
    r = FieldRenderer(small_config)
    yield r
    r.close()
