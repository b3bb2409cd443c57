"""
Pytest configuration and shared fixtures for ampute tests.
"""

import pytest
import torch
from ampute.core.rng import RNGState
from ampute.config.schema import AmputeConfig


@pytest.fixture
def rng():
    """Provide seeded RNG for reproducible tests."""
    return RNGState(seed=42)


@pytest.fixture
def default_config():
    """Provide default AmputeConfig."""
    return AmputeConfig()


@pytest.fixture
def minimal_config():
    """Provide minimal AmputeConfig for fast tests."""
    return AmputeConfig.minimal()


@pytest.fixture
def uniform_data():
    """Provide [2000, 6] complete data, uniform on [1, 10)."""
    gen = RNGState(seed=7)
    return 1.0 + 9.0 * gen.rand(2000, 6)


@pytest.fixture
def x_shaped_patterns():
    """Provide 6 X-shaped patterns over 6 variables."""
    from ampute.engine.patterns import x_patterns
    return x_patterns(6)
