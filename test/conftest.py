"""
Shared test fixtures for the randstream test suite.
"""

import pytest

from randstream.sampler import make_rng


@pytest.fixture
def rng():
    """Seeded generator so statistical assertions are reproducible."""
    return make_rng(12345)
