"""Shared pytest fixtures."""

import pytest

from kbbi_lookup.search import SearchCache
from kbbi_lookup.utils import RateLimiter
from tests.helpers import FakeSleep


@pytest.fixture
def fake_sleep():
    return FakeSleep()


@pytest.fixture
def no_delay():
    """Rate limiter that never waits."""
    return RateLimiter(delay=0)


@pytest.fixture
def cache(tmp_path):
    return SearchCache(cache_dir=tmp_path / "cache")
