import pytest
from django.core.cache import cache


@pytest.fixture(autouse=True)
def _clear_cache():
    """Throttle counters and cached dashboards live in the cache; start each test clean."""
    cache.clear()
    yield
    cache.clear()
