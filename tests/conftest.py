import pytest
from django.core.cache import cache

from apps.core.records import Coordinate, PlaceInfo, ResolvedLocation


@pytest.fixture
def location():
    return ResolvedLocation(
        coordinate=Coordinate(18.5204, 73.8567),
        place=PlaceInfo(city='Pune', country='IN'),
    )


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()
