"""
Location resolution services: position fixes, reverse geocoding and the
default-location fallback.
"""
import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeout
from typing import Optional, Tuple

import requests
from django.conf import settings
from django.utils import timezone
from geopy.exc import GeopyError
from geopy.geocoders import Nominatim

from apps.core.exceptions import LocationUnavailable, ReverseLookupFailed
from apps.core.records import Coordinate, PlaceInfo, ResolvedLocation, UNKNOWN
from apps.core.utils import is_fix_fresh, validate_coordinates

logger = logging.getLogger(__name__)


class PositionSource(ABC):
    """A device or service that can report where we are."""

    @abstractmethod
    def get_position(self, timeout: float) -> Coordinate:
        """
        Raises:
            LocationUnavailable
        """


class StaticPositionSource(PositionSource):
    """
    Position configured up front, e.g. settings.POSITION = "12.97,77.59".

    An empty value means there is no location service at all.
    """

    def __init__(self, position: Optional[str] = None):
        self.position = settings.POSITION if position is None else position

    def get_position(self, timeout: float) -> Coordinate:
        if not self.position:
            raise LocationUnavailable("No position configured")

        try:
            lat, lon = (part.strip() for part in self.position.split(','))
        except ValueError:
            raise LocationUnavailable(f"Invalid position format: {self.position!r}")

        is_valid, error = validate_coordinates(lat, lon)
        if not is_valid:
            raise LocationUnavailable(error)

        return Coordinate(float(lat), float(lon))


class IPPositionSource(PositionSource):
    """Approximate position from the host's public IP address."""

    API_URL = "http://ip-api.com/json/"

    def __init__(self, session: Optional[requests.Session] = None):
        self.session = session or requests.Session()

    def get_position(self, timeout: float) -> Coordinate:
        try:
            response = self.session.get(
                self.API_URL,
                params={'fields': 'status,message,lat,lon'},
                timeout=timeout,
            )
            response.raise_for_status()
            data = response.json()
        except (requests.exceptions.RequestException, ValueError) as e:
            raise LocationUnavailable(f"IP geolocation failed: {e}") from e

        if not isinstance(data, dict):
            raise LocationUnavailable(f"IP geolocation returned {type(data).__name__}, expected an object")

        if data.get('status') != 'success':
            raise LocationUnavailable(f"IP geolocation failed: {data.get('message', 'unknown error')}")

        is_valid, error = validate_coordinates(data.get('lat'), data.get('lon'))
        if not is_valid:
            raise LocationUnavailable(error)

        return Coordinate(float(data['lat']), float(data['lon']))


class ReverseGeocoder:
    """Turns coordinates into a city and country code via Nominatim."""

    def __init__(self, geocoder=None, timeout: int = 5):
        self.geocoder = geocoder or Nominatim(
            user_agent=settings.AIR_QUALITY_SETTINGS.get('GEOCODER_USER_AGENT', 'air-quality-monitor/1.0')
        )
        self.timeout = timeout

    def reverse(self, coordinate: Coordinate) -> PlaceInfo:
        """
        Raises:
            ReverseLookupFailed
        """
        try:
            location = self.geocoder.reverse(
                f"{coordinate.latitude}, {coordinate.longitude}",
                language='en',
                timeout=self.timeout,
            )
        except GeopyError as e:
            raise ReverseLookupFailed(f"Geocoding service error: {e}") from e

        if not location:
            raise ReverseLookupFailed(f"No address found for {coordinate}")

        address = location.raw.get('address', {})
        city = self._extract_city(address)
        country = (address.get('country_code') or '').upper()

        return PlaceInfo(city=city or UNKNOWN, country=country or UNKNOWN)

    def _extract_city(self, address):
        """Extract city name from address components."""
        return (
            address.get('city') or
            address.get('town') or
            address.get('village') or
            address.get('hamlet') or
            address.get('suburb') or
            ''
        )


def get_position_source(name: Optional[str] = None) -> PositionSource:
    name = name or settings.POSITION_SOURCE
    if name == 'ip':
        return IPPositionSource()
    return StaticPositionSource()


class LocationResolver:
    """
    Resolves a coordinate and place name for one acquisition cycle.

    The position request is bounded by a timeout and may reuse a fix up to
    max_age seconds old. Without a fix the configured default location is
    used; that substitution is final for the cycle and is not retried.
    Reverse lookup failure only degrades the place to 'Unknown'.
    """

    def __init__(
        self,
        position_source: Optional[PositionSource] = None,
        geocoder: Optional[ReverseGeocoder] = None,
        timeout: Optional[float] = None,
        max_age: Optional[float] = None,
        default_location: Optional[dict] = None,
    ):
        config = settings.AIR_QUALITY_SETTINGS
        self.position_source = position_source or get_position_source()
        self.geocoder = geocoder or ReverseGeocoder()
        self.timeout = timeout if timeout is not None else config.get('LOCATION_TIMEOUT_SECONDS', 10)
        self.max_age = max_age if max_age is not None else config.get('LOCATION_MAX_AGE_SECONDS', 300)
        self.default_location = default_location or config['DEFAULT_LOCATION']
        self._last_fix: Optional[Tuple[Coordinate, object]] = None

    def resolve(self) -> ResolvedLocation:
        try:
            coordinate = self._get_position()
        except LocationUnavailable as e:
            logger.warning(f"Location unavailable, using default location: {e}")
            return self._default(str(e))

        try:
            place = self.geocoder.reverse(coordinate)
        except ReverseLookupFailed as e:
            logger.warning(f"Reverse geocoding failed, using coordinates only: {e}")
            place = PlaceInfo()

        logger.info(f"Resolved location {coordinate} as {place.label}")
        return ResolvedLocation(coordinate=coordinate, place=place)

    def _get_position(self) -> Coordinate:
        if self._last_fix is not None:
            coordinate, fixed_at = self._last_fix
            if is_fix_fresh(fixed_at, self.max_age):
                logger.debug(f"Reusing cached position fix {coordinate}")
                return coordinate

        executor = ThreadPoolExecutor(max_workers=1)
        try:
            future = executor.submit(self.position_source.get_position, self.timeout)
            coordinate = future.result(timeout=self.timeout)
        except FutureTimeout:
            raise LocationUnavailable(f"Timed out after {self.timeout}s")
        except LocationUnavailable:
            raise
        except Exception as e:
            logger.exception("Position source failed unexpectedly")
            raise LocationUnavailable(f"Position source error: {e}") from e
        finally:
            executor.shutdown(wait=False)

        self._last_fix = (coordinate, timezone.now())
        return coordinate

    def _default(self, reason: str) -> ResolvedLocation:
        default = self.default_location
        return ResolvedLocation(
            coordinate=Coordinate(default['latitude'], default['longitude']),
            place=PlaceInfo(city=default['city'], country=default['country']),
            is_fallback=True,
            fallback_reason=reason,
        )
