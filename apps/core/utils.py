"""
Utility functions for Air Quality Monitor.
"""
import math
from datetime import datetime, timedelta

from django.utils import timezone

from .constants import (
    AQI_LEVELS,
    AQI_MAX,
    AQI_MIN,
    BAR_COLOR_CRITICAL,
    BAR_COLORS,
    REGIONAL_AQI_CONVERSION,
    REGIONAL_AQI_DEFAULT,
)


def convert_regional_aqi(index):
    """
    Convert a regional 1-5 AQI index to the unified 0-500 scale.

    Each bucket maps to its midpoint; anything unmapped yields 100.
    """
    return REGIONAL_AQI_CONVERSION.get(index, REGIONAL_AQI_DEFAULT)


def to_concentration(value, divisor=1):
    """
    Normalize a raw reading to a non-negative integer.

    Missing or unparseable values become 0.
    """
    if value is None:
        return 0
    try:
        number = float(value) / divisor
    except (TypeError, ValueError):
        return 0
    if not math.isfinite(number) or number < 0:
        return 0
    return math.floor(number + 0.5)


def round_half_up(value, default=None):
    """Round to the nearest integer, halves away from zero; keeps the sign."""
    if value is None:
        return default
    try:
        number = float(value)
    except (TypeError, ValueError):
        return default
    if not math.isfinite(number):
        return default
    return int(math.copysign(math.floor(abs(number) + 0.5), number))


def clamp_aqi(value):
    """Coerce an AQI reading into the unified 0-500 range."""
    return min(max(to_concentration(value), AQI_MIN), AQI_MAX)


def get_aqi_level(aqi):
    """
    Return display information for an AQI value.

    Returns:
        dict: level, color_hex and particle_color
    """
    for level in AQI_LEVELS:
        if level['max_value'] is None or aqi <= level['max_value']:
            return level
    return AQI_LEVELS[-1]


def get_particle_color(aqi):
    return get_aqi_level(aqi)['particle_color']


def get_bar_color(value, maximum):
    """Pick a bar color from the value/max ratio ladder."""
    ratio = value / maximum
    for bound, color in BAR_COLORS:
        if ratio <= bound:
            return color
    return BAR_COLOR_CRITICAL


def is_fix_fresh(timestamp, max_age_seconds):
    """
    Check if a position fix is recent enough to reuse.

    Args:
        timestamp: datetime object or ISO string
        max_age_seconds: maximum acceptable age in seconds

    Returns:
        bool: True if the fix is fresh
    """
    if timestamp is None:
        return False

    if isinstance(timestamp, str):
        try:
            timestamp = datetime.fromisoformat(timestamp.replace('Z', '+00:00'))
        except ValueError:
            return False

    if not timezone.is_aware(timestamp):
        timestamp = timezone.make_aware(timestamp)

    age = timezone.now() - timestamp
    return age <= timedelta(seconds=max_age_seconds)


def format_timestamp(timestamp):
    """Format a capture time for the status display, in the local zone."""
    return timezone.localtime(timestamp).strftime('%Y-%m-%d %H:%M:%S')


def validate_coordinates(lat, lon):
    """
    Validate latitude and longitude values.

    Args:
        lat: latitude value
        lon: longitude value

    Returns:
        tuple: (is_valid, error_message)
    """
    try:
        lat = float(lat)
        lon = float(lon)

        if not (-90 <= lat <= 90):
            return False, "Latitude must be between -90 and 90"

        if not (-180 <= lon <= 180):
            return False, "Longitude must be between -180 and 180"

        return True, None

    except (TypeError, ValueError):
        return False, "Invalid coordinate format"
