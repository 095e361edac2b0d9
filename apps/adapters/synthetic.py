"""
Synthetic data generator, the last link of the provider chain.
"""
import logging
import random

from django.utils import timezone

from apps.core.constants import (
    SYNTHETIC_AQI_BASELINES,
    SYNTHETIC_AQI_DEFAULT_BASELINE,
    SYNTHETIC_RANGES,
)
from apps.core.records import AirQualityRecord, Coordinate, PlaceInfo, RawReading, UNKNOWN
from apps.core.utils import clamp_aqi

from .base import BaseAdapter

logger = logging.getLogger(__name__)


def generate_demo_reading(city, rng=random):
    """
    Generate a plausible reading for a place name.

    Values are a fixed base plus bounded random spread; two known cities get
    an elevated AQI baseline.
    """
    reading = {}
    for name, (base, spread) in SYNTHETIC_RANGES.items():
        if base is None:
            base = SYNTHETIC_AQI_BASELINES.get(city, SYNTHETIC_AQI_DEFAULT_BASELINE)
        reading[name] = base + rng.randrange(spread)
    reading['location'] = city
    return reading


class SyntheticAdapter(BaseAdapter):
    """
    Always succeeds. Used when every real provider has failed.
    """

    SOURCE_NAME = "Synthetic"
    SOURCE_CODE = "SYNTHETIC"
    REQUIRES_API_KEY = False

    def __init__(self, rng=None, **kwargs):
        super().__init__(**kwargs)
        self.rng = rng or random.Random()

    def fetch(self, coordinate: Coordinate, place: PlaceInfo) -> RawReading:
        city = place.city if place else UNKNOWN
        logger.info(f"Generating synthetic reading for {city}")
        return RawReading(source=self.SOURCE_CODE, payload=generate_demo_reading(city, self.rng))

    def normalize_data(self, raw: RawReading) -> AirQualityRecord:
        payload = raw.payload
        return AirQualityRecord(
            aqi=clamp_aqi(payload['aqi']),
            pm25=payload['pm25'],
            pm10=payload['pm10'],
            o3=payload['o3'],
            no2=payload['no2'],
            so2=payload['so2'],
            co=payload['co'],
            temperature=payload['temperature'],
            humidity=payload['humidity'],
            place_label=payload['location'],
            captured_at=timezone.now(),
        )

    def _update_status(self, success: bool, error_message: str = ''):
        """Synthetic data says nothing about provider health."""
