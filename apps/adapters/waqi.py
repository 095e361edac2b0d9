"""
WAQI (World Air Quality Index) adapter, the keyless secondary provider.
"""
import logging
from typing import Dict, Optional

from django.utils import timezone

from apps.core.constants import DEFAULT_HUMIDITY, DEFAULT_TEMPERATURE
from apps.core.exceptions import ProviderError
from apps.core.records import AirQualityRecord, Coordinate, PlaceInfo, RawReading, UNKNOWN
from apps.core.utils import clamp_aqi, round_half_up, to_concentration

from .base import BaseAdapter

logger = logging.getLogger(__name__)


class WAQIAdapter(BaseAdapter):
    """
    Adapter for WAQI API (aqicn.org).

    The geo feed returns the nearest station's AQI, already on a 0-500 like
    scale, with a sparse map of individual readings. Works with the public
    'demo' token, so no credential is required.
    """

    SOURCE_NAME = "WAQI"
    SOURCE_CODE = "WAQI"
    API_BASE_URL = "https://api.waqi.info/"
    REQUIRES_API_KEY = False
    API_KEY_NAME = "waqi"

    def _add_api_key(self, params: Dict, headers: Dict):
        """WAQI uses 'token' parameter."""
        params['token'] = self.api_key or 'demo'

    def fetch(self, coordinate: Coordinate, place: PlaceInfo) -> RawReading:
        endpoint = f"feed/geo:{coordinate.latitude};{coordinate.longitude}/"

        raw_data = self._make_request(endpoint)

        if not isinstance(raw_data, dict) or raw_data.get('status') != 'ok':
            status = raw_data.get('status') if isinstance(raw_data, dict) else None
            logger.error(f"Invalid response from {self.SOURCE_NAME}: status={status!r}")
            self._update_status(success=False, error_message=f"status={status!r}")
            raise ProviderError(self.SOURCE_CODE, f"Invalid response status {status!r}")

        return RawReading(source=self.SOURCE_CODE, payload=raw_data)

    def normalize_data(self, raw: RawReading) -> AirQualityRecord:
        """
        Normalize WAQI response to the canonical record.

        Missing pollutants become 0; missing temperature and humidity fall
        back to 20 C and 50 %.
        """
        data = raw.payload['data']
        iaqi = data.get('iaqi') or {}

        temperature = round_half_up(self._reading(iaqi, 't'), default=DEFAULT_TEMPERATURE)
        humidity = round_half_up(self._reading(iaqi, 'h'), default=DEFAULT_HUMIDITY)

        return AirQualityRecord(
            aqi=clamp_aqi(data.get('aqi')),
            pm25=to_concentration(self._reading(iaqi, 'pm25')),
            pm10=to_concentration(self._reading(iaqi, 'pm10')),
            o3=to_concentration(self._reading(iaqi, 'o3')),
            no2=to_concentration(self._reading(iaqi, 'no2')),
            so2=to_concentration(self._reading(iaqi, 'so2')),
            co=to_concentration(self._reading(iaqi, 'co')),
            temperature=temperature,
            humidity=min(max(humidity, 0), 100),
            place_label=(data.get('city') or {}).get('name') or UNKNOWN,
            captured_at=timezone.now(),
        )

    @staticmethod
    def _reading(iaqi: Dict, key: str) -> Optional[float]:
        entry = iaqi.get(key)
        if isinstance(entry, dict):
            return entry.get('v')
        return None
