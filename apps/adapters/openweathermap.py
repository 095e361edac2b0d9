"""
OpenWeatherMap adapter, the metered primary provider.
"""
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Dict

from django.utils import timezone

from apps.core.records import AirQualityRecord, Coordinate, PlaceInfo, RawReading, UNKNOWN
from apps.core.utils import convert_regional_aqi, round_half_up, to_concentration

from .base import BaseAdapter

logger = logging.getLogger(__name__)


class OpenWeatherMapAdapter(BaseAdapter):
    """
    Adapter for the OpenWeatherMap Air Pollution and Current Weather APIs.

    Pollution and weather are separate queries issued together; the
    pollution query reports AQI on OWM's 1-5 regional index.
    """

    SOURCE_NAME = "OpenWeatherMap"
    SOURCE_CODE = "OPENWEATHERMAP"
    API_BASE_URL = "https://api.openweathermap.org/data/2.5/"
    REQUIRES_API_KEY = True
    API_KEY_NAME = "openweathermap"

    def _add_api_key(self, params: Dict, headers: Dict):
        """OpenWeatherMap uses 'appid' parameter."""
        if self.api_key:
            params['appid'] = self.api_key

    def fetch(self, coordinate: Coordinate, place: PlaceInfo) -> RawReading:
        params = {
            'lat': coordinate.latitude,
            'lon': coordinate.longitude,
        }

        with ThreadPoolExecutor(max_workers=2) as executor:
            air_future = executor.submit(self._make_request, 'air_pollution', params)
            weather_future = executor.submit(
                self._make_request, 'weather', {**params, 'units': 'metric'}
            )
            # Either failure raises ProviderError from here
            air_data = air_future.result()
            weather_data = weather_future.result()

        return RawReading(
            source=self.SOURCE_CODE,
            payload={'air': air_data, 'weather': weather_data},
        )

    def normalize_data(self, raw: RawReading) -> AirQualityRecord:
        """
        Normalize OpenWeatherMap responses to the canonical record.

        The 1-5 index maps to bucket midpoints on the 0-500 scale and CO is
        converted from ug/m3 to mg/m3.
        """
        item = raw.payload['air']['list'][0]
        weather = raw.payload['weather']

        components = item.get('components') or {}
        main = weather['main']
        country = (weather.get('sys') or {}).get('country') or UNKNOWN

        temperature = round_half_up(main.get('temp'))
        if temperature is None:
            raise ValueError("weather response has no temperature")

        return AirQualityRecord(
            aqi=convert_regional_aqi(item['main'].get('aqi')),
            pm25=to_concentration(components.get('pm2_5')),
            pm10=to_concentration(components.get('pm10')),
            o3=to_concentration(components.get('o3')),
            no2=to_concentration(components.get('no2')),
            so2=to_concentration(components.get('so2')),
            co=to_concentration(components.get('co'), divisor=1000),
            temperature=temperature,
            humidity=min(to_concentration(main.get('humidity')), 100),
            place_label=PlaceInfo(weather.get('name') or UNKNOWN, country).label,
            captured_at=timezone.now(),
        )
