"""
Base adapter class for all air quality data sources.
"""
import logging
import time
from abc import ABC, abstractmethod
from typing import Dict, Optional

import requests
from django.conf import settings
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from apps.core.exceptions import ProviderError
from apps.core.records import AirQualityRecord, PlaceInfo, RawReading, Coordinate

from .models import ProviderStatus

logger = logging.getLogger(__name__)


class BaseAdapter(ABC):
    """
    Abstract base class for all data source adapters.

    A provider turns a coordinate (and the resolved place) into a
    RawReading, then normalizes it into the canonical AirQualityRecord.
    Every failure on the way out is raised as ProviderError; transport
    exceptions never leak to callers.
    """

    # Subclasses must define these
    SOURCE_NAME = None
    SOURCE_CODE = None
    API_BASE_URL = None
    REQUIRES_API_KEY = True
    API_KEY_NAME = None

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        if not all([self.SOURCE_NAME, self.SOURCE_CODE]):
            raise ValueError("Adapter must define SOURCE_NAME and SOURCE_CODE")

        self.settings = settings.AIR_QUALITY_SETTINGS
        self.api_key = api_key if api_key is not None else self._get_api_key()
        self.session = session

        if self.API_BASE_URL and self.session is None:
            self.session = self._create_session()

    def _get_api_key(self) -> Optional[str]:
        """Get API key from settings."""
        if not self.API_KEY_NAME:
            return None

        api_key = settings.API_KEYS.get(self.API_KEY_NAME)
        if not api_key and self.REQUIRES_API_KEY:
            logger.warning(f"No API key found for {self.SOURCE_NAME}")

        return api_key or None

    def _create_session(self) -> requests.Session:
        """Create requests session with retry logic."""
        session = requests.Session()

        retry_strategy = Retry(
            total=self.settings.get('MAX_RETRIES', 0),
            backoff_factor=self.settings.get('RETRY_BACKOFF_FACTOR', 2),
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=["GET"],
            raise_on_status=False,
        )

        adapter = HTTPAdapter(max_retries=retry_strategy)
        session.mount("http://", adapter)
        session.mount("https://", adapter)

        return session

    def _make_request(self, endpoint: str, params: Dict = None, headers: Dict = None) -> Dict:
        """
        Make a GET request and return the decoded JSON body.

        Args:
            endpoint: API endpoint path
            params: Query parameters
            headers: HTTP headers

        Returns:
            Response data as dict

        Raises:
            ProviderError: on any transport error, non-2xx status or
                undecodable body
        """
        url = f"{self.API_BASE_URL.rstrip('/')}/{endpoint.lstrip('/')}"
        params = dict(params or {})
        headers = dict(headers or {})

        start_time = time.time()

        try:
            self._add_api_key(params, headers)

            response = self.session.request(
                method='GET',
                url=url,
                params=params,
                headers=headers,
                timeout=self.settings.get('REQUEST_TIMEOUT', 10),
            )
            response.raise_for_status()
            data = response.json()

        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"{self.SOURCE_NAME} API error on {endpoint}: {e}")
            self._update_status(success=False, error_message=str(e))
            raise ProviderError(self.SOURCE_CODE, e) from e

        response_time_ms = int((time.time() - start_time) * 1000)
        logger.debug(f"{self.SOURCE_NAME} {endpoint} answered in {response_time_ms} ms")

        return data

    def _add_api_key(self, params: Dict, headers: Dict):
        """
        Add API key to request. Override in subclass if needed.
        Default: adds to query params as 'api_key'.
        """
        if self.api_key:
            params['api_key'] = self.api_key

    def _update_status(self, success: bool, error_message: str = ''):
        """Update provider health metrics."""
        if not self.settings.get('TRACK_PROVIDER_STATUS', True):
            return

        try:
            ProviderStatus.record(self.SOURCE_CODE, success, error_message)
        except Exception as e:
            logger.error(f"Failed to update provider status: {e}")

    def is_available(self) -> bool:
        """A provider that needs a credential is unusable without one."""
        if not self.REQUIRES_API_KEY:
            return True
        return bool(self.api_key)

    @abstractmethod
    def fetch(self, coordinate: Coordinate, place: PlaceInfo) -> RawReading:
        """
        Fetch the provider-native reading for a coordinate.

        Raises:
            ProviderError
        """

    @abstractmethod
    def normalize_data(self, raw: RawReading) -> AirQualityRecord:
        """
        Convert a RawReading to the canonical record.

        May raise KeyError, TypeError, ValueError or IndexError on a
        malformed payload; fetch_current converts those.
        """

    def fetch_current(self, coordinate: Coordinate, place: PlaceInfo) -> AirQualityRecord:
        """
        Fetch and normalize current conditions.

        Raises:
            ProviderError
        """
        raw = self.fetch(coordinate, place)

        try:
            record = self.normalize_data(raw)
        except (KeyError, TypeError, ValueError, IndexError, AttributeError) as e:
            logger.error(f"Error parsing {self.SOURCE_NAME} data: {e!r}")
            self._update_status(success=False, error_message=f"Malformed payload: {e!r}")
            raise ProviderError(self.SOURCE_CODE, e) from e

        self._update_status(success=True)
        return record
