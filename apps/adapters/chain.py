"""
Ordered provider fallback chain.
"""
import logging
import time
from dataclasses import dataclass, field
from decimal import Decimal
from typing import List, Optional

from django.conf import settings

from apps.core.exceptions import AllProvidersExhausted, ProviderError
from apps.core.records import AirQualityRecord, ResolvedLocation

from .models import AcquisitionLog
from .openweathermap import OpenWeatherMapAdapter
from .synthetic import SyntheticAdapter
from .waqi import WAQIAdapter

logger = logging.getLogger(__name__)

ADAPTER_CLASSES = {
    OpenWeatherMapAdapter.SOURCE_CODE: OpenWeatherMapAdapter,
    WAQIAdapter.SOURCE_CODE: WAQIAdapter,
    SyntheticAdapter.SOURCE_CODE: SyntheticAdapter,
}


@dataclass
class ChainResult:
    """Outcome of one pass through the chain. Always carries a record."""
    record: AirQualityRecord
    provider: str
    attempted: List[str] = field(default_factory=list)
    errors: List[ProviderError] = field(default_factory=list)
    execution_time_ms: int = 0

    @property
    def used_fallback(self) -> bool:
        return self.provider == SyntheticAdapter.SOURCE_CODE

    @property
    def exhausted(self) -> Optional[AllProvidersExhausted]:
        """The exhaustion condition, when only synthetic data was left."""
        if self.used_fallback:
            return AllProvidersExhausted(self.errors)
        return None


class ProviderChain:
    """
    Tries providers in priority order until one returns a record.

    A provider is tried at most once per pass; unavailable providers (no
    credential) are skipped. The synthetic generator always closes the
    chain, so acquire() never comes back empty-handed.
    """

    def __init__(self, providers, fallback: Optional[SyntheticAdapter] = None):
        self.fallback = fallback or SyntheticAdapter()
        self.providers = [p for p in providers if p.SOURCE_CODE != self.fallback.SOURCE_CODE]
        self.settings = settings.AIR_QUALITY_SETTINGS

    @classmethod
    def from_settings(cls, api_key: Optional[str] = None):
        """
        Build the chain for the configured credential.

        A stored key selects the metered provider, no key the keyless one.
        Only one real provider is ever in the chain.

        Args:
            api_key: OpenWeatherMap credential from the credential store
        """
        config = settings.AIR_QUALITY_SETTINGS
        if api_key:
            adapter_class = ADAPTER_CLASSES[config.get('METERED_PROVIDER', OpenWeatherMapAdapter.SOURCE_CODE)]
            provider = adapter_class(api_key=api_key)
        else:
            adapter_class = ADAPTER_CLASSES[config.get('KEYLESS_PROVIDER', WAQIAdapter.SOURCE_CODE)]
            provider = adapter_class()
        return cls([provider])

    @property
    def order(self) -> List[str]:
        return [p.SOURCE_CODE for p in self.providers] + [self.fallback.SOURCE_CODE]

    def acquire(self, location: ResolvedLocation) -> ChainResult:
        """
        Produce a record for the location.

        Args:
            location: resolved coordinate and place

        Returns:
            ChainResult with the first successful record
        """
        start_time = time.time()
        attempted = []
        errors = []

        for provider in self.providers:
            if not provider.is_available():
                logger.debug(f"Skipping {provider.SOURCE_NAME}: not available")
                continue

            attempted.append(provider.SOURCE_CODE)
            try:
                record = provider.fetch_current(location.coordinate, location.place)
            except ProviderError as e:
                logger.warning(f"{provider.SOURCE_NAME} failed, falling through: {e.cause}")
                errors.append(e)
                continue
            except Exception as e:
                logger.exception(f"Unexpected error in {provider.SOURCE_NAME}")
                errors.append(ProviderError(provider.SOURCE_CODE, e))
                continue

            logger.info(f"Fetched AQI {record.aqi} from {provider.SOURCE_NAME}")
            return self._finish(location, record, provider.SOURCE_CODE, attempted, errors, start_time)

        attempted.append(self.fallback.SOURCE_CODE)
        record = self.fallback.fetch_current(location.coordinate, location.place)
        if errors:
            logger.warning(f"All providers failed ({len(errors)}), using synthetic data")
        return self._finish(location, record, self.fallback.SOURCE_CODE, attempted, errors, start_time)

    def _finish(self, location, record, provider, attempted, errors, start_time) -> ChainResult:
        result = ChainResult(
            record=record,
            provider=provider,
            attempted=attempted,
            errors=errors,
            execution_time_ms=int((time.time() - start_time) * 1000),
        )
        self._log_acquisition(location, result)
        return result

    def _log_acquisition(self, location: ResolvedLocation, result: ChainResult):
        """Log the acquisition for debugging and analysis."""
        if not self.settings.get('TRACK_PROVIDER_STATUS', True):
            return

        try:
            AcquisitionLog.objects.create(
                query_lat=Decimal(str(round(location.coordinate.latitude, 6))),
                query_lon=Decimal(str(round(location.coordinate.longitude, 6))),
                provider_used=result.provider,
                providers_attempted=result.attempted,
                providers_failed=[e.provider for e in result.errors],
                error_details={e.provider: str(e.cause) for e in result.errors},
                result_aqi=result.record.aqi,
                used_fallback=result.used_fallback,
                execution_time_ms=result.execution_time_ms,
            )
        except Exception as e:
            logger.error(f"Failed to log acquisition: {e}")
