"""
One acquisition cycle: location, provider chain, enrichment, publication.
"""
import asyncio
import logging
from concurrent.futures import Executor
from typing import Optional

from apps.adapters.chain import ProviderChain
from apps.core.constants import (
    DATA_SOURCES,
    NOTICE_DEMO_DATA,
    NOTICE_LOCATION_FALLBACK,
    NOTICE_PROVIDER_FAILED,
)
from apps.core.records import EnrichedRecord, Notice
from apps.enrichment.engine import enrich
from apps.location.services import LocationResolver

from .deferred import DeferredWork, get_deferred_work
from .state import MonitorState

logger = logging.getLogger(__name__)


class AcquisitionPipeline:
    """
    Runs a cycle in a fixed order:

    1. Resolve the location, unless the state already holds one
    2. Acquire a record from the provider chain
    3. Enrich it through deferred work, off the critical path
    4. Publish record, location and notices to the state in one step

    Blocking work (HTTP, geocoding) runs on the executor; the state is only
    touched from the event loop.
    """

    def __init__(
        self,
        resolver: LocationResolver,
        chain: ProviderChain,
        state: MonitorState,
        executor: Optional[Executor] = None,
        deferred: Optional[DeferredWork] = None,
    ):
        self.resolver = resolver
        self.chain = chain
        self.state = state
        self.executor = executor
        self.deferred = deferred or get_deferred_work(executor)

    async def run_cycle(self) -> EnrichedRecord:
        loop = asyncio.get_running_loop()
        notices = []

        location = self.state.location
        if location is None:
            location = await loop.run_in_executor(self.executor, self.resolver.resolve)
            if location.is_fallback:
                notices.append(Notice(
                    message=NOTICE_LOCATION_FALLBACK.format(
                        reason=location.fallback_reason or 'no fix',
                        place=location.place.label,
                    ),
                    source='location',
                ))

        result = await loop.run_in_executor(self.executor, self.chain.acquire, location)

        exhausted = result.exhausted
        if exhausted is not None:
            logger.error(f"{exhausted}; publishing synthetic data")
            notices.append(Notice(message=NOTICE_DEMO_DATA, source='providers'))
        elif result.errors:
            failed = ', '.join(DATA_SOURCES.get(e.provider, e.provider) for e in result.errors)
            logger.warning(f"Provider failure ({failed}); published data from {result.provider}")
            notices.append(Notice(
                message=NOTICE_PROVIDER_FAILED.format(
                    providers=failed,
                    used=DATA_SOURCES.get(result.provider, result.provider),
                ),
                source='providers',
            ))

        enriched = await self.deferred.defer(enrich, result.record)

        self.state.publish(enriched, location, notices)
        return enriched
