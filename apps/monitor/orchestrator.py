"""
Main orchestrator that wires location, providers, enrichment, scheduling and
visualization into a running monitor.
"""
import asyncio
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Iterable, Optional

from django.conf import settings

from apps.adapters.chain import ProviderChain
from apps.api.feed import StatusFeed
from apps.core.constants import CHART_SECTION, PARTICLE_SECTION
from apps.location.services import LocationResolver
from apps.visualization.engine import VisualizationEngine
from apps.visualization.surface import DrawingSurface, RecordingSurface
from apps.visualization.visibility import VisibilityTracker

from .connectivity import ConnectivityMonitor, ConnectivityProbe
from .deferred import get_deferred_work
from .pipeline import AcquisitionPipeline
from .scheduler import RefreshScheduler
from .state import MonitorState

logger = logging.getLogger(__name__)


class AirQualityMonitor:
    """
    Owns every long-lived component of the monitor:

    1. Shared state and the status feed
    2. Acquisition pipeline and refresh scheduler
    3. Connectivity monitor and its probe
    4. Visibility tracker and visualization engine

    Components that need an event loop are created in run().
    """

    def __init__(
        self,
        api_key: Optional[str] = None,
        resolver: Optional[LocationResolver] = None,
        chain: Optional[ProviderChain] = None,
        probe_connectivity: bool = True,
        particle_surface: Optional[DrawingSurface] = None,
        chart_surface: Optional[DrawingSurface] = None,
        publish_status: bool = True,
    ):
        self.settings = settings.AIR_QUALITY_SETTINGS
        canvas = self.settings.get('CANVAS_SIZE', {})

        self.executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix='monitor')
        self.state = MonitorState()
        self.connectivity = ConnectivityMonitor()
        self.visibility = VisibilityTracker(self.settings.get('VISIBILITY_THRESHOLD', 0.1))

        self.chain = chain or ProviderChain.from_settings(api_key)
        self.pipeline = AcquisitionPipeline(
            resolver=resolver or LocationResolver(),
            chain=self.chain,
            state=self.state,
            executor=self.executor,
            deferred=get_deferred_work(self.executor),
        )
        self.scheduler = RefreshScheduler(self.pipeline, self.state, self.connectivity)

        self.probe = None
        if probe_connectivity:
            self.probe = ConnectivityProbe(
                self.connectivity,
                url=self.settings['CONNECTIVITY_CHECK_URL'],
                interval=self.settings.get('CONNECTIVITY_CHECK_INTERVAL_SECONDS', 30),
            )

        self.particle_surface = particle_surface or RecordingSurface(*canvas.get(PARTICLE_SECTION, (800, 400)))
        self.chart_surface = chart_surface or RecordingSurface(*canvas.get(CHART_SECTION, (600, 300)))
        self.publish_status = publish_status

        self.visualization: Optional[VisualizationEngine] = None
        self.feed: Optional[StatusFeed] = None
        self._probe_task: Optional[asyncio.Task] = None

        logger.info(f"Provider order: {' > '.join(self.chain.order)}")

    async def start(self, visible_sections: Iterable[str] = ()):
        """Start background work and run the initial cycle."""
        self.visualization = VisualizationEngine(
            self.state,
            self.visibility,
            self.particle_surface,
            self.chart_surface,
        )
        if self.publish_status:
            self.feed = StatusFeed(self.state, self.visualization)

        for section_id in visible_sections:
            self.visibility.report(section_id)

        if self.probe is not None:
            self._probe_task = asyncio.get_running_loop().create_task(self.probe.run())

        self.scheduler.start()
        await self.scheduler.trigger_refresh('startup')

    async def run(self, visible_sections: Iterable[str] = (), once: bool = False):
        """
        Run until cancelled, or for a single cycle when once is set.
        """
        try:
            await self.start(visible_sections)
            if not once:
                await asyncio.Event().wait()
        finally:
            await self.close()

    async def close(self):
        await self.scheduler.stop()

        if self._probe_task is not None:
            self._probe_task.cancel()
            await asyncio.gather(self._probe_task, return_exceptions=True)
            self._probe_task = None

        if self.visualization is not None:
            self.visualization.close()
        if self.feed is not None:
            self.feed.close()

        self.executor.shutdown(wait=False)
        logger.info("Monitor stopped")
