"""
Visualization engine: connects the shared state and visibility events to the
particle simulator and the bar chart.
"""
import logging
import random
from typing import List, Optional

from django.conf import settings

from apps.core.constants import CHART_SECTION, PARTICLE_SECTION
from apps.core.records import EnrichedRecord
from apps.monitor.state import MonitorState, StatusSnapshot

from .chart import Bar, BarChartRenderer
from .particles import AnimationLoop, ParticleSimulator
from .surface import DrawingSurface
from .visibility import VisibilityTracker

logger = logging.getLogger(__name__)


class VisualizationEngine:
    """
    Neither renderer does any work before its section is activated.

    Once active, each new record reseeds the particle set and redraws the
    chart. The animation loop starts with the first seed and is cancelled
    by close().
    """

    def __init__(
        self,
        state: MonitorState,
        visibility: VisibilityTracker,
        particle_surface: DrawingSurface,
        chart_surface: DrawingSurface,
        frame_interval: Optional[float] = None,
        rng: Optional[random.Random] = None,
    ):
        if frame_interval is None:
            frame_interval = settings.AIR_QUALITY_SETTINGS.get('FRAME_INTERVAL_SECONDS', 1 / 60)

        self.state = state
        self.visibility = visibility
        self.chart_surface = chart_surface
        self.simulator = ParticleSimulator(particle_surface.width, particle_surface.height, rng=rng)
        self.animation = AnimationLoop(self.simulator, particle_surface, interval=frame_interval)
        self.chart = BarChartRenderer()
        self.bars: List[Bar] = []

        self._record: Optional[EnrichedRecord] = state.current_record
        self._unsubscribers = [
            state.subscribe(self._on_snapshot),
            visibility.subscribe(self._on_section_visible),
        ]

    @property
    def particle_count(self) -> int:
        return len(self.simulator.particles)

    def _on_section_visible(self, section_id: str):
        record = self.state.current_record
        if record is None:
            return

        if section_id == PARTICLE_SECTION:
            self._seed_particles(record)
        elif section_id == CHART_SECTION:
            self._draw_chart(record)

    def _on_snapshot(self, snapshot: StatusSnapshot):
        record = snapshot.record
        if record is None or record is self._record:
            return
        self._record = record

        if self.visibility.is_active(PARTICLE_SECTION):
            self._seed_particles(record)
        if self.visibility.is_active(CHART_SECTION):
            self._draw_chart(record)

    def _seed_particles(self, record: EnrichedRecord):
        self.simulator.seed(record.aqi)
        self.animation.start()

    def _draw_chart(self, record: EnrichedRecord):
        self.bars = self.chart.draw(self.chart_surface, record)

    def close(self):
        self.animation.cancel()
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
        logger.debug("Visualization engine closed")
