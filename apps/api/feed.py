"""
Status display feed: mirrors each state change into the Django cache so the
API process can serve it.
"""
import logging
from typing import Optional

from django.conf import settings
from django.core.cache import cache

from apps.monitor.state import MonitorState, StatusSnapshot

from .serializers import BarSerializer, StatusSerializer

logger = logging.getLogger(__name__)


def get_status_cache_key():
    return settings.AIR_QUALITY_SETTINGS.get('STATUS_CACHE_KEY', 'monitor:status')


def read_status() -> Optional[dict]:
    return cache.get(get_status_cache_key())


class StatusFeed:
    """
    Republishes on every state change, and when a section activates so the
    cached chart and particle count match what was just drawn.
    """

    def __init__(self, state: MonitorState, visualization=None):
        self.state = state
        self.visualization = visualization
        self._unsubscribers = [state.subscribe(self.publish)]
        if visualization is not None:
            self._unsubscribers.append(visualization.visibility.subscribe(self._on_section_visible))

    def _on_section_visible(self, section_id: str):
        self.publish(self.state.snapshot)

    def publish(self, snapshot: StatusSnapshot):
        data = dict(StatusSerializer(snapshot).data)

        if self.visualization is not None:
            data['chart'] = BarSerializer(self.visualization.bars, many=True).data
            data['particle_count'] = self.visualization.particle_count

        try:
            cache.set(
                get_status_cache_key(),
                data,
                timeout=settings.AIR_QUALITY_SETTINGS.get('STATUS_CACHE_TTL'),
            )
        except Exception as e:
            logger.error(f"Failed to publish status snapshot: {e}")

    def close(self):
        for unsubscribe in self._unsubscribers:
            unsubscribe()
        self._unsubscribers = []
