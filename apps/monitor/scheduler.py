"""
Refresh scheduling: manual triggers, reconnects and the periodic timer.
"""
import asyncio
import logging
from typing import Optional, Set

from django.conf import settings

from apps.core.records import Notice

from .connectivity import ConnectivityMonitor
from .pipeline import AcquisitionPipeline
from .state import MonitorState

logger = logging.getLogger(__name__)


class RefreshScheduler:
    """
    Decides when an acquisition cycle runs.

    At most one cycle is in flight. A trigger that arrives while
    `refreshing` is set is dropped, not queued. Timer ticks are skipped
    while offline and before the first location is known.
    """

    def __init__(
        self,
        pipeline: AcquisitionPipeline,
        state: MonitorState,
        connectivity: ConnectivityMonitor,
        interval: Optional[float] = None,
        refresh_on_reconnect: Optional[bool] = None,
    ):
        config = settings.AIR_QUALITY_SETTINGS
        self.pipeline = pipeline
        self.state = state
        self.connectivity = connectivity
        self.interval = interval if interval is not None else config.get('REFRESH_INTERVAL_SECONDS', 600)
        self.refresh_on_reconnect = (
            refresh_on_reconnect if refresh_on_reconnect is not None
            else config.get('REFRESH_ON_RECONNECT', True)
        )

        self.refreshing = False
        self._timer_task: Optional[asyncio.Task] = None
        self._pending: Set[asyncio.Task] = set()
        self._unsubscribe = connectivity.subscribe(self._on_connectivity_change)

    async def trigger_refresh(self, reason: str = 'manual') -> bool:
        """
        Run one cycle unless another is in flight.

        Returns:
            bool: False if the trigger was dropped
        """
        if self.refreshing:
            logger.debug(f"Refresh ({reason}) dropped: a cycle is already running")
            return False

        self.refreshing = True
        logger.info(f"Refresh started ({reason})")
        try:
            await self.pipeline.run_cycle()
        except Exception as e:
            logger.exception(f"Refresh ({reason}) failed")
            self.state.add_notice(Notice(message=f"Refresh failed: {e}", source='scheduler'))
            return False
        finally:
            self.refreshing = False

        return True

    def request_refresh(self, reason: str = 'manual') -> Optional[asyncio.Task]:
        """Fire-and-forget trigger for callbacks that cannot await."""
        if self.refreshing:
            logger.debug(f"Refresh ({reason}) dropped: a cycle is already running")
            return None

        task = asyncio.get_running_loop().create_task(self.trigger_refresh(reason))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)
        return task

    def on_timer_tick(self) -> Optional[asyncio.Task]:
        if not self.connectivity.online:
            logger.info("Periodic refresh suppressed: offline")
            return None

        if self.state.location is None:
            logger.debug("Periodic refresh skipped: no location yet")
            return None

        return self.request_refresh('timer')

    def _on_connectivity_change(self, online: bool):
        self.state.set_online(online)

        if online and self.refresh_on_reconnect:
            self.request_refresh('reconnect')

    async def _run_timer(self):
        while True:
            await asyncio.sleep(self.interval)
            self.on_timer_tick()

    def start(self):
        if self._timer_task is None or self._timer_task.done():
            self._timer_task = asyncio.get_running_loop().create_task(self._run_timer())

    async def stop(self):
        self._unsubscribe()

        tasks = list(self._pending)
        if self._timer_task is not None:
            tasks.append(self._timer_task)
            self._timer_task = None

        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
