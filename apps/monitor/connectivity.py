"""
Connectivity signal: online/offline state and a probe that feeds it.
"""
import asyncio
import logging
from typing import Callable, List, Optional

import requests

logger = logging.getLogger(__name__)


class ConnectivityMonitor:
    """Current online flag plus listeners notified on transitions only."""

    def __init__(self, online: bool = True):
        self.online = online
        self._listeners: List[Callable[[bool], None]] = []

    def subscribe(self, callback: Callable[[bool], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def set_online(self, online: bool):
        if online == self.online:
            return

        self.online = online
        logger.info("Connectivity regained" if online else "Connectivity lost")

        for callback in list(self._listeners):
            try:
                callback(online)
            except Exception:
                logger.exception(f"Connectivity listener {callback!r} failed")


class ConnectivityProbe:
    """
    Polls a URL and reports reachability to a ConnectivityMonitor.

    Any HTTP answer counts as online; only transport failures count as
    offline.
    """

    def __init__(
        self,
        monitor: ConnectivityMonitor,
        url: str,
        interval: float = 30,
        timeout: float = 5,
        session: Optional[requests.Session] = None,
    ):
        self.monitor = monitor
        self.url = url
        self.interval = interval
        self.timeout = timeout
        self.session = session or requests.Session()

    def check(self) -> bool:
        try:
            self.session.head(self.url, timeout=self.timeout, allow_redirects=True)
        except requests.exceptions.RequestException as e:
            logger.debug(f"Connectivity check against {self.url} failed: {e}")
            return False
        return True

    async def run(self):
        loop = asyncio.get_running_loop()
        while True:
            online = await loop.run_in_executor(None, self.check)
            self.monitor.set_online(online)
            await asyncio.sleep(self.interval)
