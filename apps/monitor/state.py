"""
Application state container shared by the pipeline, the renderers and the
status display.
"""
import logging
from dataclasses import dataclass, replace
from datetime import datetime
from typing import Callable, List, Optional, Tuple

from django.utils import timezone

from apps.core.records import EnrichedRecord, Notice, ResolvedLocation

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatusSnapshot:
    record: Optional[EnrichedRecord] = None
    location: Optional[ResolvedLocation] = None
    notices: Tuple[Notice, ...] = ()
    online: bool = True
    published_at: Optional[datetime] = None


class MonitorState:
    """
    Holds the current snapshot and notifies subscribers when it changes.

    The snapshot is replaced as a whole, so readers never see fields from
    two different cycles. Only the acquisition pipeline writes records.
    """

    def __init__(self):
        self._snapshot = StatusSnapshot()
        self._subscribers: List[Callable[[StatusSnapshot], None]] = []

    @property
    def snapshot(self) -> StatusSnapshot:
        return self._snapshot

    @property
    def current_record(self) -> Optional[EnrichedRecord]:
        return self._snapshot.record

    @property
    def location(self) -> Optional[ResolvedLocation]:
        return self._snapshot.location

    @property
    def notices(self) -> Tuple[Notice, ...]:
        return self._snapshot.notices

    def subscribe(self, callback: Callable[[StatusSnapshot], None]) -> Callable[[], None]:
        """Register a callback; returns a function that removes it."""
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def publish(self, record: EnrichedRecord, location: ResolvedLocation, notices=()):
        """Replace record, location and notices in one step."""
        self._replace(
            record=record,
            location=location,
            notices=tuple(notices),
            published_at=timezone.now(),
        )
        logger.info(f"Published AQI {record.aqi} ({record.trend_label}) for {record.place_label}")

    def add_notice(self, notice: Notice):
        self._replace(notices=self._snapshot.notices + (notice,))

    def dismiss_notices(self):
        if self._snapshot.notices:
            self._replace(notices=())

    def set_online(self, online: bool):
        if self._snapshot.online != online:
            self._replace(online=online)

    def _replace(self, **changes):
        self._snapshot = replace(self._snapshot, **changes)
        snapshot = self._snapshot

        for callback in list(self._subscribers):
            try:
                callback(snapshot)
            except Exception:
                logger.exception(f"State subscriber {callback!r} failed")
