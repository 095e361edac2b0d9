"""
Viewport visibility tracking with one-way activation.
"""
import logging
from typing import Callable, FrozenSet, List, Set

logger = logging.getLogger(__name__)


class VisibilityTracker:
    """
    Turns intersection reports into "section became visible" events.

    A section is activated the first time it intersects the viewport by at
    least `threshold` and stays activated; later reports, including ones
    saying it scrolled away, change nothing.
    """

    def __init__(self, threshold: float = 0.1):
        self.threshold = threshold
        self._activated: Set[str] = set()
        self._listeners: List[Callable[[str], None]] = []

    @property
    def activated(self) -> FrozenSet[str]:
        return frozenset(self._activated)

    def is_active(self, section_id: str) -> bool:
        return section_id in self._activated

    def subscribe(self, callback: Callable[[str], None]) -> Callable[[], None]:
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def report(self, section_id: str, intersection_ratio: float = 1.0) -> bool:
        """
        Record an intersection observation.

        Returns:
            bool: True if this report activated the section
        """
        if intersection_ratio <= 0 or intersection_ratio < self.threshold:
            return False

        if section_id in self._activated:
            return False

        self._activated.add(section_id)
        logger.debug(f"Section '{section_id}' activated")

        for callback in list(self._listeners):
            try:
                callback(section_id)
            except Exception:
                logger.exception(f"Visibility listener {callback!r} failed")
        return True
