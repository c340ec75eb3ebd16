import logging
from typing import Optional

from events import PersonConfirmed


logger = logging.getLogger(__name__)


class CaptureThrottle:
    def __init__(self, rearm_seconds: float = 2.0, enabled: bool = True):
        self.rearm_seconds = rearm_seconds
        self.enabled = enabled
        self._last_capture: Optional[float] = None

    def should_capture(self, now: float) -> bool:
        if not self.enabled:
            return False
        if self._last_capture is None:
            return True
        return now - self._last_capture > self.rearm_seconds

    def record(self, now: float) -> None:
        self._last_capture = now

    def offer(self, event: PersonConfirmed) -> bool:
        if not self.should_capture(event.timestamp):
            logger.debug("Capture skipped; re-arm interval not elapsed")
            return False
        self.record(event.timestamp)
        return True

    def reset(self) -> None:
        self._last_capture = None
