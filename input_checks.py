import logging
from typing import Optional


logger = logging.getLogger(__name__)

MIN_SIDE = 64
MAX_WIDTH = 1920
MAX_HEIGHT = 1080
MIN_ASPECT = 0.5
MAX_ASPECT = 3.0
MIN_FRAME_INTERVAL = 0.016


class InputFrameGate:
    """Accepts camera images within the engine's size, aspect and rate limits.

    Rejected images are skipped before submission and never reach the
    validation session.
    """

    def __init__(
        self,
        min_side: int = MIN_SIDE,
        max_width: int = MAX_WIDTH,
        max_height: int = MAX_HEIGHT,
        min_aspect: float = MIN_ASPECT,
        max_aspect: float = MAX_ASPECT,
        min_interval: float = MIN_FRAME_INTERVAL,
    ):
        self.min_side = min_side
        self.max_width = max_width
        self.max_height = max_height
        self.min_aspect = min_aspect
        self.max_aspect = max_aspect
        self.min_interval = min_interval
        self._last_accepted: Optional[float] = None

    def rejection_reason(self, width: int, height: int, now: float) -> Optional[str]:
        if width < self.min_side or height < self.min_side:
            return f"frame too small ({width}x{height})"
        if width > self.max_width or height > self.max_height:
            return f"frame too large ({width}x{height})"
        aspect = width / height
        if aspect < self.min_aspect or aspect > self.max_aspect:
            return f"unusual aspect ratio ({aspect:.2f})"
        if self._last_accepted is not None and now - self._last_accepted < self.min_interval:
            return f"frame interval too short ({(now - self._last_accepted) * 1000:.1f} ms)"
        return None

    def accept(self, width: int, height: int, now: float) -> bool:
        reason = self.rejection_reason(width, height, now)
        if reason is not None:
            logger.debug("Skipping input frame: %s", reason)
            return False
        self._last_accepted = now
        return True

    def reset(self) -> None:
        self._last_accepted = None
