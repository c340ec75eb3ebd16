import logging
from dataclasses import dataclass
from typing import Optional

from events import PersonConfirmed
from pose_types import PoseFrame
from session import ValidationSession


logger = logging.getLogger(__name__)

IDLE = "IDLE"
ACCUMULATING = "ACCUMULATING"
CONFIRMED = "CONFIRMED"


@dataclass
class DebounceState:
    consecutive_passes: int
    phase: str
    event: Optional[PersonConfirmed] = None


class DetectionDebouncer:
    """Counts consecutive passing frames and fires once per completed run.

    After a confirmation the counter drops back to 0, so the same presence has
    to build a fresh run before the next event. Capture throttling is left to
    the consumer.
    """

    def __init__(self, required_consecutive: int = 3):
        if required_consecutive < 1:
            raise ValueError("required_consecutive must be at least 1")
        self.required_consecutive = required_consecutive

    def update(
        self,
        session: ValidationSession,
        passed: bool,
        confidence: float,
        frame: PoseFrame,
        timestamp: float,
    ) -> DebounceState:
        if not passed:
            if session.consecutive_passes:
                logger.debug("Run broken after %d passing frames", session.consecutive_passes)
            session.consecutive_passes = 0
            return DebounceState(0, IDLE)

        session.consecutive_passes += 1
        if session.consecutive_passes < self.required_consecutive:
            return DebounceState(session.consecutive_passes, ACCUMULATING)

        event = PersonConfirmed(confidence=confidence, timestamp=timestamp, frame=frame)
        session.consecutive_passes = 0
        session.last_confirmed_at = timestamp
        logger.info("Person confirmed (confidence %.3f)", confidence)
        return DebounceState(self.required_consecutive, CONFIRMED, event)

    def reset(self, session: ValidationSession) -> None:
        session.consecutive_passes = 0
