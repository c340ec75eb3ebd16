from dataclasses import dataclass

from pose_types import PoseFrame


@dataclass(frozen=True)
class PersonConfirmed:
    confidence: float
    timestamp: float
    frame: PoseFrame


@dataclass(frozen=True)
class FatalFailure:
    reason: str
    source: str  # "estimator" or "processing"


class PresenceListener:
    """Outbound hooks for the capture/UI side. Override what you need."""

    def on_person_confirmed(self, event: PersonConfirmed) -> None:
        pass

    def on_session_reset(self) -> None:
        pass

    def on_fatal_failure(self, failure: FatalFailure) -> None:
        pass
