from __future__ import annotations

from dataclasses import replace
from typing import Dict, Iterable

import pytest

from events import FatalFailure, PersonConfirmed, PresenceListener
from pose_types import Landmark, PoseFrame, PoseLandmark as P


def upright_person(visibility: float = 0.9) -> Dict[P, Landmark]:
    """A front-facing person with bent arms, plausible under both presets."""
    points = {
        P.NOSE: (0.5, 0.2),
        P.LEFT_SHOULDER: (0.6, 0.35),
        P.RIGHT_SHOULDER: (0.4, 0.35),
        P.LEFT_ELBOW: (0.65, 0.5),
        P.RIGHT_ELBOW: (0.35, 0.5),
        P.LEFT_WRIST: (0.6, 0.62),
        P.RIGHT_WRIST: (0.4, 0.62),
        P.LEFT_HIP: (0.57, 0.65),
        P.RIGHT_HIP: (0.43, 0.65),
        P.LEFT_KNEE: (0.57, 0.85),
        P.RIGHT_KNEE: (0.43, 0.85),
    }
    return {part: Landmark(x, y, 0.0, visibility) for part, (x, y) in points.items()}


def core_person(visibility: float = 0.9) -> Dict[P, Landmark]:
    """Nose, shoulders and hips only: shoulder width 0.2, hip width 0.15, torso 0.3."""
    points = {
        P.NOSE: (0.5, 0.2),
        P.LEFT_SHOULDER: (0.6, 0.3),
        P.RIGHT_SHOULDER: (0.4, 0.3),
        P.LEFT_HIP: (0.575, 0.6),
        P.RIGHT_HIP: (0.425, 0.6),
    }
    return {part: Landmark(x, y, 0.0, visibility) for part, (x, y) in points.items()}


def make_frame(parts: Dict[P, Landmark], timestamp: float = 0.0) -> PoseFrame:
    return PoseFrame.from_parts(timestamp, parts, image_size=(640, 480))


def shifted(parts: Dict[P, Landmark], dx: float = 0.0, dy: float = 0.0) -> Dict[P, Landmark]:
    return {part: replace(lm, x=lm.x + dx, y=lm.y + dy) for part, lm in parts.items()}


def with_visibility(parts: Dict[P, Landmark], which: Iterable[P], visibility: float) -> Dict[P, Landmark]:
    chosen = set(which)
    return {part: replace(lm, visibility=visibility) if part in chosen else lm for part, lm in parts.items()}


class RecordingListener(PresenceListener):
    def __init__(self) -> None:
        self.confirmed: list[PersonConfirmed] = []
        self.resets = 0
        self.failures: list[FatalFailure] = []

    def on_person_confirmed(self, event: PersonConfirmed) -> None:
        self.confirmed.append(event)

    def on_session_reset(self) -> None:
        self.resets += 1

    def on_fatal_failure(self, failure: FatalFailure) -> None:
        self.failures.append(failure)


@pytest.fixture
def listener() -> RecordingListener:
    return RecordingListener()
