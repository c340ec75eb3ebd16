import logging
from dataclasses import dataclass, replace
from typing import Optional

from geometry import distance_2d
from pose_types import Landmark, PoseFrame
from session import ValidationSession
from thresholds import Thresholds


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TemporalResult:
    score: float
    average_movement: float
    consistent: bool
    frame: PoseFrame
    first_frame: bool = False


def average_movement(frame: PoseFrame, previous: PoseFrame, thresholds: Thresholds) -> float:
    floor = thresholds.movement_visibility_floor
    total = 0.0
    pairs = 0
    for part in thresholds.tracked_keypoints:
        current = frame.get(part)
        before = previous.get(part)
        if current is None or before is None:
            continue
        if current.visibility > floor and before.visibility > floor:
            total += distance_2d(current, before)
            pairs += 1
    return total / pairs if pairs else 0.0


def consistency_score(movement: float, thresholds: Thresholds) -> float:
    if movement <= 0.0:
        return 1.0
    if movement > thresholds.max_movement:
        return thresholds.movement_penalty_score
    return max(thresholds.min_consistency, 1.0 - movement / thresholds.max_movement)


def _smooth(prev: Optional[Landmark], curr: Optional[Landmark], alpha: float) -> Optional[Landmark]:
    if prev is None or curr is None:
        return curr
    return replace(
        curr,
        x=alpha * curr.x + (1.0 - alpha) * prev.x,
        y=alpha * curr.y + (1.0 - alpha) * prev.y,
    )


def smooth_frame(frame: PoseFrame, previous: PoseFrame, alpha: float) -> PoseFrame:
    if not previous.valid:
        return frame
    return frame.with_landmarks(
        _smooth(before, current, alpha) for before, current in zip(previous.landmarks, frame.landmarks)
    )


def compare_frames(frame: PoseFrame, previous: Optional[PoseFrame], thresholds: Thresholds) -> TemporalResult:
    """Score movement against the previous raw frame and smooth the output frame.

    The first frame of a session has nothing to compare with: it scores 1.0
    and is returned untouched.
    """
    if previous is None or not previous.valid:
        return TemporalResult(1.0, 0.0, True, frame, first_frame=True)

    movement = average_movement(frame, previous, thresholds)
    score = consistency_score(movement, thresholds)
    consistent = movement < thresholds.max_movement
    if not consistent:
        logger.debug("Average movement %.3f exceeds %.3f", movement, thresholds.max_movement)
    smoothed = smooth_frame(frame, previous, thresholds.smoothing_factor)
    return TemporalResult(score, movement, consistent, smoothed)


class TemporalTracker:
    def __init__(self, thresholds: Thresholds):
        self.thresholds = thresholds

    def update(self, session: ValidationSession, frame: PoseFrame) -> TemporalResult:
        result = compare_frames(frame, session.previous_frame, self.thresholds)
        # History keeps the raw frame; only the returned frame is smoothed.
        session.previous_frame = frame
        return result
