import logging
from typing import Optional, Tuple

from pose_types import PoseFrame
from thresholds import Thresholds

from pose_checks.structure import is_face_only


logger = logging.getLogger(__name__)


def weighted_visibility(frame: PoseFrame, thresholds: Thresholds) -> Tuple[float, float, int]:
    """Return (weighted score, total weight, visible count) over the weighted keypoints.

    Every present keypoint adds its weight to the total; only keypoints above
    the visibility floor add ``visibility * weight`` to the score.
    """
    score = 0.0
    total = 0.0
    visible = 0
    for part, weight in thresholds.keypoint_weights:
        lm = frame.get(part)
        if lm is None:
            continue
        if lm.visibility > thresholds.keypoint_visibility_floor:
            score += lm.visibility * weight
            visible += 1
        total += weight
    return score, total, visible


def score_confidence(
    frame: PoseFrame,
    structure_valid: bool,
    consistency: float,
    thresholds: Thresholds,
    face_only: Optional[bool] = None,
) -> float:
    score, total, visible = weighted_visibility(frame, thresholds)
    if visible < thresholds.min_visible_keypoints:
        logger.debug("Only %d keypoints visible (need %d)", visible, thresholds.min_visible_keypoints)
        return 0.0

    if not structure_valid:
        if thresholds.hard_reject_structure:
            if face_only is None:
                face_only = is_face_only(frame, thresholds)
            if not face_only:
                return 0.0
        else:
            score *= thresholds.structural_penalty

    if consistency < thresholds.consistency_penalty_below:
        score *= consistency

    if total <= 0.0:
        return 0.0
    return max(0.0, min(1.0, score / total))
