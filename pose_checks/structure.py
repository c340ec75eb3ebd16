import logging
from dataclasses import dataclass
from typing import Optional, Tuple

from geometry import angle_degrees, mean_y
from pose_types import CORE_LANDMARKS, Landmark, PoseFrame, PoseLandmark as P
from thresholds import Thresholds


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StructureResult:
    valid: bool
    failure: Optional[str] = None
    value: Optional[float] = None


PASSED = StructureResult(True)


def _fail(check: str, value: Optional[float] = None) -> StructureResult:
    if value is None:
        logger.debug("Structure check failed: %s", check)
    else:
        logger.debug("Structure check failed: %s (%.3f)", check, value)
    return StructureResult(False, check, value)


def _within(value: float, bounds: Tuple[float, float]) -> bool:
    low, high = bounds
    return low <= value <= high


def _arm_angle(shoulder: Landmark, elbow: Landmark, wrist: Optional[Landmark]) -> float:
    if wrist is None:
        return 0.0
    return angle_degrees(shoulder, elbow, wrist)


def torso_length(frame: PoseFrame) -> Optional[float]:
    ls, rs = frame.get(P.LEFT_SHOULDER), frame.get(P.RIGHT_SHOULDER)
    lh, rh = frame.get(P.LEFT_HIP), frame.get(P.RIGHT_HIP)
    if ls is None or rs is None or lh is None or rh is None:
        return None
    return abs(mean_y(ls, rs) - mean_y(lh, rh))


def is_face_only(frame: PoseFrame, thresholds: Thresholds) -> bool:
    # A collapsed torso means the body below the head is out of view.
    length = torso_length(frame)
    return length is not None and length < thresholds.face_only_torso_max


def check_structure(frame: PoseFrame, thresholds: Thresholds) -> StructureResult:
    """Check that a frame is geometrically consistent with a human body.

    Sub-checks run in a fixed order and the first failure is reported; the
    result names the failing check and the measured value for logging.
    """
    for part in CORE_LANDMARKS:
        lm = frame.get(part)
        if lm is None:
            return _fail(f"missing_{part.name.lower()}")
        if lm.visibility < thresholds.required_visibility:
            return _fail(f"low_visibility_{part.name.lower()}", lm.visibility)

    nose = frame[P.NOSE]
    ls, rs = frame[P.LEFT_SHOULDER], frame[P.RIGHT_SHOULDER]
    lh, rh = frame[P.LEFT_HIP], frame[P.RIGHT_HIP]

    shoulder_width = abs(ls.x - rs.x)
    if not _within(shoulder_width, thresholds.shoulder_width_range):
        return _fail("shoulder_width", shoulder_width)

    hip_width = abs(lh.x - rh.x)
    if not _within(hip_width, thresholds.hip_width_range):
        return _fail("hip_width", hip_width)

    if thresholds.shoulder_hip_ratio_range is not None:
        if hip_width <= 0:
            return _fail("shoulder_hip_ratio")
        ratio = shoulder_width / hip_width
        if not _within(ratio, thresholds.shoulder_hip_ratio_range):
            return _fail("shoulder_hip_ratio", ratio)

    shoulder_y = mean_y(ls, rs)
    torso = abs(shoulder_y - mean_y(lh, rh))
    if not _within(torso, thresholds.torso_length_range):
        return _fail("torso_length", torso)

    if nose.y > shoulder_y + thresholds.head_margin:
        return _fail("head_below_shoulders", nose.y - shoulder_y)

    shoulder_tilt = abs(ls.y - rs.y)
    if shoulder_tilt > thresholds.shoulder_symmetry_margin:
        return _fail("shoulder_symmetry", shoulder_tilt)
    hip_tilt = abs(lh.y - rh.y)
    if hip_tilt > thresholds.hip_symmetry_margin:
        return _fail("hip_symmetry", hip_tilt)

    if thresholds.check_elbow_angles:
        le, re = frame.get(P.LEFT_ELBOW), frame.get(P.RIGHT_ELBOW)
        if le is not None and re is not None:
            left = _arm_angle(ls, le, frame.get(P.LEFT_WRIST))
            right = _arm_angle(rs, re, frame.get(P.RIGHT_WRIST))
            # One straight arm is fine; both locked straight is not.
            if left > thresholds.straight_arm_angle and right > thresholds.straight_arm_angle:
                return _fail("straight_arms", min(left, right))

    if thresholds.check_leg_symmetry:
        lk, rk = frame.get(P.LEFT_KNEE), frame.get(P.RIGHT_KNEE)
        if lk is not None and rk is not None:
            left_leg = abs(lh.y - lk.y)
            right_leg = abs(rh.y - rk.y)
            longer = max(left_leg, right_leg)
            if longer > 1e-6:
                leg_ratio = min(left_leg, right_leg) / longer
                if leg_ratio < thresholds.min_leg_ratio:
                    return _fail("leg_symmetry", leg_ratio)

    return PASSED


def validate_structure(frame: PoseFrame, thresholds: Thresholds) -> bool:
    return check_structure(frame, thresholds).valid
