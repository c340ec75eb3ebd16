from dataclasses import dataclass
from typing import Optional, Tuple

from errors import ConfigError
from pose_types import PoseLandmark


Range = Tuple[float, float]

CORE_WEIGHTS: Tuple[Tuple[PoseLandmark, float], ...] = (
    (PoseLandmark.NOSE, 1.0),
    (PoseLandmark.LEFT_SHOULDER, 1.0),
    (PoseLandmark.RIGHT_SHOULDER, 1.0),
    (PoseLandmark.LEFT_HIP, 1.0),
    (PoseLandmark.RIGHT_HIP, 1.0),
)

UPPER_BODY_WEIGHTS: Tuple[Tuple[PoseLandmark, float], ...] = (
    (PoseLandmark.NOSE, 1.5),
    (PoseLandmark.LEFT_SHOULDER, 1.0),
    (PoseLandmark.RIGHT_SHOULDER, 1.0),
    (PoseLandmark.LEFT_HIP, 0.8),
    (PoseLandmark.RIGHT_HIP, 0.8),
    (PoseLandmark.LEFT_ELBOW, 0.5),
    (PoseLandmark.RIGHT_ELBOW, 0.5),
    (PoseLandmark.LEFT_WRIST, 0.3),
    (PoseLandmark.RIGHT_WRIST, 0.3),
)

CORE_TRACKED: Tuple[PoseLandmark, ...] = tuple(part for part, _ in CORE_WEIGHTS)
UPPER_BODY_TRACKED: Tuple[PoseLandmark, ...] = tuple(part for part, _ in UPPER_BODY_WEIGHTS)


@dataclass(frozen=True)
class Thresholds:
    name: str

    # Confidence scoring.
    confidence_threshold: float = 0.5
    keypoint_weights: Tuple[Tuple[PoseLandmark, float], ...] = UPPER_BODY_WEIGHTS
    keypoint_visibility_floor: float = 0.3
    min_visible_keypoints: int = 3
    structural_penalty: float = 0.7
    hard_reject_structure: bool = False
    face_only_torso_max: float = 0.08
    consistency_penalty_below: float = 0.5

    # Structural plausibility.
    required_visibility: float = 0.5
    shoulder_width_range: Range = (0.05, 0.8)
    hip_width_range: Range = (0.04, 0.6)
    shoulder_hip_ratio_range: Optional[Range] = (0.8, 2.5)
    torso_length_range: Range = (0.05, 1.2)
    head_margin: float = -0.02
    shoulder_symmetry_margin: float = 0.15
    hip_symmetry_margin: float = 0.15
    check_elbow_angles: bool = True
    straight_arm_angle: float = 170.0
    check_leg_symmetry: bool = True
    min_leg_ratio: float = 0.7

    # Temporal consistency.
    tracked_keypoints: Tuple[PoseLandmark, ...] = UPPER_BODY_TRACKED
    movement_visibility_floor: float = 0.5
    max_movement: float = 0.4
    min_consistency: float = 0.6
    movement_penalty_score: float = 0.5
    smoothing_factor: float = 0.3

    # Person-region check against the segmentation mask.
    check_person_region: bool = False
    person_region_threshold: float = 0.3

    # Debounce and capture.
    required_consecutive: int = 3
    rearm_seconds: float = 2.0

    def validate(self) -> "Thresholds":
        for label, (low, high) in (
            ("shoulder_width_range", self.shoulder_width_range),
            ("hip_width_range", self.hip_width_range),
            ("torso_length_range", self.torso_length_range),
        ):
            if low < 0 or low > high:
                raise ConfigError(f"{self.name}: invalid {label} ({low}, {high})")
        if self.shoulder_hip_ratio_range is not None:
            low, high = self.shoulder_hip_ratio_range
            if low <= 0 or low > high:
                raise ConfigError(f"{self.name}: invalid shoulder_hip_ratio_range ({low}, {high})")
        for label, value in (
            ("confidence_threshold", self.confidence_threshold),
            ("smoothing_factor", self.smoothing_factor),
            ("structural_penalty", self.structural_penalty),
            ("keypoint_visibility_floor", self.keypoint_visibility_floor),
            ("required_visibility", self.required_visibility),
            ("person_region_threshold", self.person_region_threshold),
        ):
            if not 0.0 <= value <= 1.0:
                raise ConfigError(f"{self.name}: {label} must be within [0, 1], got {value}")
        if any(weight <= 0 for _, weight in self.keypoint_weights):
            raise ConfigError(f"{self.name}: keypoint weights must be positive")
        if self.max_movement <= 0:
            raise ConfigError(f"{self.name}: max_movement must be positive")
        if self.required_consecutive < 1:
            raise ConfigError(f"{self.name}: required_consecutive must be at least 1")
        if self.min_visible_keypoints < 0:
            raise ConfigError(f"{self.name}: min_visible_keypoints must not be negative")
        if self.rearm_seconds < 0:
            raise ConfigError(f"{self.name}: rearm_seconds must not be negative")
        return self


LENIENT = Thresholds(
    name="lenient",
    keypoint_weights=CORE_WEIGHTS,
    keypoint_visibility_floor=0.5,
    hard_reject_structure=True,
    shoulder_width_range=(0.03, 0.6),
    hip_width_range=(0.02, 0.5),
    shoulder_hip_ratio_range=None,
    torso_length_range=(0.03, 1.2),
    head_margin=0.15,
    shoulder_symmetry_margin=0.2,
    hip_symmetry_margin=0.2,
    check_elbow_angles=False,
    check_leg_symmetry=False,
    tracked_keypoints=CORE_TRACKED,
)

STRICT = Thresholds(name="strict")
