from pose_checks.confidence import score_confidence, weighted_visibility
from pose_checks.person_region import person_pixel_ratio, validate_person_region
from pose_checks.structure import StructureResult, check_structure, is_face_only, torso_length, validate_structure
from pose_checks.temporal import TemporalResult, TemporalTracker, compare_frames

__all__ = [
    "StructureResult",
    "check_structure",
    "validate_structure",
    "is_face_only",
    "torso_length",
    "TemporalResult",
    "TemporalTracker",
    "compare_frames",
    "score_confidence",
    "weighted_visibility",
    "person_pixel_ratio",
    "validate_person_region",
]
