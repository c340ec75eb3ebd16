from dataclasses import dataclass
from typing import List

from errors import ConfigError
from thresholds import LENIENT, STRICT, Thresholds


DEFAULT_PRESET = "strict"


@dataclass(frozen=True)
class EstimatorOptions:
    min_detection_confidence: float = 0.5
    min_tracking_confidence: float = 0.5
    model_complexity: int = 1
    smooth_landmarks: bool = True
    enable_segmentation: bool = False


@dataclass(frozen=True)
class PresetEntry:
    name: str
    thresholds: Thresholds
    estimator: EstimatorOptions
    description: str


def get_preset_entries() -> List[PresetEntry]:
    return [
        PresetEntry(
            "lenient",
            LENIENT,
            EstimatorOptions(),
            "Core five keypoints, hard structural reject with a face-only waiver",
        ),
        PresetEntry(
            "strict",
            STRICT,
            EstimatorOptions(
                min_detection_confidence=0.6,
                min_tracking_confidence=0.6,
                model_complexity=2,
                enable_segmentation=True,
            ),
            "Weighted upper body, joint-angle and leg-symmetry checks",
        ),
    ]


def get_preset(name: str) -> PresetEntry:
    key = name.strip().lower()
    for entry in get_preset_entries():
        if entry.name == key:
            return entry
    names = ", ".join(entry.name for entry in get_preset_entries())
    raise ConfigError(f"Unknown preset '{name}' (expected one of: {names})")
