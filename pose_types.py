from dataclasses import dataclass, field, replace
from enum import IntEnum
from typing import Dict, Iterator, Optional, Sequence, Tuple


NUM_LANDMARKS = 33


class PoseLandmark(IntEnum):
    # Slot order follows the MediaPipe BlazePose topology.
    NOSE = 0
    LEFT_EYE_INNER = 1
    LEFT_EYE = 2
    LEFT_EYE_OUTER = 3
    RIGHT_EYE_INNER = 4
    RIGHT_EYE = 5
    RIGHT_EYE_OUTER = 6
    LEFT_EAR = 7
    RIGHT_EAR = 8
    MOUTH_LEFT = 9
    MOUTH_RIGHT = 10
    LEFT_SHOULDER = 11
    RIGHT_SHOULDER = 12
    LEFT_ELBOW = 13
    RIGHT_ELBOW = 14
    LEFT_WRIST = 15
    RIGHT_WRIST = 16
    LEFT_PINKY = 17
    RIGHT_PINKY = 18
    LEFT_INDEX = 19
    RIGHT_INDEX = 20
    LEFT_THUMB = 21
    RIGHT_THUMB = 22
    LEFT_HIP = 23
    RIGHT_HIP = 24
    LEFT_KNEE = 25
    RIGHT_KNEE = 26
    LEFT_ANKLE = 27
    RIGHT_ANKLE = 28
    LEFT_HEEL = 29
    RIGHT_HEEL = 30
    LEFT_FOOT_INDEX = 31
    RIGHT_FOOT_INDEX = 32


CORE_LANDMARKS: Tuple[PoseLandmark, ...] = (
    PoseLandmark.NOSE,
    PoseLandmark.LEFT_SHOULDER,
    PoseLandmark.RIGHT_SHOULDER,
    PoseLandmark.LEFT_HIP,
    PoseLandmark.RIGHT_HIP,
)

POSE_CONNECTIONS: Tuple[Tuple[PoseLandmark, PoseLandmark], ...] = (
    (PoseLandmark.LEFT_SHOULDER, PoseLandmark.RIGHT_SHOULDER),
    (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_ELBOW),
    (PoseLandmark.LEFT_ELBOW, PoseLandmark.LEFT_WRIST),
    (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_ELBOW),
    (PoseLandmark.RIGHT_ELBOW, PoseLandmark.RIGHT_WRIST),
    (PoseLandmark.LEFT_SHOULDER, PoseLandmark.LEFT_HIP),
    (PoseLandmark.RIGHT_SHOULDER, PoseLandmark.RIGHT_HIP),
    (PoseLandmark.LEFT_HIP, PoseLandmark.RIGHT_HIP),
    (PoseLandmark.LEFT_HIP, PoseLandmark.LEFT_KNEE),
    (PoseLandmark.LEFT_KNEE, PoseLandmark.LEFT_ANKLE),
    (PoseLandmark.RIGHT_HIP, PoseLandmark.RIGHT_KNEE),
    (PoseLandmark.RIGHT_KNEE, PoseLandmark.RIGHT_ANKLE),
)


@dataclass(frozen=True)
class Landmark:
    x: float
    y: float
    z: float = 0.0
    visibility: float = 0.0


@dataclass(frozen=True)
class PoseFrame:
    """One estimator result: 33 optional landmark slots indexed by ``PoseLandmark``.

    ``landmarks`` is empty when the estimator reported no detection. An absent
    body part is ``None`` in its slot, never a zeroed landmark.
    """

    timestamp: float
    landmarks: Tuple[Optional[Landmark], ...] = ()
    image_size: Tuple[int, int] = (0, 0)
    segmentation_mask: Optional[object] = field(default=None, compare=False, repr=False)

    def __post_init__(self) -> None:
        if self.landmarks and len(self.landmarks) != NUM_LANDMARKS:
            raise ValueError(f"Expected {NUM_LANDMARKS} landmark slots, got {len(self.landmarks)}")

    @property
    def valid(self) -> bool:
        return bool(self.landmarks)

    def get(self, part: PoseLandmark) -> Optional[Landmark]:
        if not self.landmarks:
            return None
        return self.landmarks[part]

    def __getitem__(self, part: PoseLandmark) -> Optional[Landmark]:
        return self.get(part)

    def items(self) -> Iterator[Tuple[PoseLandmark, Optional[Landmark]]]:
        for part in PoseLandmark:
            yield part, self.get(part)

    def with_landmarks(self, landmarks: Sequence[Optional[Landmark]]) -> "PoseFrame":
        return replace(self, landmarks=tuple(landmarks))

    @classmethod
    def empty(cls, timestamp: float, image_size: Tuple[int, int] = (0, 0)) -> "PoseFrame":
        return cls(timestamp=timestamp, image_size=image_size)

    @classmethod
    def from_parts(
        cls,
        timestamp: float,
        parts: Dict[PoseLandmark, Landmark],
        image_size: Tuple[int, int] = (0, 0),
    ) -> "PoseFrame":
        slots: list = [None] * NUM_LANDMARKS
        for part, lm in parts.items():
            slots[int(part)] = lm
        return cls(timestamp=timestamp, landmarks=tuple(slots), image_size=image_size)
