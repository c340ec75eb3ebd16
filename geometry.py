import math
from dataclasses import dataclass
from typing import Iterable, Optional

from pose_types import Landmark


@dataclass(frozen=True)
class BoundingBox:
    min_x: float = 0.0
    min_y: float = 0.0
    max_x: float = 0.0
    max_y: float = 0.0

    @property
    def width(self) -> float:
        return self.max_x - self.min_x

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def distance_2d(a: Landmark, b: Landmark) -> float:
    return math.hypot(a.x - b.x, a.y - b.y)


def angle_degrees(a: Landmark, b: Landmark, c: Landmark) -> float:
    # Angle at b formed by vectors (a - b) and (c - b).
    # Using dot product: angle = acos((u.v)/(|u||v|)).
    bax = a.x - b.x
    bay = a.y - b.y
    bcx = c.x - b.x
    bcy = c.y - b.y

    dot = bax * bcx + bay * bcy
    mag_ba = math.hypot(bax, bay)
    mag_bc = math.hypot(bcx, bcy)
    if mag_ba < 1e-6 or mag_bc < 1e-6:
        return 0.0
    cos_theta = max(-1.0, min(1.0, dot / (mag_ba * mag_bc)))
    return math.degrees(math.acos(cos_theta))


def mean_y(a: Landmark, b: Landmark) -> float:
    return (a.y + b.y) / 2.0


def bounding_box(landmarks: Iterable[Optional[Landmark]], min_visibility: float = 0.5) -> BoundingBox:
    visible = [lm for lm in landmarks if lm is not None and lm.visibility > min_visibility]
    if not visible:
        return BoundingBox()
    xs = [lm.x for lm in visible]
    ys = [lm.y for lm in visible]
    return BoundingBox(min(xs), min(ys), max(xs), max(ys))
