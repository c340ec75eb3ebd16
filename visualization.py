from typing import List, Tuple

import cv2

from geometry import BoundingBox
from pose_types import POSE_CONNECTIONS, Landmark, PoseFrame


SKELETON_COLOR = (0, 255, 0)
KEYPOINT_COLOR = (0, 0, 255)
CONFIRMED_COLOR = (0, 255, 180)


def _to_pixel(lm: Landmark, image_size: Tuple[int, int]) -> Tuple[int, int]:
    width, height = image_size
    return int(lm.x * width), int(lm.y * height)


def draw_pose(frame, pose: PoseFrame, min_visibility: float = 0.5) -> None:
    if not pose.valid:
        return
    height, width = frame.shape[:2]
    size = (width, height)

    for a, b in POSE_CONNECTIONS:
        lm_a = pose.get(a)
        lm_b = pose.get(b)
        if lm_a is None or lm_b is None:
            continue
        cv2.line(frame, _to_pixel(lm_a, size), _to_pixel(lm_b, size), SKELETON_COLOR, 2)

    for _, lm in pose.items():
        if lm is None or lm.visibility <= min_visibility:
            continue
        cv2.circle(frame, _to_pixel(lm, size), 5, KEYPOINT_COLOR, -1)


def draw_bounding_box(frame, box: BoundingBox, color=CONFIRMED_COLOR) -> None:
    if box.width <= 0 or box.height <= 0:
        return
    height, width = frame.shape[:2]
    top_left = (int(box.min_x * width), int(box.min_y * height))
    bottom_right = (int(box.max_x * width), int(box.max_y * height))
    cv2.rectangle(frame, top_left, bottom_right, color, 2)


def draw_status_panel(frame, lines: List[str], origin=(10, 30)) -> None:
    x, y = origin
    for line in lines:
        cv2.putText(frame, line, (x, y), cv2.FONT_HERSHEY_SIMPLEX, 0.7, (255, 255, 255), 2)
        y += 28
