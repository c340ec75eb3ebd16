from typing import Optional

import numpy as np

from pose_types import CORE_LANDMARKS, PoseFrame


def person_pixel_ratio(
    frame: PoseFrame,
    mask: Optional[np.ndarray],
    radius: int = 20,
    step: int = 5,
    min_visibility: float = 0.5,
) -> Optional[float]:
    """Fraction of mask samples around the core keypoints that belong to the person.

    Returns None when there is no mask to check against.
    """
    if mask is None:
        return None
    mask = np.asarray(mask, dtype=float)
    if mask.ndim == 3:
        mask = mask[..., -1]
    if mask.ndim != 2 or mask.size == 0:
        return None
    height, width = mask.shape
    # Masks arrive either as [0, 1] floats or 8-bit alpha.
    cutoff = 128.0 if mask.max() > 1.0 else 0.5

    offsets = np.arange(-radius, radius + 1, step)
    dx, dy = np.meshgrid(offsets, offsets)
    dx = dx.ravel()
    dy = dy.ravel()

    total = 0
    person = 0
    for part in CORE_LANDMARKS:
        lm = frame.get(part)
        if lm is None or lm.visibility <= min_visibility:
            continue
        xs = int(lm.x * width) + dx
        ys = int(lm.y * height) + dy
        inside = (xs >= 0) & (xs < width) & (ys >= 0) & (ys < height)
        samples = mask[ys[inside], xs[inside]]
        total += int(samples.size)
        person += int(np.count_nonzero(samples >= cutoff))

    return person / total if total else 0.0


def validate_person_region(frame: PoseFrame, mask: Optional[np.ndarray], threshold: float = 0.3) -> bool:
    ratio = person_pixel_ratio(frame, mask)
    if ratio is None:
        return True
    return ratio >= threshold
