from __future__ import annotations

import numpy as np
import pytest

from pose_checks.person_region import person_pixel_ratio, validate_person_region

from conftest import make_frame, upright_person


def test_no_mask_passes() -> None:
    frame = make_frame(upright_person())
    assert person_pixel_ratio(frame, None) is None
    assert validate_person_region(frame, None)


def test_float_mask_ratio() -> None:
    frame = make_frame(upright_person())
    assert person_pixel_ratio(frame, np.ones((480, 640), dtype=np.float32)) == pytest.approx(1.0)
    assert person_pixel_ratio(frame, np.zeros((480, 640), dtype=np.float32)) == 0.0


def test_uint8_mask_uses_alpha_cutoff() -> None:
    frame = make_frame(upright_person())
    mask = np.full((480, 640), 200, dtype=np.uint8)
    assert validate_person_region(frame, mask)
    mask[:] = 100
    assert not validate_person_region(frame, mask)


def test_partial_mask_against_threshold() -> None:
    frame = make_frame(upright_person())
    mask = np.zeros((480, 640), dtype=np.float32)
    # Person occupies only the left half of the image.
    mask[:, :320] = 1.0
    ratio = person_pixel_ratio(frame, mask)
    assert 0.3 < ratio < 0.7
    assert validate_person_region(frame, mask, threshold=0.3)
    assert not validate_person_region(frame, mask, threshold=0.8)


def test_invisible_keypoints_are_not_sampled() -> None:
    frame = make_frame(upright_person(visibility=0.2))
    assert person_pixel_ratio(frame, np.ones((480, 640))) == 0.0
