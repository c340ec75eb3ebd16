from __future__ import annotations

from dataclasses import replace

import pytest

from pose_checks.structure import check_structure, is_face_only, torso_length, validate_structure
from pose_types import Landmark, PoseLandmark as P
from thresholds import LENIENT, STRICT

from conftest import core_person, make_frame, upright_person


def test_upright_person_passes_both_presets() -> None:
    frame = make_frame(upright_person())
    assert validate_structure(frame, STRICT)
    assert validate_structure(frame, LENIENT)


def test_lenient_core_scenario_is_plausible() -> None:
    assert validate_structure(make_frame(core_person()), LENIENT)


@pytest.mark.parametrize("part", [P.NOSE, P.LEFT_SHOULDER, P.RIGHT_HIP])
def test_missing_required_landmark_fails_closed(part: P) -> None:
    parts = upright_person()
    del parts[part]
    result = check_structure(make_frame(parts), STRICT)
    assert not result.valid
    assert result.failure == f"missing_{part.name.lower()}"


def test_low_visibility_required_landmark_fails() -> None:
    parts = upright_person()
    parts[P.LEFT_HIP] = replace(parts[P.LEFT_HIP], visibility=0.4)
    result = check_structure(make_frame(parts), STRICT)
    assert result.failure == "low_visibility_left_hip"


def test_shoulder_width_out_of_range() -> None:
    parts = upright_person()
    parts[P.LEFT_SHOULDER] = replace(parts[P.LEFT_SHOULDER], x=0.42)
    result = check_structure(make_frame(parts), STRICT)
    assert result.failure == "shoulder_width"


def test_shoulder_hip_ratio_only_checked_in_strict() -> None:
    parts = upright_person()
    # Shoulder width 0.2 over hip width 0.05 gives a ratio of 4.
    parts[P.LEFT_HIP] = replace(parts[P.LEFT_HIP], x=0.525)
    parts[P.RIGHT_HIP] = replace(parts[P.RIGHT_HIP], x=0.475)
    frame = make_frame(parts)
    assert check_structure(frame, STRICT).failure == "shoulder_hip_ratio"
    assert validate_structure(frame, LENIENT)


def test_torso_too_short_in_strict() -> None:
    parts = upright_person()
    parts[P.LEFT_HIP] = replace(parts[P.LEFT_HIP], y=0.38)
    parts[P.RIGHT_HIP] = replace(parts[P.RIGHT_HIP], y=0.38)
    assert check_structure(make_frame(parts), STRICT).failure == "torso_length"


def test_head_margin_differs_between_presets() -> None:
    parts = upright_person()
    # Nose level with the shoulder line.
    parts[P.NOSE] = replace(parts[P.NOSE], y=0.35)
    frame = make_frame(parts)
    assert check_structure(frame, STRICT).failure == "head_below_shoulders"
    assert validate_structure(frame, LENIENT)


def test_shoulder_symmetry_margin() -> None:
    parts = upright_person()
    parts[P.LEFT_SHOULDER] = replace(parts[P.LEFT_SHOULDER], y=0.52)
    parts[P.NOSE] = replace(parts[P.NOSE], y=0.1)
    assert check_structure(make_frame(parts), STRICT).failure == "shoulder_symmetry"


def test_hip_symmetry_margin() -> None:
    parts = upright_person()
    parts[P.LEFT_HIP] = replace(parts[P.LEFT_HIP], y=0.82)
    frame = make_frame(parts)
    assert check_structure(frame, STRICT).failure == "hip_symmetry"
    assert check_structure(frame, STRICT).value == pytest.approx(0.17)
    assert validate_structure(frame, LENIENT)

    parts[P.LEFT_HIP] = replace(parts[P.LEFT_HIP], y=0.88)
    assert check_structure(make_frame(parts), LENIENT).failure == "hip_symmetry"


def test_two_straight_arms_rejected_in_strict_only() -> None:
    parts = upright_person()
    parts[P.LEFT_ELBOW] = Landmark(0.6, 0.5, 0.0, 0.9)
    parts[P.LEFT_WRIST] = Landmark(0.6, 0.65, 0.0, 0.9)
    parts[P.RIGHT_ELBOW] = Landmark(0.4, 0.5, 0.0, 0.9)
    parts[P.RIGHT_WRIST] = Landmark(0.4, 0.65, 0.0, 0.9)
    frame = make_frame(parts)
    assert check_structure(frame, STRICT).failure == "straight_arms"
    assert validate_structure(frame, LENIENT)


def test_one_straight_arm_is_fine() -> None:
    parts = upright_person()
    parts[P.LEFT_ELBOW] = Landmark(0.6, 0.5, 0.0, 0.9)
    parts[P.LEFT_WRIST] = Landmark(0.6, 0.65, 0.0, 0.9)
    assert validate_structure(make_frame(parts), STRICT)


def test_leg_length_asymmetry_rejected_in_strict() -> None:
    parts = upright_person()
    parts[P.RIGHT_KNEE] = replace(parts[P.RIGHT_KNEE], y=0.7)
    result = check_structure(make_frame(parts), STRICT)
    assert result.failure == "leg_symmetry"
    assert result.value == pytest.approx(0.25)


def test_leg_check_skipped_without_both_knees() -> None:
    parts = upright_person()
    del parts[P.RIGHT_KNEE]
    assert validate_structure(make_frame(parts), STRICT)


def test_face_only_classification() -> None:
    parts = core_person()
    assert torso_length(make_frame(parts)) == pytest.approx(0.3)
    assert not is_face_only(make_frame(parts), LENIENT)

    parts[P.LEFT_HIP] = replace(parts[P.LEFT_HIP], y=0.35)
    parts[P.RIGHT_HIP] = replace(parts[P.RIGHT_HIP], y=0.35)
    assert is_face_only(make_frame(parts), LENIENT)


def test_face_only_needs_torso_landmarks() -> None:
    parts = core_person()
    del parts[P.LEFT_HIP]
    assert torso_length(make_frame(parts)) is None
    assert not is_face_only(make_frame(parts), LENIENT)
