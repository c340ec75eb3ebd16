from __future__ import annotations

import pytest

from recovery import ErrorCategory, RecoveryKind, RecoveryPolicy, classify_error
from session import ValidationSession


@pytest.mark.parametrize(
    "message, category",
    [
        ("ROI width and height must be > 0", ErrorCategory.ROI),
        ("WebGL: CONTEXT_LOST_WEBGL", ErrorCategory.CONTEXT),
        ("Failed to upload Texture", ErrorCategory.CONTEXT),
        ("GPU context was lost", ErrorCategory.CONTEXT),
        ("graph timed out", ErrorCategory.OTHER),
    ],
)
def test_classify_error(message: str, category: ErrorCategory) -> None:
    assert classify_error(RuntimeError(message)) is category


def test_generic_errors_retry_then_become_fatal() -> None:
    session = ValidationSession()
    policy = RecoveryPolicy()
    actions = [policy.on_error(session, RuntimeError("boom")) for _ in range(6)]

    assert [a.kind for a in actions[:5]] == [RecoveryKind.RETRY] * 5
    assert all(a.delay == pytest.approx(0.1) for a in actions[:5])
    assert actions[5].kind is RecoveryKind.FATAL
    assert "6 times" in actions[5].reason


def test_context_errors_wait_longer() -> None:
    session = ValidationSession()
    action = RecoveryPolicy().on_error(session, RuntimeError("WebGL texture lost"))
    assert action.kind is RecoveryKind.RETRY
    assert action.delay == pytest.approx(0.5)


def test_success_resets_counter() -> None:
    session = ValidationSession()
    policy = RecoveryPolicy()
    for _ in range(5):
        policy.on_error(session, RuntimeError("boom"))
    policy.on_success(session)
    assert session.estimator_errors == 0
    assert policy.on_error(session, RuntimeError("boom")).kind is RecoveryKind.RETRY


def test_roi_streak_reinitializes_once() -> None:
    session = ValidationSession()
    policy = RecoveryPolicy()

    first = policy.on_error(session, RuntimeError("ROI out of bounds"))
    assert first.kind is RecoveryKind.REINITIALIZE
    policy.on_reinitialized(session)
    assert session.estimator_errors == 0

    rest = [policy.on_error(session, RuntimeError("ROI out of bounds")) for _ in range(5)]
    assert [a.kind for a in rest] == [RecoveryKind.RETRY] * 5
    assert session.estimator_errors == 5

    assert policy.on_error(session, RuntimeError("ROI out of bounds")).kind is RecoveryKind.FATAL


def test_new_streak_may_reinitialize_again() -> None:
    session = ValidationSession()
    policy = RecoveryPolicy()
    policy.on_error(session, RuntimeError("ROI"))
    policy.on_reinitialized(session)
    policy.on_success(session)
    assert policy.on_error(session, RuntimeError("ROI")).kind is RecoveryKind.REINITIALIZE
