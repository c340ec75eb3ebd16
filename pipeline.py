import logging
from dataclasses import dataclass
from typing import Optional

from debouncer import DetectionDebouncer
from events import FatalFailure, PersonConfirmed, PresenceListener
from geometry import BoundingBox, bounding_box
from pose_checks.confidence import score_confidence
from pose_checks.person_region import validate_person_region
from pose_checks.structure import check_structure, is_face_only
from pose_checks.temporal import TemporalTracker
from pose_types import PoseFrame
from session import ValidationSession
from thresholds import Thresholds


logger = logging.getLogger(__name__)

MAX_PROCESSING_ERRORS = 10


@dataclass
class FrameOutcome:
    detected: bool
    frame: Optional[PoseFrame] = None
    structure_valid: bool = False
    structure_failure: Optional[str] = None
    face_only: bool = False
    consistency: float = 0.0
    average_movement: float = 0.0
    temporally_consistent: bool = False
    person_region_ok: bool = True
    confidence: float = 0.0
    passed: bool = False
    consecutive_passes: int = 0
    bounding_box: BoundingBox = BoundingBox()
    event: Optional[PersonConfirmed] = None
    fatal: Optional[FatalFailure] = None


class PresencePipeline:
    """Turns one pose frame at a time into a pass/fail decision and confirmation events.

    Stages run in order: structure, temporal tracking, confidence, then the
    debouncer. All per-session state lives in ``self.session``.
    """

    def __init__(
        self,
        thresholds: Thresholds,
        listener: Optional[PresenceListener] = None,
        max_processing_errors: int = MAX_PROCESSING_ERRORS,
    ):
        self.thresholds = thresholds
        self.listener = listener or PresenceListener()
        self.max_processing_errors = max_processing_errors
        self.session = ValidationSession()
        self.tracker = TemporalTracker(thresholds)
        self.debouncer = DetectionDebouncer(thresholds.required_consecutive)

    def process(self, frame: PoseFrame, timestamp: Optional[float] = None, mask=None) -> FrameOutcome:
        if timestamp is None:
            timestamp = frame.timestamp
        try:
            outcome = self._evaluate(frame, timestamp, mask)
        except Exception as exc:
            self._count_error("Frame processing failed", exc)
            self.session.consecutive_passes = 0
            outcome = FrameOutcome(detected=frame.valid, frame=frame)
            self._check_ceiling(outcome)
            return outcome

        if outcome.event is not None and not self._notify(self.listener.on_person_confirmed, outcome.event):
            self._check_ceiling(outcome)
        return outcome

    def _count_error(self, message: str, exc: BaseException) -> None:
        self.session.processing_errors += 1
        logger.warning(
            "%s (%d/%d): %s",
            message,
            self.session.processing_errors,
            self.max_processing_errors,
            exc,
            exc_info=True,
        )

    def _check_ceiling(self, outcome: FrameOutcome) -> None:
        if self.session.processing_errors > self.max_processing_errors:
            outcome.fatal = self.fail("Frame processing failed repeatedly; detection stopped.", "processing")

    def _notify(self, hook, *args) -> bool:
        try:
            hook(*args)
        except Exception as exc:
            self._count_error(f"Listener {hook.__name__} failed", exc)
            return False
        return True

    def _evaluate(self, frame: PoseFrame, timestamp: float, mask) -> FrameOutcome:
        th = self.thresholds
        session = self.session
        session.frames_processed += 1

        if not frame.valid:
            self.debouncer.update(session, False, 0.0, frame, timestamp)
            logger.debug("No pose in frame; run reset")
            return FrameOutcome(detected=False, frame=frame)

        structure = check_structure(frame, th)
        face_only = is_face_only(frame, th)
        temporal = self.tracker.update(session, frame)
        confidence = score_confidence(temporal.frame, structure.valid, temporal.score, th, face_only=face_only)

        structure_ok = structure.valid or (th.hard_reject_structure and face_only)
        region_ok = True
        if th.check_person_region:
            region_mask = mask if mask is not None else frame.segmentation_mask
            region_ok = validate_person_region(frame, region_mask, th.person_region_threshold)

        passed = (
            confidence >= th.confidence_threshold
            and structure_ok
            and temporal.consistent
            and region_ok
        )
        logger.debug(
            "confidence=%.3f structure=%s consistency=%.3f movement=%.3f passed=%s",
            confidence,
            structure.failure or "ok",
            temporal.score,
            temporal.average_movement,
            passed,
        )
        state = self.debouncer.update(session, passed, confidence, temporal.frame, timestamp)

        return FrameOutcome(
            detected=True,
            frame=temporal.frame,
            structure_valid=structure.valid,
            structure_failure=structure.failure,
            face_only=face_only,
            consistency=temporal.score,
            average_movement=temporal.average_movement,
            temporally_consistent=temporal.consistent,
            person_region_ok=region_ok,
            confidence=confidence,
            passed=passed,
            consecutive_passes=state.consecutive_passes,
            bounding_box=bounding_box(temporal.frame.landmarks),
            event=state.event,
        )

    def fail(self, reason: str, source: str) -> FatalFailure:
        failure = FatalFailure(reason=reason, source=source)
        logger.error("Fatal %s failure: %s", source, reason)
        self._notify(self.listener.on_fatal_failure, failure)
        self.reset()
        return failure

    def reset(self) -> None:
        self.session.reset()
        logger.info("Validation session reset")
        self._notify(self.listener.on_session_reset)
