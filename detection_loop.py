import logging
import time
from typing import Callable, Optional

from input_checks import InputFrameGate
from pipeline import FrameOutcome, PresencePipeline
from pose_types import PoseFrame
from recovery import RecoveryKind, RecoveryPolicy


logger = logging.getLogger(__name__)


class PoseEstimator:
    """Interface of the external pose engine: one image in, one ``PoseFrame`` out."""

    def process(self, image, timestamp: float) -> PoseFrame:
        raise NotImplementedError

    def close(self) -> None:
        pass


class DetectionLoop:
    """Feeds camera images through the estimator and the pipeline, one request at a time.

    Estimator failures go through the recovery policy; the loop sleeps, rebuilds
    the estimator, or stops according to the action it returns.
    """

    def __init__(
        self,
        estimator_factory: Callable[[], PoseEstimator],
        pipeline: PresencePipeline,
        policy: Optional[RecoveryPolicy] = None,
        gate: Optional[InputFrameGate] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._factory = estimator_factory
        self.pipeline = pipeline
        self.policy = policy or RecoveryPolicy()
        self.gate = gate or InputFrameGate()
        self._sleep = sleep
        self._estimator: Optional[PoseEstimator] = None
        self.running = False
        self.reinitializations = 0

    def start(self) -> None:
        if self.running:
            return
        if self._estimator is None:
            self._estimator = self._factory()
        self.pipeline.session.reset()
        self.gate.reset()
        self.running = True
        logger.info("Detection started (%s preset)", self.pipeline.thresholds.name)

    def stop(self) -> None:
        if not self.running:
            return
        self.running = False
        self.gate.reset()
        self.pipeline.reset()
        logger.info("Detection stopped")

    def close(self) -> None:
        self.stop()
        if self._estimator is not None:
            self._estimator.close()
            self._estimator = None

    def step(self, image, timestamp: float) -> Optional[FrameOutcome]:
        if not self.running or self._estimator is None:
            return None
        height, width = image.shape[:2]
        if not self.gate.accept(width, height, timestamp):
            return None

        try:
            frame = self._estimator.process(image, timestamp)
        except Exception as exc:
            self._recover(exc)
            return None

        self.policy.on_success(self.pipeline.session)
        outcome = self.pipeline.process(frame, timestamp)
        if outcome.fatal is not None:
            self.running = False
            self.gate.reset()
        return outcome

    def _recover(self, error: Exception) -> None:
        action = self.policy.on_error(self.pipeline.session, error)
        if action.kind is RecoveryKind.FATAL:
            self._fail(action.reason)
        elif action.kind is RecoveryKind.REINITIALIZE:
            self._reinitialize()
        else:
            self._sleep(action.delay)

    def _reinitialize(self) -> None:
        logger.info("Reinitializing pose estimator")
        if self._estimator is not None:
            try:
                self._estimator.close()
            except Exception:
                logger.warning("Closing the pose estimator failed", exc_info=True)
            self._estimator = None
        self._sleep(self.policy.settle_delay)
        try:
            self._estimator = self._factory()
        except Exception as exc:
            self._fail(f"Pose estimator could not be reinitialized: {exc}")
            return
        self.reinitializations += 1
        self.policy.on_reinitialized(self.pipeline.session)
        self._sleep(self.policy.resume_delay)
        logger.info("Pose estimator reinitialized")

    def _fail(self, reason: str) -> None:
        self.running = False
        self.gate.reset()
        self.pipeline.fail(reason, "estimator")
