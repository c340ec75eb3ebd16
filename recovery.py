import logging
from dataclasses import dataclass
from enum import Enum

from session import ValidationSession


logger = logging.getLogger(__name__)

MAX_CONSECUTIVE_ERRORS = 5
RETRY_DELAY_SECONDS = 0.1
CONTEXT_RETRY_DELAY_SECONDS = 0.5
REINIT_SETTLE_SECONDS = 1.0
REINIT_RESUME_SECONDS = 0.5


class ErrorCategory(Enum):
    ROI = "roi"
    CONTEXT = "context"
    OTHER = "other"


class RecoveryKind(Enum):
    RETRY = "retry"
    REINITIALIZE = "reinitialize"
    FATAL = "fatal"


@dataclass(frozen=True)
class RecoveryAction:
    kind: RecoveryKind
    delay: float = 0.0
    category: ErrorCategory = ErrorCategory.OTHER
    reason: str = ""


def classify_error(error: BaseException) -> ErrorCategory:
    message = str(error)
    if "ROI" in message:
        return ErrorCategory.ROI
    lowered = message.lower()
    if "WebGL" in message or "texture" in lowered or "context" in lowered:
        return ErrorCategory.CONTEXT
    return ErrorCategory.OTHER


class RecoveryPolicy:
    def __init__(
        self,
        max_errors: int = MAX_CONSECUTIVE_ERRORS,
        retry_delay: float = RETRY_DELAY_SECONDS,
        context_delay: float = CONTEXT_RETRY_DELAY_SECONDS,
        settle_delay: float = REINIT_SETTLE_SECONDS,
        resume_delay: float = REINIT_RESUME_SECONDS,
    ):
        self.max_errors = max_errors
        self.retry_delay = retry_delay
        self.context_delay = context_delay
        self.settle_delay = settle_delay
        self.resume_delay = resume_delay

    def on_success(self, session: ValidationSession) -> None:
        if session.estimator_errors:
            logger.info("Estimator recovered after %d errors", session.estimator_errors)
        session.estimator_errors = 0
        session.reinitialized_in_streak = False

    def on_error(self, session: ValidationSession, error: BaseException) -> RecoveryAction:
        session.estimator_errors += 1
        category = classify_error(error)
        logger.warning(
            "Estimator error %d/%d (%s): %s",
            session.estimator_errors,
            self.max_errors,
            category.value,
            error,
        )

        # Only the first ROI failure of a streak earns a rebuild.
        if category is ErrorCategory.ROI and not session.reinitialized_in_streak:
            session.reinitialized_in_streak = True
            return RecoveryAction(RecoveryKind.REINITIALIZE, self.settle_delay, category)

        if session.estimator_errors > self.max_errors:
            reason = f"Pose estimator failed {session.estimator_errors} times in a row: {error}"
            logger.error(reason)
            return RecoveryAction(RecoveryKind.FATAL, 0.0, category, reason)

        if category is ErrorCategory.CONTEXT:
            return RecoveryAction(RecoveryKind.RETRY, self.context_delay, category)
        return RecoveryAction(RecoveryKind.RETRY, self.retry_delay, category)

    def on_reinitialized(self, session: ValidationSession) -> None:
        session.estimator_errors = 0
