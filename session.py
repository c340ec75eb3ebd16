from dataclasses import dataclass
from typing import Optional

from pose_types import PoseFrame


@dataclass
class ValidationSession:
    """State for one detection session. Every stage reads and writes it through the pipeline."""

    previous_frame: Optional[PoseFrame] = None
    consecutive_passes: int = 0
    last_confirmed_at: Optional[float] = None
    estimator_errors: int = 0
    reinitialized_in_streak: bool = False
    processing_errors: int = 0
    frames_processed: int = 0

    def reset(self) -> None:
        self.previous_frame = None
        self.consecutive_passes = 0
        self.last_confirmed_at = None
        self.estimator_errors = 0
        self.reinitialized_in_streak = False
        self.processing_errors = 0
        self.frames_processed = 0
