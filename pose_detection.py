import logging
from typing import List, Optional

import cv2
import mediapipe as mp
import numpy as np

from detection_loop import PoseEstimator
from errors import EstimatorError, EstimatorUnavailable
from pose_types import NUM_LANDMARKS, Landmark, PoseFrame
from preset_registry import EstimatorOptions


logger = logging.getLogger(__name__)


class PoseDetector(PoseEstimator):
    def __init__(self, options: Optional[EstimatorOptions] = None):
        self.options = options or EstimatorOptions()
        self._mp_pose = mp.solutions.pose
        try:
            self._pose = self._mp_pose.Pose(
                static_image_mode=False,
                model_complexity=self.options.model_complexity,
                smooth_landmarks=self.options.smooth_landmarks,
                enable_segmentation=self.options.enable_segmentation,
                min_detection_confidence=self.options.min_detection_confidence,
                min_tracking_confidence=self.options.min_tracking_confidence,
            )
        except Exception as exc:
            raise EstimatorUnavailable(f"MediaPipe Pose could not be created: {exc}") from exc
        logger.info(
            "MediaPipe Pose ready (complexity=%d, detection=%.2f, tracking=%.2f)",
            self.options.model_complexity,
            self.options.min_detection_confidence,
            self.options.min_tracking_confidence,
        )

    def process(self, frame_bgr, timestamp: float) -> PoseFrame:
        height, width = frame_bgr.shape[:2]
        try:
            frame_rgb = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
            results = self._pose.process(frame_rgb)
        except Exception as exc:
            raise EstimatorError(str(exc)) from exc

        if results.pose_landmarks is None:
            return PoseFrame.empty(timestamp, (width, height))

        landmarks: List[Optional[Landmark]] = [None] * NUM_LANDMARKS
        for idx, lm in enumerate(results.pose_landmarks.landmark[:NUM_LANDMARKS]):
            landmarks[idx] = Landmark(float(lm.x), float(lm.y), float(lm.z), float(lm.visibility))

        mask = getattr(results, "segmentation_mask", None)
        return PoseFrame(
            timestamp=timestamp,
            landmarks=tuple(landmarks),
            image_size=(width, height),
            segmentation_mask=None if mask is None else np.asarray(mask),
        )

    def close(self) -> None:
        if self._pose is not None:
            self._pose.close()
            self._pose = None
            logger.info("MediaPipe Pose closed")
