import argparse
import logging
import time
from pathlib import Path
from typing import List, Optional

import cv2
import numpy as np

from camera import CameraStream
from capture import CaptureThrottle
from config import configure_logging, load_config
from detection_loop import DetectionLoop
from errors import PresenceGateError
from events import FatalFailure, PersonConfirmed, PresenceListener
from pipeline import PresencePipeline
from pose_detection import PoseDetector
from visualization import draw_bounding_box, draw_pose, draw_status_panel


logger = logging.getLogger(__name__)

WINDOW_NAME = "Presence Gate"
MAX_CAMERA_FAILURES = 50
CAMERA_RETRY_SECONDS = 0.1


class CaptureListener(PresenceListener):
    def __init__(self, throttle: CaptureThrottle, capture_dir: Optional[Path] = None):
        self.throttle = throttle
        self.capture_dir = capture_dir
        self.current_image = None
        self.capture_count = 0
        self.fatal: Optional[FatalFailure] = None

    def on_person_confirmed(self, event: PersonConfirmed) -> None:
        if not self.throttle.offer(event):
            return
        self.capture_count += 1
        logger.info("Capture %d (confidence %.1f%%)", self.capture_count, event.confidence * 100.0)
        if self.capture_dir is None or self.current_image is None:
            return
        self.capture_dir.mkdir(parents=True, exist_ok=True)
        path = self.capture_dir / f"person_{int(event.timestamp * 1000)}.jpg"
        if not cv2.imwrite(str(path), self.current_image, [cv2.IMWRITE_JPEG_QUALITY, 90]):
            logger.warning("Could not write capture to %s", path)

    def on_session_reset(self) -> None:
        self.throttle.reset()

    def on_fatal_failure(self, failure: FatalFailure) -> None:
        self.fatal = failure


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Confirm a stably present person from a live pose stream.")
    parser.add_argument("--preset", choices=["lenient", "strict"], default=None)
    parser.add_argument("--camera", type=int, default=None, help="Camera index")
    parser.add_argument("--capture-dir", type=Path, default=None, help="Save confirmed frames here")
    parser.add_argument("--no-window", action="store_true", help="Run without the preview window")
    parser.add_argument("--log-level", default=None)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    try:
        config = load_config(args.preset)
    except PresenceGateError as exc:
        print(f"Error: {exc}")
        return 2
    configure_logging(args.log_level or config.log_level)

    throttle = CaptureThrottle(config.thresholds.rearm_seconds, enabled=config.auto_capture)
    listener = CaptureListener(throttle, args.capture_dir)
    pipeline = PresencePipeline(config.thresholds, listener=listener)
    loop = DetectionLoop(lambda: PoseDetector(config.estimator), pipeline)
    camera = CameraStream(camera_index=config.camera_index if args.camera is None else args.camera)
    show_window = not args.no_window

    try:
        camera.open()
        loop.start()
    except PresenceGateError as exc:
        logger.error("%s", exc)
        camera.release()
        return 1

    if show_window:
        cv2.namedWindow(WINDOW_NAME, cv2.WINDOW_NORMAL)
    camera_failures = 0
    return_code = 0
    try:
        while loop.running:
            cam_frame = camera.read()
            if not cam_frame.ok:
                camera_failures += 1
                if camera_failures > MAX_CAMERA_FAILURES:
                    logger.error("Camera returned no frames %d times in a row; stopping", camera_failures)
                    return_code = 1
                    break
                if show_window:
                    blank = np.zeros((480, 640, 3), dtype=np.uint8)
                    draw_status_panel(blank, ["Camera error"])
                    cv2.imshow(WINDOW_NAME, blank)
                    if cv2.waitKey(1) & 0xFF == ord("q"):
                        break
                time.sleep(CAMERA_RETRY_SECONDS)
                continue
            camera_failures = 0
            image = cam_frame.frame
            listener.current_image = image.copy()
            outcome = loop.step(image, cam_frame.timestamp)
            if not show_window:
                continue

            lines = [f"Preset: {config.preset}", f"Captures: {listener.capture_count}"]
            if outcome is not None and outcome.detected:
                draw_pose(image, outcome.frame)
                if outcome.passed:
                    draw_bounding_box(image, outcome.bounding_box)
                lines.append(f"Confidence: {outcome.confidence:.2f}")
                lines.append(f"Run: {outcome.consecutive_passes}/{config.thresholds.required_consecutive}")
                if outcome.structure_failure:
                    lines.append(f"Structure: {outcome.structure_failure}")
            draw_status_panel(image, lines)
            cv2.imshow(WINDOW_NAME, image)
            if cv2.waitKey(1) & 0xFF == ord("q"):
                break
    except KeyboardInterrupt:
        logger.info("Interrupted")
    finally:
        loop.close()
        camera.release()
        if show_window:
            cv2.destroyAllWindows()

    if listener.fatal is not None:
        print(f"Detection stopped: {listener.fatal.reason}")
        return 1
    return return_code


if __name__ == "__main__":
    raise SystemExit(main())
