from __future__ import annotations

import os
from typing import List

import app
from camera import CameraFrame
from config import ENV_PREFIX
from detection_loop import PoseEstimator


class DeadCamera:
    def __init__(self, camera_index: int = 0):
        self.camera_index = camera_index
        self.reads = 0
        self.released = False

    def open(self) -> None:
        pass

    def read(self) -> CameraFrame:
        self.reads += 1
        return CameraFrame(None, float(self.reads), False)

    def release(self) -> None:
        self.released = True


def test_headless_run_gives_up_on_a_dead_camera(monkeypatch) -> None:
    for key in list(os.environ):
        if key.startswith(ENV_PREFIX):
            monkeypatch.delenv(key)
    cameras: List[DeadCamera] = []
    sleeps: List[float] = []

    def make_camera(camera_index: int = 0) -> DeadCamera:
        cameras.append(DeadCamera(camera_index))
        return cameras[-1]

    monkeypatch.setattr(app, "CameraStream", make_camera)
    monkeypatch.setattr(app, "PoseDetector", lambda options: PoseEstimator())
    monkeypatch.setattr(app.time, "sleep", sleeps.append)

    assert app.main(["--no-window"]) == 1
    assert cameras[0].reads == app.MAX_CAMERA_FAILURES + 1
    assert cameras[0].released
    assert sleeps == [app.CAMERA_RETRY_SECONDS] * app.MAX_CAMERA_FAILURES
