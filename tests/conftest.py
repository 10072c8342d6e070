from typing import List, Optional, Sequence

import numpy as np
import pytest

from flow_tracker.model.video import SourceMetadata


def make_square_frame(offset=(0, 0)) -> np.ndarray:
    """A dark 120x160 frame holding one bright rectangle with corners near (49.5, 39.5)."""
    dx, dy = offset
    gray = np.zeros((120, 160), dtype=np.uint8)
    gray[40 + dy:80 + dy, 50 + dx:110 + dx] = 255
    return gray


class FakeDetector:
    def __init__(self, detected: Optional[Sequence] = None) -> None:
        self.detected = np.asarray(detected if detected is not None else [], dtype=np.float32).reshape(-1, 2)
        self.detect_calls = 0
        self.refined: List = []

    def detect(self, gray, max_count):
        self.detect_calls += 1
        return self.detected[:max_count].copy()

    def refine(self, gray, point):
        self.refined.append(point)
        return float(point[0]), float(point[1])


class FakeEstimator:
    """Moves every point by ``shift`` and reports ``status`` (all True by default)."""

    def __init__(self, status: Optional[Sequence[bool]] = None, shift=(0.0, 0.0)) -> None:
        self.status = status
        self.shift = np.asarray(shift, dtype=np.float32)
        self.calls = 0

    def estimate(self, prior_gray, gray, prior_points):
        self.calls += 1
        points = np.asarray(prior_points, dtype=np.float32).reshape(-1, 2) + self.shift
        if self.status is None:
            status = np.ones(len(points), dtype=bool)
        else:
            status = np.asarray(self.status, dtype=bool)
        return points, status


class FakeSource:
    def __init__(self, frames: Sequence[Optional[np.ndarray]], live: bool = False, fps: float = 25.0) -> None:
        self.frames = list(frames)
        self._live = live
        self._next = 0
        self.current_frame_index = -1
        self.title = "Camera -1" if live else "fake.avi"
        count = 0 if live else len(self.frames)
        height, width = (self.frames[0].shape[:2] if self.frames and self.frames[0] is not None else (0, 0))
        self.metadata = SourceMetadata(
            frame_count=count,
            fps=fps,
            frame_duration_ms=int(1000 / fps),
            frame_size=(width, height),
            fourcc="MJPG",
        )
        self.opened = True

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def is_seekable(self) -> bool:
        return not self._live and self.metadata.frame_count > 0

    def is_opened(self) -> bool:
        return self.opened

    def read_next(self):
        if self._next >= len(self.frames):
            return None
        frame = self.frames[self._next]
        self._next += 1
        if frame is None:
            return None
        self.current_frame_index += 1
        return frame

    def seek(self, frame_index: int) -> None:
        self._next = frame_index
        self.current_frame_index = frame_index - 1

    def release(self) -> None:
        self.opened = False


@pytest.fixture
def square_frame() -> np.ndarray:
    return make_square_frame()


@pytest.fixture
def color_frames() -> List[np.ndarray]:
    frames = []
    for value in (40, 80, 120):
        frame = np.full((60, 80, 3), value, dtype=np.uint8)
        frame[20:40, 30:50] = 255
        frames.append(frame)
    return frames
