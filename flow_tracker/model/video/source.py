from dataclasses import dataclass
from typing import Optional, Tuple, Union
import logging

import cv2
import numpy as np


class SourceOpenError(ValueError):
    """Raised when a video file or camera cannot be opened."""


def fourcc_to_string(code: int) -> str:
    code = int(code)
    chars = [chr((code >> shift) & 0xFF) for shift in (0, 8, 16, 24)]
    return "".join(ch if ch.isprintable() else "?" for ch in chars)


@dataclass
class SourceMetadata:
    frame_count: int
    fps: float
    frame_duration_ms: int
    frame_size: Tuple[int, int]
    fourcc: str = "????"

    def describe(self) -> str:
        width, height = self.frame_size
        parts = []
        if self.frame_count:
            parts.append(f"{self.frame_count} ")
        parts.append(f"({width}x{height}) frames of ")
        if self.frame_count:
            parts.append(f"{self.fourcc} ")
        parts.append(f"video at {self.fps:g} FPS")
        return "".join(parts)


class FrameSource:
    """Sequential frames from a video file or a live camera."""

    def __init__(self, default_fps: float = 30.0) -> None:
        self._log = logging.getLogger(__name__)
        self._capture: Optional[cv2.VideoCapture] = None
        self._default_fps = default_fps
        self._metadata = self._empty_metadata()
        self._live = False
        self.title: str = ""
        self.current_frame_index: int = -1

    def _empty_metadata(self) -> SourceMetadata:
        return SourceMetadata(
            frame_count=0,
            fps=self._default_fps,
            frame_duration_ms=int(1000 / self._default_fps),
            frame_size=(0, 0),
        )

    def open_file(self, path: str) -> SourceMetadata:
        return self._open(str(path), live=False, title=str(path))

    def open_camera(self, index: int = -1) -> SourceMetadata:
        return self._open(index, live=True, title=f"Camera {index}")

    def _open(self, target: Union[str, int], live: bool, title: str) -> SourceMetadata:
        self.release()
        capture = cv2.VideoCapture(target)
        if not capture.isOpened():
            capture.release()
            raise SourceOpenError(f"Failed to open {title}.")

        # Cameras report a meaningless or zero frame count.
        frame_count = 0 if live else int(capture.get(cv2.CAP_PROP_FRAME_COUNT) or 0)
        fps = float(capture.get(cv2.CAP_PROP_FPS) or 0.0)
        if fps <= 0:
            fps = self._default_fps
        width = int(capture.get(cv2.CAP_PROP_FRAME_WIDTH))
        height = int(capture.get(cv2.CAP_PROP_FRAME_HEIGHT))

        self._capture = capture
        self._live = live
        self.title = title
        self._metadata = SourceMetadata(
            frame_count=max(0, frame_count),
            fps=fps,
            frame_duration_ms=max(1, int(1000 / fps)),
            frame_size=(width, height),
            fourcc=fourcc_to_string(capture.get(cv2.CAP_PROP_FOURCC) or 0),
        )
        self.current_frame_index = -1
        self._log.info("Opened %s: %s", title, self._metadata.describe())
        return self._metadata

    @property
    def metadata(self) -> SourceMetadata:
        return self._metadata

    @property
    def is_live(self) -> bool:
        return self._live

    @property
    def is_seekable(self) -> bool:
        return not self._live and self._metadata.frame_count > 0

    def is_opened(self) -> bool:
        return self._capture is not None

    def read_next(self) -> Optional[np.ndarray]:
        if not self._capture:
            return None
        success, frame = self._capture.read()
        if not success or frame is None:
            return None
        self.current_frame_index += 1
        return frame

    def seek(self, frame_index: int) -> None:
        """Position the source so the next read returns ``frame_index``."""
        if not self._capture or not self.is_seekable:
            return
        frame_index = max(0, min(int(frame_index), self._metadata.frame_count - 1))
        self._capture.set(cv2.CAP_PROP_POS_FRAMES, frame_index)
        self.current_frame_index = frame_index - 1

    def release(self) -> None:
        if self._capture:
            self._capture.release()
        self._capture = None
        self._live = False
        self.current_frame_index = -1
        self._metadata = self._empty_metadata()
