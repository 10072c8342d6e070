from __future__ import annotations

from typing import TYPE_CHECKING, Callable, List, Optional
import logging

import cv2
import numpy as np

from ..model.entities import Mode, PlaybackState, Point2D
from ..model.rendering import compose_frame
from ..model.settings import DisplaySettings
from ..model.tracking import CommandSlot, TrackState
from ..model.video import FrameSource

if TYPE_CHECKING:
    from ..model.app_model import FlowTrackerModel


KEY_HELP = (
    "Use keys to modify tracking behavior and display.",
    "",
    "q to quit the program.",
    "t to find good tracking points.",
    "c to clear all tracking points.",
    "n to toggle the backing video display.",
    "",
    "Click the mouse to add a tracking point.",
    "",
    "If you are playing a video file ...",
    "s to step the video by a frame.",
    "r to run the video at speed.",
)


def format_key_help(prog: str) -> str:
    lines = [f"{prog}: {line}" if line else "" for line in KEY_HELP]
    return "\n".join([""] + lines + [""])


class PlaybackController:
    """Runs or steps through a frame source and feeds each frame to the tracker.

    One ``tick`` reads one frame. Between ticks the driver waits for input for
    ``wait_ms()`` milliseconds, where 0 means wait until a key arrives.
    """

    MODE_KEYS = {"t": Mode.REDETECT, "c": Mode.CLEAR}

    def __init__(
        self,
        source: FrameSource,
        track_state: TrackState,
        display: Optional[DisplaySettings] = None,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.source = source
        self.track_state = track_state
        self.display = display or DisplaySettings()
        self.commands = CommandSlot()
        # Files start paused on their first frame; cameras cannot step.
        self.state = PlaybackState.RUNNING if source.is_live else PlaybackState.STEPPING
        self.night: bool = bool(self.display.night_mode)
        self.last_frame: Optional[np.ndarray] = None
        self.last_image: Optional[np.ndarray] = None
        self.markers: List[Point2D] = []

    @classmethod
    def from_model(cls, model: "FlowTrackerModel") -> "PlaybackController":
        return cls(model.source, model.track_state, model.settings.display)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------
    @property
    def position(self) -> int:
        return max(0, self.source.current_frame_index)

    def wait_ms(self) -> int:
        if self.state is PlaybackState.STEPPING:
            return 0
        return max(1, int(self.source.metadata.frame_duration_ms))

    def tick(self) -> Optional[np.ndarray]:
        """Advance one frame and return the image to display."""
        frame = self.source.read_next()
        if frame is None:
            if self.source.is_live:
                self._log.debug("Empty read from %s; retrying next tick", self.source.title)
            else:
                if self.state is PlaybackState.RUNNING:
                    self._log.info("End of %s; stepping", self.source.title)
                self.state = PlaybackState.STEPPING
            return self.last_image

        gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY) if frame.ndim == 3 else frame
        mode, point = self.commands.take()
        if mode is not Mode.NONE:
            self._log.debug("Frame %s: applying %s", self.source.current_frame_index, mode.name)
        self.markers = self.track_state.advance_frame(gray, mode, point)
        self.last_frame = frame
        self.last_image = self.render()
        return self.last_image

    def render(self) -> Optional[np.ndarray]:
        if self.last_frame is None:
            return None
        frame = self.last_frame
        if frame.ndim == 2:
            frame = cv2.cvtColor(frame, cv2.COLOR_GRAY2BGR)
        return compose_frame(
            frame,
            self.markers,
            night=self.night,
            color=tuple(self.display.marker_color),
            radius=int(self.display.marker_radius),
        )

    def seek(self, frame_index: int) -> Optional[np.ndarray]:
        """Jump to ``frame_index``, pause, and show that frame."""
        if not self.source.is_seekable:
            return self.last_image
        self.source.seek(frame_index)
        self.state = PlaybackState.STEPPING
        return self.tick()

    def run(
        self,
        wait_key: Callable[[int], Optional[str]],
        show: Optional[Callable[[np.ndarray], None]] = None,
    ) -> None:
        """Tick, show, wait for input and dispatch it until the user quits."""
        while self.source.is_opened():
            image = self.tick()
            if show is not None and image is not None:
                show(image)
            key = wait_key(self.wait_ms())
            if key and not self.handle_key(key):
                return

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def handle_key(self, key: str) -> bool:
        """Dispatch a key press. Returns False when the user asked to quit."""
        key = (key or "").lower()
        if key == "q":
            return False
        if key == "n":
            self.night = not self.night
        elif key in self.MODE_KEYS:
            self.commands.post(self.MODE_KEYS[key])
        elif key == "r":
            self.state = PlaybackState.RUNNING
        elif key == "s":
            self.state = PlaybackState.STEPPING
        return True

    def handle_click(self, x: float, y: float) -> None:
        self.commands.post(Mode.ADD_POINT, (float(x), float(y)))
