from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple

Point2D = Tuple[float, float]
ColorBGR = Tuple[int, int, int]


class Mode(Enum):
    """A pending user command, consumed by the next frame."""

    NONE = "none"
    ADD_POINT = "add_point"
    CLEAR = "clear"
    REDETECT = "redetect"


class PlaybackState(Enum):
    RUNNING = "running"
    STEPPING = "stepping"


@dataclass
class PendingCommand:
    mode: Mode = Mode.NONE
    point: Optional[Point2D] = None
