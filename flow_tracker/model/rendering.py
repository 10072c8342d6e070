from typing import Iterable

import cv2
import numpy as np

from .entities import ColorBGR, Point2D


def draw_markers(
    image: np.ndarray,
    points: Iterable[Point2D],
    color: ColorBGR = (0, 255, 0),
    radius: int = 3,
) -> np.ndarray:
    """Draw a filled circle on ``image`` for each point, in place."""
    for x, y in points:
        center = (int(round(x)), int(round(y)))
        cv2.circle(image, center, radius, color, thickness=-1, lineType=cv2.LINE_8)
    return image


def compose_frame(
    frame_bgr: np.ndarray,
    points: Iterable[Point2D],
    night: bool = False,
    color: ColorBGR = (0, 255, 0),
    radius: int = 3,
) -> np.ndarray:
    # Night mode hides the video but keeps the markers.
    image = np.zeros_like(frame_bgr) if night else frame_bgr.copy()
    return draw_markers(image, points, color, radius)
