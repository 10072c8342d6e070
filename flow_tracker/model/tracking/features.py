from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from ..entities import Point2D
from ..settings import DetectionSettings, TermSettings


def make_term_criteria(term: TermSettings) -> Tuple[int, int, float]:
    return (cv2.TERM_CRITERIA_COUNT | cv2.TERM_CRITERIA_EPS, term.max_iterations, term.epsilon)


def empty_points() -> np.ndarray:
    return np.empty((0, 2), dtype=np.float32)


def fit_window(gray: np.ndarray, half_size: int) -> int:
    """Shrink a cornerSubPix half window so it fits inside ``gray``; 0 when nothing fits."""
    height, width = gray.shape[:2]
    return max(0, min(int(half_size), (width - 5) // 2, (height - 5) // 2))


class FeatureDetector:
    """Finds good features to track and snaps points to nearby corners."""

    def __init__(
        self,
        detection: DetectionSettings | None = None,
        term: TermSettings | None = None,
    ) -> None:
        self.update_from_settings(detection or DetectionSettings(), term or TermSettings())

    def update_from_settings(self, detection: DetectionSettings, term: TermSettings) -> None:
        self.quality_level = float(detection.quality_level)
        self.min_distance = float(detection.min_distance)
        self.block_size = int(detection.block_size)
        self.use_harris = bool(detection.use_harris)
        self.harris_k = float(detection.harris_k)
        self.subpix_window = int(detection.subpix_window)
        self.click_subpix_window = int(detection.click_subpix_window)
        self.criteria = make_term_criteria(term)

    def detect(self, gray: np.ndarray, max_count: int) -> np.ndarray:
        """Return up to ``max_count`` sub-pixel refined corners as an (N, 2) array."""
        if max_count <= 0:
            return empty_points()
        corners = cv2.goodFeaturesToTrack(
            gray,
            maxCorners=int(max_count),
            qualityLevel=self.quality_level,
            minDistance=self.min_distance,
            mask=None,
            blockSize=self.block_size,
            useHarrisDetector=self.use_harris,
            k=self.harris_k,
        )
        # None on a featureless frame
        if corners is None or len(corners) == 0:
            return empty_points()
        corners = np.ascontiguousarray(corners.reshape(-1, 1, 2), dtype=np.float32)
        size = fit_window(gray, self.subpix_window)
        if size:
            cv2.cornerSubPix(gray, corners, (size, size), (-1, -1), self.criteria)
        return corners.reshape(-1, 2)

    def refine(self, gray: np.ndarray, point: Point2D) -> Point2D:
        """Snap a clicked pixel to the nearest sub-pixel corner."""
        size = fit_window(gray, self.click_subpix_window)
        if not size:
            return float(point[0]), float(point[1])
        corners = np.array([[point]], dtype=np.float32)
        cv2.cornerSubPix(gray, corners, (size, size), (-1, -1), self.criteria)
        return float(corners[0, 0, 0]), float(corners[0, 0, 1])
