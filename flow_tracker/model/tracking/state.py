from __future__ import annotations

from typing import List, Optional, Tuple
import logging
import threading

import numpy as np

from ..entities import Mode, PendingCommand, Point2D
from ..settings import DetectionSettings
from .features import FeatureDetector, empty_points
from .flow import FlowEstimator


class CommandSlot:
    """Holds at most one pending command; a newer post replaces an unconsumed one."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._pending = PendingCommand()

    def post(self, mode: Mode, point: Optional[Point2D] = None) -> None:
        with self._lock:
            self._pending = PendingCommand(mode=mode, point=point)

    def take(self) -> Tuple[Mode, Optional[Point2D]]:
        with self._lock:
            pending = self._pending
            self._pending = PendingCommand()
        return pending.mode, pending.point


class TrackState:
    """The tracked point set and the two most recent grayscale frames."""

    def __init__(
        self,
        detector: Optional[FeatureDetector] = None,
        estimator: Optional[FlowEstimator] = None,
        max_tracked_points: int = DetectionSettings.max_tracked_points,
    ) -> None:
        self._log = logging.getLogger(__name__)
        self.detector = detector or FeatureDetector()
        self.estimator = estimator or FlowEstimator()
        self.max_tracked_points = int(max_tracked_points)
        self.prior_gray: Optional[np.ndarray] = None
        self.gray: Optional[np.ndarray] = None
        self._prior_points: np.ndarray = empty_points()
        self._points: np.ndarray = empty_points()

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------
    @property
    def points(self) -> List[Point2D]:
        return _as_tuples(self._points)

    @property
    def prior_points(self) -> List[Point2D]:
        return _as_tuples(self._prior_points)

    @property
    def point_count(self) -> int:
        return len(self._points)

    def reset(self) -> None:
        self.prior_gray = None
        self.gray = None
        self._prior_points = empty_points()
        self._points = empty_points()

    # ------------------------------------------------------------------
    # Per-frame update
    # ------------------------------------------------------------------
    def advance_frame(
        self,
        new_gray: np.ndarray,
        mode: Mode = Mode.NONE,
        new_point: Optional[Point2D] = None,
    ) -> List[Point2D]:
        """Update the tracked points for ``new_gray`` and return the overlay markers.

        CLEAR drops every point, REDETECT replaces them with fresh features and
        otherwise the prior points are flowed into ``new_gray``, keeping only
        those the estimator tracked. ADD_POINT then appends the refined click
        unless the set is already full.
        """
        self.gray = new_gray
        # No earlier frame yet: flow against the same frame is zero motion.
        if self.prior_gray is None:
            self.prior_gray = new_gray.copy()

        if mode is Mode.CLEAR:
            self._prior_points = empty_points()
            self._points = empty_points()
        elif mode is Mode.REDETECT:
            self._points = self.detector.detect(new_gray, self.max_tracked_points)
            self._log.debug("Redetected %d points", len(self._points))
        elif len(self._prior_points):
            candidates, status = self.estimator.estimate(self.prior_gray, new_gray, self._prior_points)
            self._points = np.asarray(candidates, dtype=np.float32).reshape(-1, 2)[np.asarray(status, dtype=bool)]
            dropped = len(self._prior_points) - len(self._points)
            if dropped:
                self._log.debug("Dropped %d untracked points", dropped)
        else:
            self._points = empty_points()

        if mode is Mode.ADD_POINT and new_point is not None:
            if len(self._points) < self.max_tracked_points:
                refined = self.detector.refine(new_gray, new_point)
                self._points = np.vstack([self._points, np.array([refined], dtype=np.float32)])
                self._log.debug("Added point %s refined to %s", new_point, refined)
            else:
                self._log.debug("Ignored click at %s: %d points tracked", new_point, len(self._points))

        markers = self.points
        self.prior_gray = new_gray
        self._prior_points = self._points
        return markers


def _as_tuples(points: np.ndarray) -> List[Point2D]:
    return [(float(x), float(y)) for x, y in np.asarray(points).reshape(-1, 2)]
