from __future__ import annotations

from typing import Tuple

import cv2
import numpy as np

from ..settings import FlowSettings, TermSettings
from .features import make_term_criteria


class FlowEstimator:
    """Pyramidal Lucas-Kanade flow of a point set between two grayscale frames."""

    def __init__(self, flow: FlowSettings | None = None, term: TermSettings | None = None) -> None:
        self.update_from_settings(flow or FlowSettings(), term or TermSettings())

    def update_from_settings(self, flow: FlowSettings, term: TermSettings) -> None:
        self.lk_params = dict(
            winSize=(int(flow.window_size), int(flow.window_size)),
            maxLevel=int(flow.pyramid_levels),
            criteria=make_term_criteria(term),
            flags=0,
            minEigThreshold=float(flow.min_eig_threshold),
        )

    def estimate(
        self,
        prior_gray: np.ndarray,
        gray: np.ndarray,
        prior_points: np.ndarray,
    ) -> Tuple[np.ndarray, np.ndarray]:
        """Return the moved points and a boolean status, both index-aligned with ``prior_points``."""
        count = len(prior_points)
        if count == 0:
            return np.empty((0, 2), dtype=np.float32), np.zeros(0, dtype=bool)
        prev_pts = np.ascontiguousarray(prior_points, dtype=np.float32).reshape(-1, 1, 2)
        next_pts, status, _err = cv2.calcOpticalFlowPyrLK(prior_gray, gray, prev_pts, None, **self.lk_params)
        if next_pts is None or status is None:
            return prev_pts.reshape(-1, 2).copy(), np.zeros(count, dtype=bool)
        return next_pts.reshape(-1, 2), status.reshape(-1).astype(bool)
