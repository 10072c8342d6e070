from __future__ import annotations

from pathlib import Path
from typing import Optional

from .settings import AppSettings, SettingsManager
from .tracking import FeatureDetector, FlowEstimator, TrackState
from .video import FrameSource, SourceMetadata


class FlowTrackerModel:
    """Encapsulates the non-UI state for the flow tracker."""

    def __init__(self, settings_path: Path, settings_manager: Optional[SettingsManager] = None) -> None:
        self.settings_manager = settings_manager or SettingsManager(settings_path)
        self.settings: AppSettings = self.settings_manager.settings

        self.source = FrameSource(default_fps=self.settings.playback.default_fps)
        self.track_state = TrackState(
            detector=FeatureDetector(self.settings.detection, self.settings.term),
            estimator=FlowEstimator(self.settings.flow, self.settings.term),
            max_tracked_points=self.settings.detection.max_tracked_points,
        )

    def open_source(self, target: str, camera_index: int = -1) -> SourceMetadata:
        """Open ``target`` as a file, or the camera when ``target`` is ``-``."""
        self.track_state.reset()
        if target == "-":
            return self.source.open_camera(camera_index)
        return self.source.open_file(target)

    def close(self) -> None:
        self.source.release()
