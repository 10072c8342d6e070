"""Model layer containing the tracker's core logic and data structures."""

from .app_model import FlowTrackerModel
from .entities import ColorBGR, Mode, PendingCommand, PlaybackState, Point2D
from .rendering import compose_frame, draw_markers
from .settings import (
    AppSettings,
    DetectionSettings,
    DisplaySettings,
    FlowSettings,
    PlaybackSettings,
    SettingsManager,
    TermSettings,
    get_settings_path,
)
from .tracking import CommandSlot, FeatureDetector, FlowEstimator, TrackState
from .video import FrameSource, SourceMetadata, SourceOpenError

__all__ = [
    "AppSettings",
    "ColorBGR",
    "CommandSlot",
    "DetectionSettings",
    "DisplaySettings",
    "FeatureDetector",
    "FlowEstimator",
    "FlowSettings",
    "FlowTrackerModel",
    "FrameSource",
    "Mode",
    "PendingCommand",
    "PlaybackSettings",
    "PlaybackState",
    "Point2D",
    "SettingsManager",
    "SourceMetadata",
    "SourceOpenError",
    "TermSettings",
    "TrackState",
    "compose_frame",
    "draw_markers",
    "get_settings_path",
]
