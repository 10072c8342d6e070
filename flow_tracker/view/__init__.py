"""Qt view for the flow tracker."""

from .main_window import FlowTrackerWindow
from .video_widget import VideoCanvas

__all__ = ["FlowTrackerWindow", "VideoCanvas"]
