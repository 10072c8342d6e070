"""Point tracking: feature detection, optical flow and the tracked point set."""

from .features import FeatureDetector
from .flow import FlowEstimator
from .state import CommandSlot, TrackState

__all__ = ["CommandSlot", "FeatureDetector", "FlowEstimator", "TrackState"]
