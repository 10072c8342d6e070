"""Interactive Lucas-Kanade optical flow point tracker."""

__version__ = "0.1.0"
