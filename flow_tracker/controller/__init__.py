"""Controllers that connect the frame source, the tracker and the view."""

from .playback import KEY_HELP, PlaybackController, format_key_help

__all__ = ["KEY_HELP", "PlaybackController", "format_key_help"]
