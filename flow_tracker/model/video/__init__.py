"""Video frame sources."""

from .source import FrameSource, SourceMetadata, SourceOpenError, fourcc_to_string

__all__ = ["FrameSource", "SourceMetadata", "SourceOpenError", "fourcc_to_string"]
