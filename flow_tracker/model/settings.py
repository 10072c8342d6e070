import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, Tuple


SETTINGS_FILENAME = "settings.json"

_log = logging.getLogger(__name__)


@dataclass
class DetectionSettings:
    max_tracked_points: int = 500
    quality_level: float = 0.01
    min_distance: float = 10.0
    block_size: int = 3
    use_harris: bool = False
    harris_k: float = 0.04
    subpix_window: int = 10
    click_subpix_window: int = 31


@dataclass
class FlowSettings:
    window_size: int = 31
    pyramid_levels: int = 3
    min_eig_threshold: float = 0.001


@dataclass
class TermSettings:
    max_iterations: int = 20
    epsilon: float = 0.03


@dataclass
class DisplaySettings:
    marker_radius: int = 3
    marker_color: Tuple[int, int, int] = (0, 255, 0)
    night_mode: bool = False
    window_width: int = 960
    window_height: int = 720


@dataclass
class PlaybackSettings:
    default_fps: float = 30.0


@dataclass
class AppSettings:
    detection: DetectionSettings = field(default_factory=DetectionSettings)
    flow: FlowSettings = field(default_factory=FlowSettings)
    term: TermSettings = field(default_factory=TermSettings)
    display: DisplaySettings = field(default_factory=DisplaySettings)
    playback: PlaybackSettings = field(default_factory=PlaybackSettings)


class SettingsManager:
    def __init__(self, path: Path) -> None:
        self.path = path
        self.settings = AppSettings()
        self.load()

    def load(self) -> None:
        if not self.path.exists():
            return
        try:
            data = json.loads(self.path.read_text())
        except (json.JSONDecodeError, OSError) as exc:
            _log.warning("Unable to read settings %s (%s); using defaults", self.path, exc)
            return
        self.settings = self._from_dict(data)

    def _from_dict(self, data: Dict) -> AppSettings:
        def merge(default_cls, section):
            instance = default_cls()
            if isinstance(section, dict):
                for key, value in section.items():
                    if hasattr(instance, key):
                        if isinstance(getattr(instance, key), tuple) and isinstance(value, list):
                            value = tuple(value)
                        setattr(instance, key, value)
            return instance

        settings = AppSettings()
        if not isinstance(data, dict):
            return settings
        if "detection" in data:
            settings.detection = merge(DetectionSettings, data["detection"])
        if "flow" in data:
            settings.flow = merge(FlowSettings, data["flow"])
        if "term" in data:
            settings.term = merge(TermSettings, data["term"])
        if "display" in data:
            settings.display = merge(DisplaySettings, data["display"])
        if "playback" in data:
            settings.playback = merge(PlaybackSettings, data["playback"])
        return settings


def get_settings_path(root: Path) -> Path:
    return root / SETTINGS_FILENAME
