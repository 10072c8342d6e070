from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Optional

from PyQt5 import QtCore, QtGui, QtWidgets

from ..model.entities import PlaybackState
from .video_widget import VideoCanvas

if TYPE_CHECKING:
    from ..controller.playback import PlaybackController


class FlowTrackerWindow(QtWidgets.QMainWindow):
    """Displays tracked frames and turns key, click and scrub input into controller calls.

    The tick timer stands in for a timed wait on input: while running it fires
    after one frame delay, while stepping it is idle and only a key press
    advances to the next frame.
    """

    def __init__(self, controller: "PlaybackController", title: str) -> None:
        super().__init__()
        self.controller = controller
        self._log = logging.getLogger(__name__)

        self.setWindowTitle(title)
        display = controller.display
        self.resize(display.window_width, display.window_height)
        self.setFocusPolicy(QtCore.Qt.StrongFocus)

        self._build_ui()
        self._setup_connections()

        self.tick_timer = QtCore.QTimer(self)
        self.tick_timer.setSingleShot(True)
        self.tick_timer.setTimerType(QtCore.Qt.PreciseTimer)
        self.tick_timer.timeout.connect(self._advance)

    # ------------------------------------------------------------------
    # UI construction
    # ------------------------------------------------------------------
    def _build_ui(self) -> None:
        central = QtWidgets.QWidget(self)
        central.setStyleSheet(
            """
            QWidget {
                background-color: #0b0b0b;
                color: #f0f0f0;
                font-size: 13px;
            }
            """
        )
        self.setCentralWidget(central)

        layout = QtWidgets.QVBoxLayout(central)
        layout.setContentsMargins(8, 8, 8, 8)
        layout.setSpacing(6)

        self.video_canvas = VideoCanvas(central)
        layout.addWidget(self.video_canvas, 1)

        source = self.controller.source
        self.position_slider: Optional[QtWidgets.QSlider] = None
        if source.is_seekable:
            self.position_slider = QtWidgets.QSlider(QtCore.Qt.Horizontal, central)
            self.position_slider.setRange(0, max(0, source.metadata.frame_count - 1))
            self.position_slider.setFocusPolicy(QtCore.Qt.NoFocus)
            layout.addWidget(self.position_slider)

        self.status_label = QtWidgets.QLabel(central)
        layout.addWidget(self.status_label)

    def _setup_connections(self) -> None:
        self.video_canvas.clicked.connect(self._on_canvas_clicked)
        if self.position_slider is not None:
            self.position_slider.valueChanged.connect(self._on_slider_moved)

    # ------------------------------------------------------------------
    # Frame loop
    # ------------------------------------------------------------------
    def start(self) -> None:
        self._advance()

    def _advance(self) -> None:
        self._show(self.controller.tick())
        wait = self.controller.wait_ms()
        if wait > 0:
            self.tick_timer.start(wait)

    def _show(self, image) -> None:
        if image is not None:
            self.video_canvas.set_frame(image)
        if self.position_slider is not None:
            self.position_slider.blockSignals(True)
            self.position_slider.setValue(self.controller.position)
            self.position_slider.blockSignals(False)
        state = "running" if self.controller.state is PlaybackState.RUNNING else "stepping"
        night = "  night" if self.controller.night else ""
        self.status_label.setText(
            f"frame {self.controller.position}  {state}  "
            f"{self.controller.track_state.point_count} points{night}"
        )

    # ------------------------------------------------------------------
    # Input
    # ------------------------------------------------------------------
    def keyPressEvent(self, event: QtGui.QKeyEvent) -> None:
        text = event.text()
        if not text:
            super().keyPressEvent(event)
            return
        self.tick_timer.stop()
        if not self.controller.handle_key(text):
            self._log.debug("UI: quit requested")
            self.close()
            return
        event.accept()
        self._advance()

    def _on_canvas_clicked(self, x: float, y: float) -> None:
        self._log.debug("UI: click at (%.1f, %.1f)", x, y)
        self.controller.handle_click(x, y)

    def _on_slider_moved(self, value: int) -> None:
        self.tick_timer.stop()
        self._log.debug("UI: seek to frame %s", value)
        self._show(self.controller.seek(value))

    def closeEvent(self, event: QtGui.QCloseEvent) -> None:
        self.tick_timer.stop()
        super().closeEvent(event)
