from typing import Optional, Tuple

import cv2
import numpy as np
from PyQt5 import QtCore, QtGui, QtWidgets


def bgr_to_pixmap(frame_bgr: np.ndarray) -> QtGui.QPixmap:
    rgb_frame = cv2.cvtColor(frame_bgr, cv2.COLOR_BGR2RGB)
    height, width, _ = rgb_frame.shape
    image = QtGui.QImage(rgb_frame.data, width, height, 3 * width, QtGui.QImage.Format_RGB888)
    # QImage does not own rgb_frame's buffer.
    return QtGui.QPixmap.fromImage(image.copy())


class VideoCanvas(QtWidgets.QWidget):
    """Shows the annotated frame scaled to fit and reports clicks in frame pixels."""

    clicked = QtCore.pyqtSignal(float, float)

    def __init__(self, parent: Optional[QtWidgets.QWidget] = None) -> None:
        super().__init__(parent)
        self.setAttribute(QtCore.Qt.WA_OpaquePaintEvent, True)
        self.setFocusPolicy(QtCore.Qt.NoFocus)
        self.setMinimumSize(320, 240)
        self._pixmap: Optional[QtGui.QPixmap] = None
        self.setCursor(QtCore.Qt.CrossCursor)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def set_frame(self, frame_bgr: np.ndarray) -> None:
        self._pixmap = bgr_to_pixmap(frame_bgr)
        self.update()

    def paintEvent(self, event: QtGui.QPaintEvent) -> None:
        painter = QtGui.QPainter(self)
        painter.fillRect(self.rect(), QtGui.QColor("#000000"))
        if not self._pixmap:
            return
        scale = self._fit_scale()
        target = QtCore.QRectF(
            *self._content_origin(scale),
            self._pixmap.width() * scale,
            self._pixmap.height() * scale,
        )
        painter.drawPixmap(target, self._pixmap, QtCore.QRectF(self._pixmap.rect()))

    # ------------------------------------------------------------------
    # Interaction
    # ------------------------------------------------------------------
    def mouseReleaseEvent(self, event: QtGui.QMouseEvent) -> None:
        if event.button() == QtCore.Qt.LeftButton:
            coords = self._map_to_frame(event.pos())
            if coords:
                self.clicked.emit(*coords)
            event.accept()
        else:
            super().mouseReleaseEvent(event)

    # ------------------------------------------------------------------
    # Geometry helpers
    # ------------------------------------------------------------------
    def _fit_scale(self) -> float:
        if not self._pixmap or self._pixmap.width() == 0 or self._pixmap.height() == 0:
            return 1.0
        return min(self.width() / self._pixmap.width(), self.height() / self._pixmap.height())

    def _content_origin(self, scale: float) -> Tuple[float, float]:
        left = (self.width() - self._pixmap.width() * scale) / 2
        top = (self.height() - self._pixmap.height() * scale) / 2
        return left, top

    def _map_to_frame(self, pos: QtCore.QPoint) -> Optional[Tuple[float, float]]:
        if not self._pixmap:
            return None
        scale = self._fit_scale()
        if scale <= 0:
            return None
        left, top = self._content_origin(scale)
        x = (pos.x() - left) / scale
        y = (pos.y() - top) / scale
        if x < 0 or y < 0 or x >= self._pixmap.width() or y >= self._pixmap.height():
            return None
        return x, y
