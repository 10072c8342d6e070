import os

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

import numpy as np
import pytest
from PyQt5 import QtCore, QtWidgets

from conftest import FakeDetector, FakeEstimator, FakeSource
from flow_tracker.controller import PlaybackController
from flow_tracker.model.entities import Mode, PlaybackState
from flow_tracker.model.tracking import TrackState
from flow_tracker.view import FlowTrackerWindow, VideoCanvas


@pytest.fixture(scope="module")
def qapp():
    app = QtWidgets.QApplication.instance() or QtWidgets.QApplication(["flow-tracker-tests"])
    yield app


@pytest.fixture
def window(qapp, color_frames):
    state = TrackState(detector=FakeDetector(), estimator=FakeEstimator())
    controller = PlaybackController(FakeSource(color_frames), state)
    seeks = []
    original_seek = controller.seek

    def recording_seek(frame_index):
        seeks.append(frame_index)
        return original_seek(frame_index)

    controller.seek = recording_seek
    win = FlowTrackerWindow(controller, "fake.avi")
    win.seeks = seeks
    yield win
    win.close()


def test_slider_follows_playback_without_seeking(window):
    window.start()
    window._show(window.controller.tick())
    window._show(window.controller.tick())

    assert window.position_slider.value() == 2
    assert window.seeks == []


def test_moving_slider_seeks_and_steps(window):
    window.controller.handle_key("r")
    window.start()
    window.tick_timer.stop()

    window.position_slider.setValue(2)

    assert window.seeks == [2]
    assert window.controller.state is PlaybackState.STEPPING
    assert window.controller.position == 2


def test_camera_window_has_no_slider(qapp, color_frames):
    state = TrackState(detector=FakeDetector(), estimator=FakeEstimator())
    controller = PlaybackController(FakeSource(color_frames, live=True), state)
    win = FlowTrackerWindow(controller, "Camera -1")

    assert win.position_slider is None
    win.close()


def test_canvas_click_posts_add_point(window):
    window._on_canvas_clicked(12.0, 7.5)

    assert window.controller.commands.take() == (Mode.ADD_POINT, (12.0, 7.5))


def test_map_to_frame_scales_and_rejects_letterbox(qapp):
    canvas = VideoCanvas()
    canvas.resize(600, 300)
    canvas.set_frame(np.zeros((100, 100, 3), dtype=np.uint8))

    # 100x100 frame fits as 300x300, centred with 150px bars on each side.
    assert canvas._map_to_frame(QtCore.QPoint(150, 0)) == (0.0, 0.0)
    assert canvas._map_to_frame(QtCore.QPoint(225, 75)) == (25.0, 25.0)
    assert canvas._map_to_frame(QtCore.QPoint(75, 150)) is None
    assert canvas._map_to_frame(QtCore.QPoint(525, 150)) is None


def test_map_to_frame_without_frame(qapp):
    canvas = VideoCanvas()
    canvas.resize(400, 300)

    assert canvas._map_to_frame(QtCore.QPoint(10, 10)) is None
