"""Tests for the zoom transform, fit mode and bounded undo history."""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from RadialScopeViewer.core.history import HistoryStack
from RadialScopeViewer.core.image_state import ImageState
from RadialScopeViewer.core.zoom import displayed_size, display_to_image, fit_scale, image_to_display


def test_displayed_size_floors_each_axis():
    assert displayed_size((100, 50), 1.5) == (150, 75)
    assert displayed_size((101, 3), 0.5) == (50, 1)


def test_display_to_image_is_floor_of_inverse():
    assert display_to_image(149.9, 74.9, 1.5) == (99, 49)
    assert display_to_image(0, 0, 3.0) == (0, 0)


def test_integer_zoom_round_trip():
    for z in (1.0, 2.0, 3.0):
        for ix in range(10):
            px, py = image_to_display(ix, 9 - ix, z)
            assert display_to_image(px, py, z) == (ix, 9 - ix)


def test_fit_scale_uses_smaller_ratio_and_stays_positive():
    assert fit_scale((200, 100), (100, 100)) == 0.5
    assert fit_scale((100, 400), (200, 200)) == 0.5
    assert fit_scale((10000, 10), (1, 1)) == 0.01


def test_fit_mode_follows_display_until_manual_zoom():
    state = ImageState(display_size=(100, 100))
    state.set_image(np.zeros((100, 200), dtype=np.uint8))
    assert state.zoom.fit_mode
    assert state.zoom_factor == 0.5

    state.set_display_size(200, 100)
    assert state.zoom_factor == 1.0

    state.zoom_in()
    assert not state.zoom.fit_mode
    z = state.zoom_factor
    state.set_display_size(800, 800)
    assert state.zoom_factor == z

    state.zoom_fit()
    assert state.zoom.fit_mode
    assert state.zoom_factor == 4.0


def test_zoom_out_never_reaches_zero():
    state = ImageState()
    state.set_image(np.zeros((4, 4), dtype=np.uint8))
    for _ in range(200):
        state.zoom_out()
    assert state.zoom_factor > 0


def test_history_evicts_oldest_when_full():
    stack = HistoryStack(3)
    for i in range(5):
        stack.push(np.full((1, 1), i, dtype=np.uint8))
    assert len(stack) == 3
    assert [int(stack.pop()[0, 0]) for _ in range(3)] == [4, 3, 2]
    assert stack.pop() is None
    assert stack.is_empty()


def test_undo_restores_previous_image():
    state = ImageState()
    a = np.zeros((2, 2), dtype=np.uint8)
    b = np.ones((2, 2), dtype=np.uint8)
    state.set_image(a)
    state.set_image(b)
    assert len(state.history) == 1

    assert state.undo()
    assert np.array_equal(state.image, a)
    assert not state.undo()
    assert np.array_equal(state.image, a)


def test_undo_depth_is_bounded():
    state = ImageState(max_history=2)
    for i in range(5):
        state.set_image(np.full((2, 2), i, dtype=np.uint8))
    assert len(state.history) == 2
    assert state.undo()
    assert int(state.image[0, 0]) == 3
    assert state.undo()
    assert int(state.image[0, 0]) == 2
    assert not state.undo()


def test_stored_image_is_detached_and_read_only():
    state = ImageState()
    src = np.zeros((2, 2), dtype=np.uint8)
    state.set_image(src)
    src[0, 0] = 9
    assert state.image[0, 0] == 0
    assert not state.image.flags.writeable


def test_listeners_fire_on_image_and_zoom_changes():
    state = ImageState()
    calls = []
    state.add_listener(lambda: calls.append(state.zoom_factor))
    state.set_image(np.zeros((2, 2), dtype=np.uint8))
    state.zoom_in()
    assert len(calls) == 2


def test_read_only_view_of_writable_buffer_is_detached():
    state = ImageState()
    base = np.zeros((2, 2), dtype=np.uint8)
    view = base.view()
    view.flags.writeable = False
    state.set_image(view)
    state.set_image(np.ones((2, 2), dtype=np.uint8))
    base[0, 0] = 9
    assert state.history.peek()[0, 0] == 0
    assert state.undo()
    assert state.image[0, 0] == 0
