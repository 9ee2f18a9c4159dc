"""Tests for drag selection and the ROI list."""

import sys
from pathlib import Path

import numpy as np

sys.path.insert(0, str(Path(__file__).parent.parent))

from RadialScopeViewer.core.image_state import ImageState
from RadialScopeViewer.core.selection import DragState, SelectionRect, SelectionTracker


def _tracker(zoom_display=(100, 100), shape=(50, 50)):
    state = ImageState(display_size=zoom_display)
    state.set_image(np.zeros(shape, dtype=np.uint8))
    return state, SelectionTracker(state)


def test_drag_is_stored_in_image_coordinates():
    state, tracker = _tracker()
    assert state.zoom_factor == 2.0

    tracker.press(10, 10)
    assert tracker.state is DragState.DRAGGING
    live = tracker.move(30, 20)
    assert live == SelectionRect(5, 5, 15, 10)
    assert tracker.rois == []

    rect = tracker.release(30, 20)
    assert rect == SelectionRect(5, 5, 15, 10)
    assert tracker.selection == rect
    assert tracker.rois == [rect]
    assert tracker.state is DragState.IDLE
    assert tracker.live_rect is None


def test_drag_is_normalized_and_clamped():
    _, tracker = _tracker()
    tracker.press(1000, 1000)
    rect = tracker.release(-10, -10)
    assert rect == SelectionRect(0, 0, 50, 50)


def test_zero_size_drag_is_not_recorded():
    _, tracker = _tracker()
    tracker.press(10, 10)
    rect = tracker.release(10, 10)
    assert rect.is_empty
    assert tracker.rois == []
    assert not tracker.has_selection()


def test_release_without_press_is_ignored():
    _, tracker = _tracker()
    assert tracker.move(5, 5) is None
    assert tracker.release(5, 5) is None


def test_select_all_and_clear():
    _, tracker = _tracker(shape=(20, 30))
    rect = tracker.select_all()
    assert rect == SelectionRect(0, 0, 30, 20)
    tracker.clear_selection()
    assert tracker.selection is None
    assert len(tracker.rois) == 1


def test_rect_helpers():
    rect = SelectionRect.from_xywh(2, 3, 4, 5)
    assert (rect.x2, rect.y2) == (6, 8)
    assert str(rect) == "(2, 3) - (6, 8), w: 4, h: 5"
    assert rect.within(6, 8)
    assert not rect.within(5, 8)
    assert SelectionRect(5, 5, 1, 1).normalized() == SelectionRect(1, 1, 5, 5)
