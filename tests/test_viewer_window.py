"""Tests for how the main window follows session state."""

import sys
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).parent.parent))

pytest.importorskip("PySide6.QtWidgets")

from RadialScopeViewer.ui.viewer.viewer import ImageViewer


def test_window_redraws_through_state_listener_only():
    # redraws come from ImageState listeners; the window declares no Qt signals of its own
    assert not hasattr(ImageViewer, "image_changed")
    assert not hasattr(ImageViewer, "selection_changed")
    assert callable(ImageViewer.refresh_display)
