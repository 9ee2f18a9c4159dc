"""Status bar update logic for ImageViewer.

This module handles all status bar update operations including:
- Mouse position and pixel value display
- Overall image/scale status display
- Selection rectangle display
"""

from pathlib import Path


class StatusUpdater:
    """Formats viewer state into the status bar widgets and title."""

    def __init__(self, viewer):
        """Initialize status updater.

        Args:
            viewer: ImageViewer instance
        """
        self.viewer = viewer

    def update_mouse_status(self, x: float, y: float):
        """Show the pixel value under a widget position."""
        self.viewer.status_pixel.setText(self.viewer.session.pixel_text(x, y))

    def update_status(self):
        """Update title and scale display from the current state."""
        state = self.viewer.session.state
        mode = " (fit)" if state.zoom.fit_mode else ""
        self.viewer.status_scale.setText(f"Scale: {state.zoom_factor:.2f}x{mode}")
        self.viewer.status_history.setText(f"Undo: {len(state.history)}/{state.history.capacity}")
        if not state.is_valid:
            self.viewer.setWindowTitle("RadialScopeViewer")
            return
        arr = state.image
        w, h = state.size
        c = 1 if arr.ndim == 2 else arr.shape[2]
        name = Path(state.path).name if state.path else "untitled"
        self.viewer.setWindowTitle(f"{name} - {w}x{h}, {c}ch, {arr.dtype}")

    def update_selection_status(self, rect=None):
        """Show a selection rectangle (or the current selection)."""
        if rect is None:
            rect = self.viewer.session.tracker.selection
        if rect is None or rect.is_empty:
            self.viewer.status_selection.setText("")
            return
        self.viewer.status_selection.setText(str(rect))
