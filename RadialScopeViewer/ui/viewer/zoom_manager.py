"""Zoom and viewport management for ImageViewer.

This module handles all zoom-related operations including:
- Step zoom in/out with viewport center preservation
- Fit-to-window, kept up to date on every viewport resize while active
"""


class ZoomManager:
    """Bridges the session's zoom state and the scroll area.

    The zoom factor itself lives in ``ImageState.zoom``; this class only
    keeps the viewport centered and pushes viewport sizes into the state.
    """

    def __init__(self, viewer):
        """Initialize zoom manager.

        Args:
            viewer: ImageViewer instance
        """
        self.viewer = viewer

    @property
    def state(self):
        return self.viewer.session.state

    def calculate_viewport_center_in_image_coords(self) -> tuple[float, float]:
        """Calculate current viewport center in image coordinates."""
        scroll_area = self.viewer.scroll_area
        center_x = scroll_area.horizontalScrollBar().value() + scroll_area.viewport().width() / 2.0
        center_y = scroll_area.verticalScrollBar().value() + scroll_area.viewport().height() / 2.0
        z = self.state.zoom_factor
        return (center_x / z, center_y / z)

    def set_scroll_to_keep_image_point_at_position(
        self, img_coords: tuple[float, float], target_pos: tuple[float, float]
    ):
        """Set scroll position to keep an image point at a target widget position.

        Args:
            img_coords: (x, y) in image coordinates
            target_pos: (x, y) in viewport coordinates where the point should appear
        """
        z = self.state.zoom_factor
        scroll_area = self.viewer.scroll_area
        scroll_area.horizontalScrollBar().setValue(int(img_coords[0] * z - target_pos[0]))
        scroll_area.verticalScrollBar().setValue(int(img_coords[1] * z - target_pos[1]))

    def _zoom_keeping_center(self, apply):
        if not self.state.is_valid:
            return
        img_center = self.calculate_viewport_center_in_image_coords()
        apply()
        viewport = self.viewer.scroll_area.viewport()
        self.set_scroll_to_keep_image_point_at_position(
            img_center, (viewport.width() / 2.0, viewport.height() / 2.0)
        )

    def zoom_in(self):
        self._zoom_keeping_center(self.viewer.session.zoom_in)

    def zoom_out(self):
        self._zoom_keeping_center(self.viewer.session.zoom_out)

    def fit_to_window(self):
        """Enter fit mode using the current viewport size."""
        self.sync_viewport_size()
        self.viewer.session.zoom_fit()

    def sync_viewport_size(self):
        """Push the viewport size into the state (refits while in fit mode)."""
        viewport = self.viewer.scroll_area.viewport()
        self.viewer.session.set_display_size(viewport.width(), viewport.height())
