"""Image display widget feeding pointer events into the selection tracker.

The widget never converts coordinates itself beyond handing widget
positions to the session: the zoom inverse lives in the core and is shared
with pixel inspection. Selections come back in image space and are
projected with ``ImageState.image_to_display`` only for painting.
"""

from typing import Optional

from PySide6.QtGui import QPixmap, QPainter, QImage, QPen, QColor, QWheelEvent
from PySide6.QtCore import Qt, QRect
from PySide6.QtWidgets import QLabel

from ...core.selection import SelectionRect


class ImageLabel(QLabel):
    """Zoomable image display with drag selection.

    Features:
    - Left-drag: Create a selection (appended to the ROI list on release)
    - Right-click: Report the pixel value under the cursor to the results feed
    - Ctrl + Mouse wheel: Zoom in/out

    Attributes:
        viewer: Parent ImageViewer instance
        show_rois: Draw previously finalized ROIs
    """

    SELECTION_COLOR = QColor(255, 0, 0)
    LIVE_COLOR = QColor(0, 200, 255)
    ROI_COLOR = QColor(255, 200, 0, 160)

    def __init__(self, viewer, parent=None):
        super().__init__(parent)
        self.viewer = viewer
        self.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self.setMouseTracking(True)
        self.setFocusPolicy(Qt.StrongFocus)
        self._pixmap = QPixmap()
        self.show_rois = True

    @property
    def session(self):
        return self.viewer.session

    def set_image(self, qimg: QImage):
        """Set the image to display at the session's current zoom."""
        if qimg.isNull():
            self.clear()
            return
        self._pixmap = QPixmap.fromImage(qimg)
        self.refresh_geometry()

    def refresh_geometry(self):
        dw, dh = self.session.state.displayed_size()
        self.setFixedSize(max(1, dw), max(1, dh))
        self.update()

    def clear(self):
        """Clear the displayed image."""
        super().clear()
        self._pixmap = QPixmap()
        self.setFixedSize(0, 0)
        self.update()

    def _display_rect(self, rect: SelectionRect) -> QRect:
        state = self.session.state
        x1, y1 = state.image_to_display(rect.x1, rect.y1)
        x2, y2 = state.image_to_display(rect.x2, rect.y2)
        return QRect(x1, y1, max(1, x2 - x1), max(1, y2 - y1))

    def paintEvent(self, event):
        """Paint the image, finalized ROIs and the current/live selection."""
        painter = QPainter(self)
        if not self._pixmap.isNull():
            dw, dh = self.session.state.displayed_size()
            if self.session.state.zoom_factor < 1.0:
                painter.setRenderHint(QPainter.SmoothPixmapTransform, True)
            painter.drawPixmap(QRect(0, 0, dw, dh), self._pixmap)

        tracker = self.session.tracker
        if self.show_rois:
            painter.setPen(QPen(self.ROI_COLOR, 1, Qt.DotLine))
            for roi in tracker.rois:
                painter.drawRect(self._display_rect(roi))
        if tracker.live_rect is not None and not tracker.live_rect.is_empty:
            painter.setPen(QPen(self.LIVE_COLOR, 1, Qt.DashLine))
            painter.drawRect(self._display_rect(tracker.live_rect))
        elif tracker.has_selection():
            painter.setPen(QPen(self.SELECTION_COLOR, 2))
            painter.drawRect(self._display_rect(tracker.selection))
        painter.end()

    def mousePressEvent(self, event):
        pos = event.position()
        if event.button() == Qt.LeftButton:
            self.session.press(pos.x(), pos.y())
            self.update()
        elif event.button() == Qt.RightButton:
            self.session.inspect_pixel(pos.x(), pos.y())
        super().mousePressEvent(event)

    def mouseMoveEvent(self, event):
        pos = event.position()
        if self.session.move(pos.x(), pos.y()) is not None:
            self.viewer.update_selection_status(self.session.tracker.live_rect)
            self.update()
        self.viewer.update_mouse_status(pos.x(), pos.y())
        super().mouseMoveEvent(event)

    def mouseReleaseEvent(self, event):
        if event.button() == Qt.LeftButton:
            pos = event.position()
            rect: Optional[SelectionRect] = self.session.release(pos.x(), pos.y())
            if rect is not None:
                self.viewer.on_selection_changed()
            self.update()
        super().mouseReleaseEvent(event)

    def wheelEvent(self, event: QWheelEvent):
        """Ctrl + wheel zooms; plain wheel scrolls."""
        if not self.session.state.is_valid or not (event.modifiers() & Qt.ControlModifier):
            event.ignore()
            return
        angle_delta = event.angleDelta().y()
        if angle_delta == 0:
            event.ignore()
            return
        if angle_delta > 0:
            self.viewer.zoom_in()
        else:
            self.viewer.zoom_out()
        event.accept()
