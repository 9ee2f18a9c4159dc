"""Main image viewer application window.

This module provides the ImageViewer class, the main window for displaying,
editing and profiling a single image.

Features:
- Zoom in/out with keyboard shortcuts and Ctrl+mouse wheel, fit-to-window
- Drag selection with an ROI list
- Copy / cut / paste with selectable blend mode, crop, resize, rotate, flip
- Undo history
- Filter plugins
- Circular average, radial sweep and histogram with a results feed
- Status bar showing pixel values, selection, zoom and undo depth
"""

from typing import Optional

from PySide6.QtWidgets import (
    QMainWindow,
    QWidget,
    QHBoxLayout,
    QScrollArea,
    QStatusBar,
    QLabel,
    QFileDialog,
    QMessageBox,
    QDockWidget,
    QInputDialog,
)
from PySide6.QtCore import Qt, QEvent

from ...core.image_io import is_image_file
from ...core.session import ViewerSession
from ..qt_image import numpy_to_qimage
from ..widgets import ImageLabel, ResultsPanel
from ..dialogs import HelpDialog, AnalysisDialog

from .menu_builder import create_menus
from .zoom_manager import ZoomManager
from .status_updater import StatusUpdater


class ImageViewer(QMainWindow):
    """Main application window for image viewing, editing and profiling.

    All state lives in ``self.session`` (a ViewerSession); the window only
    forwards user actions and redraws when the session's ImageState notifies.

    Keyboard Shortcuts:
        - Ctrl+O: Open image
        - Ctrl+Z: Undo
        - Ctrl+A / Esc: Select all / clear selection
        - Ctrl+C / Ctrl+X / Ctrl+V: Copy / cut / paste
        - Ctrl+Shift+X: Crop to selection
        - Ctrl+R: Resize
        - r / h / v: Rotate 90° / flip horizontal / flip vertical
        - + / - / f: Zoom in / out / fit
        - c / s / g: Circular average / radial sweep / histogram
        - a: Analysis window

    Mouse Controls:
        - Left-drag: Create selection
        - Right-click: Report pixel value to the results feed
        - Ctrl + Mouse wheel: Zoom in/out
    """

    def __init__(self, session: Optional[ViewerSession] = None):
        super().__init__()
        self.setWindowTitle("RadialScopeViewer")
        self.resize(1000, 700)

        self.session = session if session is not None else ViewerSession()
        self._shown_array = None

        central = QWidget(self)
        self.setCentralWidget(central)
        h_layout = QHBoxLayout(central)

        self.scroll_area = QScrollArea()
        self.scroll_area.setWidgetResizable(True)
        self.image_label = ImageLabel(self, self)
        self.scroll_area.setWidget(self.image_label)
        h_layout.addWidget(self.scroll_area)
        self.scroll_area.viewport().installEventFilter(self)

        # Results dock
        self.results_dock = QDockWidget("Results")
        self.results_dock.setFeatures(QDockWidget.DockWidgetFloatable | QDockWidget.DockWidgetMovable)
        self.results_panel = ResultsPanel(self.session.sink, self)
        self.results_dock.setWidget(self.results_panel)
        self.addDockWidget(Qt.BottomDockWidgetArea, self.results_dock)

        self.status = QStatusBar()
        self.setStatusBar(self.status)
        self.status_pixel = QLabel()
        self.status_selection = QLabel()
        self.status_history = QLabel()
        self.status_scale = QLabel()
        self.status.addPermanentWidget(self.status_pixel, 2)
        self.status.addPermanentWidget(self.status_selection, 3)
        self.status.addPermanentWidget(self.status_history, 1)
        self.status.addPermanentWidget(self.status_scale, 1)

        self.help_dialog = HelpDialog(self)
        self._analysis_dialog = None

        self.zoom_manager = ZoomManager(self)
        self.status_updater = StatusUpdater(self)

        create_menus(self)
        self.setAcceptDrops(True)

        self.session.state.add_listener(self.refresh_display)
        self.update_status()

    # Delegate zoom methods to zoom_manager
    def zoom_in(self):
        self.zoom_manager.zoom_in()

    def zoom_out(self):
        self.zoom_manager.zoom_out()

    def fit_to_window(self):
        self.zoom_manager.fit_to_window()

    # Delegate status update methods to status_updater
    def update_mouse_status(self, x: float, y: float):
        self.status_updater.update_mouse_status(x, y)

    def update_status(self):
        self.status_updater.update_status()

    def update_selection_status(self, rect=None):
        self.status_updater.update_selection_status(rect)

    # Display
    def refresh_display(self):
        """Redraw after any image or zoom change in the session state."""
        state = self.session.state
        if not state.is_valid:
            self._shown_array = None
            self.image_label.clear()
        elif state.image is not self._shown_array:
            self._shown_array = state.image
            self.image_label.set_image(numpy_to_qimage(state.image))
            if self._analysis_dialog is not None:
                self._analysis_dialog.refresh()
        else:
            self.image_label.refresh_geometry()
        self.update_status()
        self.update_selection_status()

    # Loading
    def open_path(self, path: str) -> bool:
        self.zoom_manager.sync_viewport_size()
        ok = self.session.open_file(path)
        if not ok:
            QMessageBox.warning(self, "Image load error", self.session.sink.last)
        return ok

    def open_files(self):
        """Open file dialog to load an image file."""
        path, _ = QFileDialog.getOpenFileName(
            self,
            "Open image",
            "",
            "Images (*.png *.jpg *.jpeg *.tif *.tiff *.bmp *.exr *.hdr *.npy *.edf *.raw);;All files (*)",
        )
        if path:
            self.open_path(path)

    def dragEnterEvent(self, e):
        if e.mimeData().hasUrls():
            e.acceptProposedAction()

    def dropEvent(self, e):
        files = [u.toLocalFile() for u in e.mimeData().urls()]
        image_files = [f for f in files if is_image_file(f)]
        if image_files:
            self.open_path(image_files[0])

    # Plugins
    def open_plugin(self):
        path, _ = QFileDialog.getOpenFileName(self, "Load filter plugin", "", "Python files (*.py)")
        if path and self.session.load_plugin(path):
            self.update_filters_menu()

    def update_filters_menu(self):
        self.filters_menu.clear()
        names = self.session.plugins.names()
        if not names:
            act = self.filters_menu.addAction("(no plugins loaded)")
            act.setEnabled(False)
            return
        for name in names:
            act = self.filters_menu.addAction(name)
            act.triggered.connect(lambda checked=False, n=name: self.session.apply_plugin(n))

    # Selection
    def on_selection_changed(self):
        self.update_selection_status()

    def select_all(self):
        self.session.select_all()
        self.image_label.update()
        self.on_selection_changed()

    def clear_selection(self):
        self.session.clear_selection()
        self.image_label.update()
        self.on_selection_changed()

    def _selection_center(self):
        tracker = self.session.tracker
        if tracker.has_selection():
            r = tracker.selection
            return ((r.x1 + r.x2) / 2.0, (r.y1 + r.y2) / 2.0)
        return None

    # Editing
    def copy(self):
        self.session.copy()

    def cut(self):
        self.session.cut()

    def paste(self):
        self.session.paste()

    def crop(self):
        self.session.crop()

    def rotate90(self):
        self.session.rotate90()

    def flip_horizontal(self):
        self.session.flip_horizontal()

    def flip_vertical(self):
        self.session.flip_vertical()

    def undo(self):
        self.session.undo()

    def resize_image(self):
        w, h = self.session.state.size
        text, ok = QInputDialog.getText(self, "Resize", "New size (W,H):", text=f"{w},{h}")
        if ok:
            self.session.resize(text)

    # Analysis
    def circular_average(self):
        radius, ok = QInputDialog.getInt(self, "Circular average", "Radius (px):", 10, 1, 100000)
        if ok:
            self.session.circular_average(radius, self._selection_center())

    def radial_sweep(self):
        text, ok = QInputDialog.getText(self, "Radial sweep", "Rmin,Rmax,step:", text="0,100,1")
        if not ok:
            return
        parts = [p.strip() for p in text.split(",")]
        if len(parts) != 3:
            self.session.report(f"Radial sweep: expected 'Rmin,Rmax,step', got {text!r}")
            return
        profile = self.session.radial_sweep(*parts, center=self._selection_center())
        if profile is not None:
            self.show_analysis_dialog("profile")

    def show_histogram(self):
        if self.session.histogram() is not None:
            self.show_analysis_dialog("histogram")

    def export_profile(self):
        if self.session.last_profile is None:
            QMessageBox.information(self, "Export", "Run a radial sweep first.")
            return
        path, _ = QFileDialog.getSaveFileName(self, "Export radial profile", "profile.csv", "CSV (*.csv)")
        if path:
            self.session.export_profile(path)

    def show_analysis_dialog(self, tab: Optional[str] = None):
        """Show the modeless analysis window (profile + histogram plots)."""
        if isinstance(tab, bool):
            tab = None
        if self._analysis_dialog is None:
            dlg = AnalysisDialog(self, self.session)
            dlg.finished.connect(lambda: setattr(self, "_analysis_dialog", None))
            self._analysis_dialog = dlg
        dlg = self._analysis_dialog
        dlg.refresh()
        if tab is not None:
            dlg.set_current_tab(tab)
        dlg.show()
        dlg.raise_()
        dlg.activateWindow()

    # Event handlers
    def eventFilter(self, obj, event):
        """Keep fit mode in sync with the viewport size."""
        if obj is self.scroll_area.viewport() and event.type() == QEvent.Resize:
            self.zoom_manager.sync_viewport_size()
        return super().eventFilter(obj, event)

    def closeEvent(self, event):
        """Close child dialogs and end the session."""
        if self._analysis_dialog is not None:
            self._analysis_dialog.close()
        if self.help_dialog.isVisible():
            self.help_dialog.close()
        self.session.state.remove_listener(self.refresh_display)
        self.results_panel.detach()
        self.session.close()
        event.accept()
