"""Menu and keyboard shortcut configuration for ImageViewer.

This module handles the creation of all menus and window-level
keyboard shortcuts for the image viewer.
"""

from PySide6.QtGui import QAction, QActionGroup
from PySide6.QtCore import Qt

from ...core.editing import BlendMode


def _action(viewer, text, slot, shortcut=None):
    act = QAction(text, viewer)
    if shortcut:
        act.setShortcut(shortcut)
        act.setShortcutContext(Qt.WindowShortcut)
        viewer.addAction(act)
    act.triggered.connect(lambda checked=False: slot())
    return act


def create_menus(viewer):
    """Create all menus and keyboard shortcuts for the viewer.

    Args:
        viewer: ImageViewer instance
    """
    menubar = viewer.menuBar()

    # File menu
    file_menu = menubar.addMenu("File")
    file_menu.addAction(_action(viewer, "Open image...", viewer.open_files, "Ctrl+O"))
    file_menu.addAction(_action(viewer, "Load filter plugin...", viewer.open_plugin))
    file_menu.addSeparator()
    file_menu.addAction(_action(viewer, "Export radial profile CSV...", viewer.export_profile, "Ctrl+E"))
    file_menu.addSeparator()
    file_menu.addAction(_action(viewer, "Quit", viewer.close, "Ctrl+Q"))

    # Edit menu
    edit_menu = menubar.addMenu("Edit")
    edit_menu.addAction(_action(viewer, "Undo", viewer.undo, "Ctrl+Z"))
    edit_menu.addSeparator()
    edit_menu.addAction(_action(viewer, "Select all", viewer.select_all, "Ctrl+A"))
    edit_menu.addAction(_action(viewer, "Clear selection", viewer.clear_selection, "Esc"))
    edit_menu.addAction(_action(viewer, "Copy", viewer.copy, "Ctrl+C"))
    edit_menu.addAction(_action(viewer, "Cut", viewer.cut, "Ctrl+X"))
    edit_menu.addAction(_action(viewer, "Paste", viewer.paste, "Ctrl+V"))

    mode_menu = edit_menu.addMenu("Paste mode")
    group = QActionGroup(viewer)
    group.setExclusive(True)
    for mode in BlendMode:
        act = QAction(mode.name, viewer)
        act.setCheckable(True)
        act.setChecked(mode is viewer.session.blend_mode)
        act.triggered.connect(lambda checked=False, m=mode: viewer.session.set_blend_mode(m))
        group.addAction(act)
        mode_menu.addAction(act)

    edit_menu.addSeparator()
    edit_menu.addAction(_action(viewer, "Crop to selection", viewer.crop, "Ctrl+Shift+X"))
    edit_menu.addAction(_action(viewer, "Resize...", viewer.resize_image, "Ctrl+R"))
    edit_menu.addAction(_action(viewer, "Rotate 90°", viewer.rotate90, "r"))
    edit_menu.addAction(_action(viewer, "Flip horizontal", viewer.flip_horizontal, "h"))
    edit_menu.addAction(_action(viewer, "Flip vertical", viewer.flip_vertical, "v"))

    # View menu
    view_menu = menubar.addMenu("View")
    view_menu.addAction(_action(viewer, "Zoom in", viewer.zoom_in, "+"))
    view_menu.addAction(_action(viewer, "Zoom out", viewer.zoom_out, "-"))
    view_menu.addAction(_action(viewer, "Fit to window", viewer.fit_to_window, "f"))

    # Filters menu (filled from the plugin host)
    viewer.filters_menu = menubar.addMenu("Filters")
    viewer.update_filters_menu()

    # Analysis menu
    analysis = menubar.addMenu("Analysis")
    analysis.addAction(_action(viewer, "Circular average...", viewer.circular_average, "c"))
    analysis.addAction(_action(viewer, "Radial sweep...", viewer.radial_sweep, "s"))
    analysis.addAction(_action(viewer, "Histogram", viewer.show_histogram, "g"))
    analysis.addSeparator()
    analysis.addAction(_action(viewer, "Analysis window", viewer.show_analysis_dialog, "a"))

    # Help menu
    help_menu = menubar.addMenu("Help")
    help_menu.addAction(_action(viewer, "Keyboard shortcuts", viewer.help_dialog.show))
