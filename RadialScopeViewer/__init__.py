"""RadialScopeViewer - an image viewer with radial intensity profiling.

This package provides a Qt-based viewer for scattering-pattern style images
with the following features:

Core Features:
    - Loading common image formats, NumPy arrays, EXR/HDR and the legacy
      fixed-layout raw detector format
    - Zoom in/out and fit-to-window
    - Rectangular selection with an ROI list
    - Copy / cut / paste with AND, OR, XOR and BLEND compositing
    - Rotate, flip, crop and resize with bounded undo history
    - Filter plugins loaded from a directory

Analysis Tools:
    - Circular average at a single radius
    - Radial sweep over a radius range with CSV export
    - 256-bucket luminance histogram

Package Structure:
    - core/: UI-independent state, editing and analysis (no Qt imports)
    - ui/: PySide6 main window, widgets and dialogs

Quick Start:
    from RadialScopeViewer import main
    main()

Dependencies:
    - PySide6: Qt for Python
    - numpy: Array operations
    - opencv-python: Image decoding and resizing
    - OpenImageIO: EXR/HDR decoding
    - exifread: EXIF metadata for the load summary
    - pyqtgraph: Profile and histogram plots
    - polars: Reading exported profile CSV files
"""

__version__ = "0.1.0"
__all__ = ["main"]


def main(argv=None):
    """Run the viewer (imports Qt lazily so the core stays display-free)."""
    from .app import main as _main

    return _main(argv)
