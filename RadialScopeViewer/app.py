"""Application entry point.

This module provides the main() function that configures logging,
initializes the Qt application and displays the ImageViewer window.

Usage:
    radialscope [image ...]

    # Or as a module:
    python -m RadialScopeViewer.app

    # Or from Python:
    from RadialScopeViewer import main
    main()
"""

import logging
import os
import sys

from PySide6.QtWidgets import QApplication

from .ui.viewer import ImageViewer

LOG_LEVEL_ENV = "RADIALSCOPE_LOG_LEVEL"


def configure_logging():
    level_name = os.environ.get(LOG_LEVEL_ENV, "INFO").upper()
    logging.basicConfig(
        level=getattr(logging, level_name, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def main(argv=None):
    """Run the image viewer application.

    Args:
        argv: Command-line arguments (defaults to sys.argv); extra
            arguments are opened as images

    Returns:
        Exit code from QApplication.exec()
    """
    if argv is None:
        argv = sys.argv
    configure_logging()
    app = QApplication(argv)

    w = ImageViewer()
    w.show()
    for path in app.arguments()[1:]:
        w.open_path(path)
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
