"""UI components package."""

from .viewer import ImageViewer
from .widgets import ImageLabel, ResultsPanel
from .dialogs import HelpDialog, AnalysisDialog

__all__ = [
    "ImageViewer",
    "ImageLabel",
    "ResultsPanel",
    "HelpDialog",
    "AnalysisDialog",
]
