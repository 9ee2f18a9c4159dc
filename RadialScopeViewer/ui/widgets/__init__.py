"""Custom widgets for the main window."""

from .image_label import ImageLabel
from .results_panel import ResultsPanel

__all__ = ["ImageLabel", "ResultsPanel"]
