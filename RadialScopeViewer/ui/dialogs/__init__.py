"""Dialogs package."""

from .help_dialog import HelpDialog
from .analysis_dialog import AnalysisDialog

__all__ = ["HelpDialog", "AnalysisDialog"]
