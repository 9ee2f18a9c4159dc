"""Read-only text panel mirroring the session's results feed."""

from PySide6.QtGui import QFont
from PySide6.QtWidgets import QPlainTextEdit


class ResultsPanel(QPlainTextEdit):
    """Append-only view of a ResultsFeed."""

    def __init__(self, feed, parent=None):
        super().__init__(parent)
        self.setReadOnly(True)
        self.setMaximumBlockCount(5000)
        font = QFont("Monospace")
        font.setStyleHint(QFont.TypeWriter)
        self.setFont(font)
        self.feed = feed
        for line in feed.lines:
            self.appendPlainText(line)
        feed.subscribe(self.appendPlainText)

    def detach(self):
        self.feed.unsubscribe(self.appendPlainText)
