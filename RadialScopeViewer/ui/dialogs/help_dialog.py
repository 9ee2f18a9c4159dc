"""Help dialog showing keyboard shortcuts."""

from PySide6.QtWidgets import QDialog, QTextEdit, QVBoxLayout


class HelpDialog(QDialog):
    """Dialog showing keyboard shortcuts and usage help."""

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setWindowTitle("Help / Keyboard shortcuts")
        self.resize(640, 520)

        text = QTextEdit(self)
        text.setReadOnly(True)

        content = (
            "RadialScopeViewer help\n"
            "================================\n\n"
            "[Basics]\n"
            "  Ctrl+O : Open image\n"
            "  + / - / Ctrl+wheel : Zoom in / zoom out\n"
            "  f      : Fit to window (stays fitted while resizing)\n"
            "  Ctrl+Z : Undo\n\n"
            "[Selection and editing]\n"
            "  Left drag : Select a rectangle (added to the ROI list)\n"
            "  Right click : Print the pixel value to the results panel\n"
            "  Ctrl+A / Esc : Select all / clear selection\n"
            "  Ctrl+C / Ctrl+X / Ctrl+V : Copy / cut / paste\n"
            "  Edit > Paste mode : AND, OR, XOR or BLEND (replace)\n"
            "  Ctrl+Shift+X : Crop to selection\n"
            "  Ctrl+R : Resize (W,H)\n"
            "  r / h / v : Rotate 90 / flip horizontal / flip vertical\n\n"
            "[Analysis]\n"
            "  c : Circular average at one radius\n"
            "  s : Radial sweep (Rmin,Rmax,step)\n"
            "  g : Luminance histogram\n"
            "  a : Analysis window (profile and histogram plots)\n"
            "  Ctrl+E : Export the last radial sweep as CSV\n\n"
            "[Notes]\n"
            "  - Analysis is centered on the selection when one exists,\n"
            "    otherwise on the image center.\n"
            "  - Filter plugins are Python files defining apply_filter(image).\n"
        )
        text.setPlainText(content)

        layout = QVBoxLayout(self)
        layout.addWidget(text)
