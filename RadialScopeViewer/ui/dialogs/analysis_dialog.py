"""Analysis dialog with radial profile and histogram tabs.

- Profile tab: average luminance vs. radius from the session's last radial
  sweep, with summary statistics, CSV copy and CSV export.
- Histogram tab: normalized 256-bucket luminance histogram of the current
  image with mean / std / median / min / max.

The dialog is modeless; the viewer calls ``refresh()`` whenever the image or
the last profile changes.
"""

from typing import Optional

import numpy as np
import pyqtgraph as pg
from pyqtgraph import PlotWidget

from PySide6.QtGui import QGuiApplication
from PySide6.QtWidgets import (
    QDialog,
    QVBoxLayout,
    QHBoxLayout,
    QTabWidget,
    QWidget,
    QPushButton,
    QTableWidget,
    QTableWidgetItem,
    QHeaderView,
    QFileDialog,
)

from ...core.histogram import luminance_histogram, normalize_histogram, histogram_stats
from ...core.radial import profile_summary, profile_to_csv


def _make_plot(left: str, bottom: str) -> PlotWidget:
    plot = PlotWidget()
    plot.setLabel("left", left)
    plot.setLabel("bottom", bottom)
    plot.setBackground("white")
    plot.showGrid(x=True, y=True, alpha=0.4)
    plot.getAxis("left").setPen(pg.mkPen(color="#7f8c8d", width=1))
    plot.getAxis("bottom").setPen(pg.mkPen(color="#7f8c8d", width=1))
    plot.getAxis("left").setTextPen(pg.mkPen(color="#2c3e50"))
    plot.getAxis("bottom").setTextPen(pg.mkPen(color="#2c3e50"))
    return plot


def _make_stats_table() -> QTableWidget:
    table = QTableWidget(0, 2)
    table.setHorizontalHeaderLabels(["Stat", "Value"])
    table.verticalHeader().setVisible(False)
    table.horizontalHeader().setSectionResizeMode(QHeaderView.Stretch)
    table.setMaximumHeight(180)
    return table


def _fill_stats_table(table: QTableWidget, rows: dict):
    table.setRowCount(len(rows))
    for i, (key, value) in enumerate(rows.items()):
        table.setItem(i, 0, QTableWidgetItem(str(key)))
        if value is None:
            text = "-"
        elif isinstance(value, float):
            text = "-" if np.isnan(value) else f"{value:.4f}"
        else:
            text = str(value)
        table.setItem(i, 1, QTableWidgetItem(text))


class AnalysisDialog(QDialog):
    """Modeless analysis window for one ViewerSession.

    Args:
        parent: Parent widget (typically ImageViewer)
        session: ViewerSession providing the image and the last radial profile
    """

    TABS = {"profile": 0, "histogram": 1}

    def __init__(self, parent=None, session=None):
        super().__init__(parent)
        self.setWindowTitle("Analysis")
        self.resize(900, 600)
        self.session = session
        self.last_hist: Optional[np.ndarray] = None
        self._build_ui()

    def _build_ui(self):
        main = QVBoxLayout(self)
        self.tabs = QTabWidget()
        main.addWidget(self.tabs)

        # Profile tab
        prof = QWidget()
        prof_layout = QVBoxLayout(prof)
        self.prof_widget = _make_plot("Average luminance", "Radius (px)")
        prof_layout.addWidget(self.prof_widget)
        self.prof_stats_table = _make_stats_table()
        prof_layout.addWidget(self.prof_stats_table)
        buttons = QHBoxLayout()
        self.prof_copy_btn = QPushButton("Copy data")
        self.prof_copy_btn.clicked.connect(self.copy_profile_to_clipboard)
        self.prof_export_btn = QPushButton("Export CSV...")
        self.prof_export_btn.clicked.connect(self.export_profile)
        buttons.addStretch(1)
        buttons.addWidget(self.prof_copy_btn)
        buttons.addWidget(self.prof_export_btn)
        prof_layout.addLayout(buttons)
        self.tabs.addTab(prof, "Radial profile")

        # Histogram tab
        hist = QWidget()
        hist_layout = QVBoxLayout(hist)
        self.hist_widget = _make_plot("Fraction of pixels", "Luminance")
        hist_layout.addWidget(self.hist_widget)
        self.hist_stats_table = _make_stats_table()
        hist_layout.addWidget(self.hist_stats_table)
        hist_buttons = QHBoxLayout()
        self.hist_copy_btn = QPushButton("Copy data")
        self.hist_copy_btn.clicked.connect(self.copy_histogram_to_clipboard)
        hist_buttons.addStretch(1)
        hist_buttons.addWidget(self.hist_copy_btn)
        hist_layout.addLayout(hist_buttons)
        self.tabs.addTab(hist, "Histogram")

        close_row = QHBoxLayout()
        close_btn = QPushButton("Close")
        close_btn.clicked.connect(self.close)
        close_row.addStretch(1)
        close_row.addWidget(close_btn)
        main.addLayout(close_row)

    def set_current_tab(self, name: str):
        self.tabs.setCurrentIndex(self.TABS.get(name, 0))

    def refresh(self):
        self.update_profile()
        self.update_histogram()

    def update_profile(self):
        self.prof_widget.clear()
        profile = self.session.last_profile
        has_profile = profile is not None and len(profile) > 0
        self.prof_copy_btn.setEnabled(has_profile)
        self.prof_export_btn.setEnabled(has_profile)
        if not has_profile:
            _fill_stats_table(self.prof_stats_table, {})
            return
        radii = profile.radii().astype(float)
        averages = profile.averages()
        valid = ~np.isnan(averages)
        # connect="finite" leaves gaps where a radius had no pixels
        self.prof_widget.plot(radii, averages, pen=pg.mkPen(color="#2c3e50", width=2), connect="finite")
        if valid.any():
            self.prof_widget.plot(
                radii[valid], averages[valid], pen=None, symbol="o", symbolSize=4, symbolBrush="#e74c3c"
            )
        summary = profile_summary(profile)
        summary["center"] = f"({profile.center[0]:g}, {profile.center[1]:g})"
        _fill_stats_table(self.prof_stats_table, summary)

    def update_histogram(self):
        self.hist_widget.clear()
        state = self.session.state
        if not state.is_valid:
            self.last_hist = None
            self.hist_copy_btn.setEnabled(False)
            _fill_stats_table(self.hist_stats_table, {})
            return
        counts = luminance_histogram(state.image)
        self.last_hist = counts
        self.hist_copy_btn.setEnabled(True)
        xs = np.arange(len(counts) + 1)
        self.hist_widget.plot(
            xs, normalize_histogram(counts), stepMode="center", fillLevel=0, brush=(44, 62, 80, 120)
        )
        _fill_stats_table(self.hist_stats_table, histogram_stats(state.image))

    def copy_profile_to_clipboard(self):
        if self.session.last_profile is not None:
            QGuiApplication.clipboard().setText(profile_to_csv(self.session.last_profile))

    def copy_histogram_to_clipboard(self):
        if self.last_hist is None:
            return
        lines = ["value,count"] + [f"{i},{int(c)}" for i, c in enumerate(self.last_hist)]
        QGuiApplication.clipboard().setText("\n".join(lines))

    def export_profile(self):
        path, _ = QFileDialog.getSaveFileName(self, "Export radial profile", "profile.csv", "CSV (*.csv)")
        if path:
            self.session.export_profile(path)
