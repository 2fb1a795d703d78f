"""
Main Application Window
=======================
The GUI shell: open button, observable selector, time label, plot and time
scroll bar.

Why is this file needed?
------------------------
1. Layout: It organizes the visual structure of the viewer.
2. Routing: It forwards widget signals (directory chosen, selection changed,
   time changed) to the ViewerController and mirrors the controller's state
   back into the widgets.
"""
from __future__ import annotations

import logging
from typing import Optional

import pyqtgraph as pg
from PySide6.QtCore import Qt
from PySide6.QtWidgets import (
    QWidget, QGridLayout, QPushButton, QComboBox, QLabel, QScrollBar,
    QFileDialog, QMessageBox
)

from transientview.config import SCROLL_MAXIMUM, WINDOW_SIZE
from transientview.controller.viewer import ViewerController
from transientview.model.state import ViewerState
from transientview.view.plot_surface import PlotSurface

logger = logging.getLogger(__name__)

VISIBLE_APP_NAME = "Transient Viewer"


class MainWindow(QWidget):
    def __init__(self, state: Optional[ViewerState] = None, parent: Optional[QWidget] = None) -> None:
        super().__init__(parent)
        self.setWindowTitle(VISIBLE_APP_NAME)
        self.resize(*WINDOW_SIZE)

        layout = QGridLayout(self)

        # --- Top row ---
        self.btn_open = QPushButton("Open Directory")
        self.btn_open.clicked.connect(self.on_open_clicked)
        layout.addWidget(self.btn_open, 0, 0)

        self.selection_box = QComboBox()
        self.selection_box.setEnabled(False)
        self.selection_box.currentIndexChanged.connect(self.on_selection_changed)
        layout.addWidget(self.selection_box, 0, 1)

        self.lbl_time = QLabel("t = -")
        self.lbl_time.setAlignment(Qt.AlignRight | Qt.AlignVCenter)
        layout.addWidget(self.lbl_time, 0, 2)

        # --- Plot ---
        self.plot_widget = pg.PlotWidget()
        self.plot_widget.setBackground('w')
        self.plot_widget.setMouseEnabled(x=True, y=True)
        layout.addWidget(self.plot_widget, 1, 0, 1, 3)

        # --- Time scroll bar ---
        self.time_scrollbar = QScrollBar(Qt.Horizontal)
        self.time_scrollbar.setTracking(True)
        self.time_scrollbar.setRange(0, SCROLL_MAXIMUM)
        self.time_scrollbar.setValue(0)
        self.time_scrollbar.setEnabled(False)
        self.time_scrollbar.valueChanged.connect(self.on_time_changed)
        layout.addWidget(self.time_scrollbar, 2, 0, 1, 3)

        self.surface = PlotSurface(self.plot_widget)
        self.controller = ViewerController(self.surface, state)

    # --- SLOTS ---

    def on_open_clicked(self) -> None:
        directory = QFileDialog.getExistingDirectory(
            self, "Open Directory", "",
            QFileDialog.ShowDirsOnly | QFileDialog.DontResolveSymlinks
        )
        if directory:
            self.open_directory(directory)

    def open_directory(self, directory: str) -> bool:
        """Load a dataset directory and refresh every widget from the controller."""
        if not self.controller.open_directory(directory):
            QMessageBox.warning(self, "Open Directory", f"Could not load dataset:\n{self.controller.last_error}")
            return False

        # Rebuild widgets without re-entering the controller through their signals
        self.selection_box.blockSignals(True)
        self.time_scrollbar.blockSignals(True)

        self.selection_box.clear()
        self.selection_box.addItems(self.controller.titles())
        self.selection_box.setCurrentIndex(0)
        self.selection_box.setEnabled(bool(self.controller.titles()))

        self.time_scrollbar.setValue(0)
        self.time_scrollbar.setEnabled(True)

        self.selection_box.blockSignals(False)
        self.time_scrollbar.blockSignals(False)

        self.lbl_time.setText(self.controller.time_label())
        self.setWindowTitle(f"{VISIBLE_APP_NAME} - [{directory}]")
        return True

    def on_selection_changed(self, index: int) -> None:
        self.controller.select_observable(index)

    def on_time_changed(self, value: int) -> None:
        self.controller.set_time(value, self.time_scrollbar.maximum())
        self.lbl_time.setText(self.controller.time_label())
