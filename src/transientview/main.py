"""
Application Initialization
==========================
This module constructs the Model-View-Controller objects and starts the Qt
event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Configures logging.
2. Creates the QApplication.
3. Instantiates the ViewerState (Model) and the MainWindow (View), which owns
   the ViewerController.
4. Optionally opens a dataset directory given on the command line.
"""
from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import Optional, Sequence

import pyqtgraph as pg
from PySide6.QtCore import QCoreApplication
from PySide6.QtWidgets import QApplication

from transientview.logging_config import setup_logging
from transientview.model.state import ViewerState
from transientview.view.main_window import MainWindow, VISIBLE_APP_NAME

APP_ID = "transientview"

logger = logging.getLogger(__name__)


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="transientview",
        description="Interactive viewer for time-resolved device simulation output.",
    )
    parser.add_argument("directory", nargs="?", help="dataset directory to open at startup")
    parser.add_argument("--debug", action="store_true", help="enable debug logging")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    return parser.parse_args(argv)


def create_app(argv: Sequence[str]) -> QApplication:
    """Create and configure the QApplication instance."""
    os.environ.setdefault("QT_ENABLE_HIGHDPI_SCALING", "1")

    QCoreApplication.setApplicationName(APP_ID)
    app = QApplication(list(argv))
    app.setApplicationDisplayName(VISIBLE_APP_NAME)

    pg.setConfigOption("background", "w")
    pg.setConfigOption("foreground", "k")
    pg.setConfigOptions(antialias=True)
    return app


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # 1. Logging (console + optional file)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Qt application
    app = create_app([sys.argv[0]])

    # 3. Model + View (the window owns the controller)
    state = ViewerState()
    window = MainWindow(state)
    window.show()

    # 4. Optional dataset from the command line
    if args.directory:
        window.open_directory(args.directory)

    # 5. Event loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
