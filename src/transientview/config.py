"""
Configuration & Constants
=========================
This module serves as the central registry for file names and global constants.

Why is this file needed?
------------------------
1. Abstraction: It prevents magic numbers (padding fractions, pixel offsets,
   palette entries) from being scattered throughout the model and the view.
2. Consistency: The dataset loader, the observables and the GUI shell all read
   the same file names and axis labels from here.

Exports:
    COLOR_PALETTE (tuple): RGB colors assigned to series in order.
    ARRAY_EXTENSIONS (tuple): Search order when resolving array files.
"""
from __future__ import annotations

# --- Display range ---
PADDING_FRACTION: float = 0.05
MIN_AXIS_SPAN: float = 1e-12

# --- Annotation geometry ---
LABEL_OFFSET_FRACTION: float = 0.10
CONNECTOR_END_OFFSET: float = 7.0  # display units (px)
CONNECTOR_CURVATURE: float = 20.0  # display units (px)
LABEL_SIGNIFICANT_DIGITS: int = 4

# --- Colors ---
COLOR_PALETTE: tuple[tuple[int, int, int], ...] = (
    (0, 84, 159),    # blue
    (204, 7, 30),    # red
    (97, 33, 88),    # violet
    (87, 171, 39),   # green
)
TRACER_COLOR: tuple[int, int, int] = (255, 0, 0)
TRACER_SIZE: int = 7

# --- Axis labels ---
X_AXIS_LABEL: str = "x / nm"
T_AXIS_LABEL: str = "t / s"

# --- Input directory layout ---
DEVICE_FILE: str = "device.ini"
ARRAY_EXTENSIONS: tuple[str, ...] = (".arma", ".npy", ".h5", ".txt", ".dat")

# --- GUI shell ---
SCROLL_MAXIMUM: int = 9999
TIME_LABEL_SCALE: float = 1e12
TIME_LABEL_UNIT: str = "ps"
TIME_LABEL_DECIMALS: int = 5
WINDOW_SIZE: tuple[int, int] = (800, 600)


def palette_color(index: int) -> tuple[int, int, int]:
    """Color for the series at `index`; the palette is reused cyclically."""
    return COLOR_PALETTE[index % len(COLOR_PALETTE)]
