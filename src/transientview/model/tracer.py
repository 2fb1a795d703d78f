"""
Tracer Geometry
===============
Computes where the live annotation of a temporal series goes for one time step:
the tracer marker on the curve, the value label next to it, and the curved
connector from the label to the marker.

Why is this file needed?
------------------------
The layout is pure arithmetic on (time index, sample value, display range,
axis span). Keeping it out of the Qt code makes it deterministic and testable:
the same inputs always reproduce the same TracerState, so repeated updates at
one time step never drift.

Coordinates:
    Positions are in data coordinates. Offsets and control vectors of the
    connector are in display units (pixels) with the y axis pointing UP, and
    are converted by the render surface.
"""
from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING

from transientview.config import (
    CONNECTOR_CURVATURE,
    CONNECTOR_END_OFFSET,
    LABEL_OFFSET_FRACTION,
    LABEL_SIGNIFICANT_DIGITS,
)

if TYPE_CHECKING:
    import numpy as np

Point = tuple[float, float]


class LabelSide(StrEnum):
    """Side of the marker the label is placed on."""
    RIGHT = "right"
    LEFT = "left"


@dataclass(frozen=True)
class ConnectorGeometry:
    """
    A cubic curve from the label edge to (just short of) the marker.

    Attributes:
        start: Label anchor edge, data coordinates.
        end: Marker position, data coordinates.
        end_offset: Shift of the curve end away from `end`, display units.
        start_direction: Control vector at the start, display units.
        end_direction: Control vector at the (offset) end, display units.
    """
    start: Point
    end: Point
    end_offset: Point
    start_direction: Point
    end_direction: Point


@dataclass(frozen=True)
class TracerState:
    marker: Point
    interpolating: bool
    text: str
    label_position: Point
    label_side: LabelSide
    label_above: bool
    connector: ConnectorGeometry

    @property
    def label_anchor(self) -> Point:
        """Anchor of the label box as (fx, fy) fractions: its left or right edge, vertically centered."""
        return (0.0, 0.5) if self.label_side is LabelSide.RIGHT else (1.0, 0.5)


def format_value(value: float, digits: int = LABEL_SIGNIFICANT_DIGITS) -> str:
    """Compact notation with `digits` significant digits, e.g. 1.235e-05 or 0.5."""
    return f"{value:.{digits}g}"


def label_text(title: str, value: float) -> str:
    return f"{title}:\n{format_value(value)}"


def label_side_for(time_index: int, n_times: int) -> LabelSide:
    """Right of the marker in the first half of the time axis, left otherwise."""
    return LabelSide.RIGHT if 2 * time_index < n_times else LabelSide.LEFT


def compute_tracer_state(
    title: str,
    t: np.ndarray,
    values: np.ndarray,
    time_index: int,
    display_range: tuple[float, float],
) -> TracerState:
    """
    Lay out the annotation of one temporal series at `time_index`.

    Args:
        title: Series title, used as the label prefix.
        t: Ascending time axis.
        values: Sample vector of the series, same length as `t`.
        time_index: Selected time step, 0 <= time_index < len(t).
        display_range: Global (lo, hi) range of the owning observable.

    Returns:
        The complete, freshly computed TracerState.
    """
    n_times = len(t)
    if not 0 <= time_index < n_times:
        raise IndexError(f"time_index {time_index} outside [0, {n_times})")

    t_m = float(t[time_index])
    value = float(values[time_index])
    span = float(t[-1]) - float(t[0])
    lo, hi = display_range
    height = hi - lo

    side = label_side_for(time_index, n_times)
    dx = LABEL_OFFSET_FRACTION * span
    if side is LabelSide.LEFT:
        dx = -dx

    above = value < 0.5 * (lo + hi)
    dy = LABEL_OFFSET_FRACTION * height
    if not above:
        dy = -dy

    label_position = (t_m + dx, value + dy)

    # the curve leaves the label heading towards the marker and enters it from the label's side
    toward = 1.0 if side is LabelSide.RIGHT else -1.0
    vertical = -1.0 if above else 1.0
    connector = ConnectorGeometry(
        start=label_position,
        end=(t_m, value),
        end_offset=(toward * CONNECTOR_END_OFFSET, 0.0),
        start_direction=(0.0, vertical * CONNECTOR_CURVATURE),
        end_direction=(0.0, -vertical * CONNECTOR_CURVATURE),
    )

    return TracerState(
        marker=(t_m, value),
        interpolating=True,
        text=label_text(title, value),
        label_position=label_position,
        label_side=side,
        label_above=above,
        connector=connector,
    )
