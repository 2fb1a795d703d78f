"""
Observables
===========
A titled group of GraphSeries sharing one axis, and how it is put on a
render surface.

Why is this file needed?
------------------------
The viewer shows two kinds of plots:
1. Spatial: x on the horizontal axis, one curve per series that changes with
   the selected time step.
2. Temporal: t on the horizontal axis, the whole time trace of every series is
   shown and only a tracer annotation moves with the selected time step.

Both variants expose the same `setup(surface)` / `update(surface, time_index)`
pair so the controller has a single call site. They share no base class; the
`Observable` alias is the closed set of variants.

Classes:
    SpatialObservable: Space-indexed series, one frame per time step.
    TemporalObservable: Time-indexed series with live tracer annotations.
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Union, TYPE_CHECKING

import numpy as np

from transientview.config import X_AXIS_LABEL, T_AXIS_LABEL, palette_color
from transientview.model.errors import ShapeMismatchError
from transientview.model.series import GraphSeries, union_range, widen_degenerate
from transientview.model.tracer import TracerState, compute_tracer_state

if TYPE_CHECKING:
    from transientview.model.surface import Handle, RenderSurface

logger = logging.getLogger(__name__)


def as_axis(values: np.ndarray | list[float], name: str) -> np.ndarray:
    """Convert to a float64 vector and require it to be non-empty and strictly ascending."""
    arr = np.asarray(values, dtype=np.float64).ravel()
    if arr.size == 0:
        raise ValueError(f"Axis '{name}' is empty.")
    if arr.size > 1 and not np.all(np.diff(arr) > 0):
        raise ValueError(f"Axis '{name}' is not strictly ascending.")
    return arr


def _global_range(series: list[GraphSeries]) -> tuple[float, float]:
    return union_range([s.display_range for s in series])


def _check_time_index(time_index: int, n_times: int) -> None:
    if not 0 <= time_index < n_times:
        raise IndexError(f"time_index {time_index} outside [0, {n_times})")


@dataclass
class SpatialObservable:
    title: str
    y_label: str
    x: np.ndarray
    t: np.ndarray
    series: list[GraphSeries] = field(default_factory=list)
    log_scale: bool = False

    _lines: list[Handle] = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.x = as_axis(self.x, "x")
        self.t = as_axis(self.t, "t")
        pending, self.series = self.series, []
        for s in pending:
            self.add_series(s)

    @property
    def n_times(self) -> int:
        return len(self.t)

    def add_series(self, series: GraphSeries) -> None:
        """
        Append a series whose samples are shaped (len(t), len(x)).

        Raises:
            ShapeMismatchError: if any frame length differs from the space axis,
                or the number of frames differs from the time axis.
        """
        expected = (len(self.t), len(self.x))
        if series.samples.ndim != 2 or series.samples.shape != expected:
            raise ShapeMismatchError(f"{self.title}/{series.title} frames", expected, series.samples.shape)
        self.series.append(series)

    def display_range(self) -> tuple[float, float]:
        """Union of all series' padded ranges."""
        return _global_range(self.series)

    def setup(self, surface: RenderSurface) -> None:
        logger.debug(f"Setting up spatial observable '{self.title}' ({len(self.series)} series)")
        surface.clear()
        self._lines = []

        surface.set_x_range(*widen_degenerate(float(self.x[0]), float(self.x[-1])))
        surface.set_x_label(X_AXIS_LABEL)

        for i, s in enumerate(self.series):
            self._lines.append(surface.add_line(s.title, palette_color(i)))

        if self.series:
            surface.set_y_range(*widen_degenerate(*self.display_range()))
        surface.set_y_label(self.y_label)
        surface.set_y_log_scale(self.log_scale)

    def update(self, surface: RenderSurface, time_index: int) -> None:
        _check_time_index(time_index, self.n_times)
        if len(self._lines) != len(self.series):
            raise RuntimeError(f"'{self.title}': setup() must be called before update().")

        for line, s in zip(self._lines, self.series):
            surface.set_line_data(line, self.x, s.frame(time_index))
        surface.redraw()


@dataclass
class _SeriesAnnotation:
    """Surface handles owned by one temporal series for its display lifetime."""
    line: Handle
    tracer: Handle
    label: Handle
    connector: Handle


@dataclass
class TemporalObservable:
    title: str
    y_label: str
    x: np.ndarray
    t: np.ndarray
    series: list[GraphSeries] = field(default_factory=list)
    log_scale: bool = False

    tracers: list[TracerState] = field(default_factory=list, init=False, repr=False, compare=False)
    _annotations: list[_SeriesAnnotation] = field(default_factory=list, init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        self.x = as_axis(self.x, "x")
        self.t = as_axis(self.t, "t")
        pending, self.series = self.series, []
        for s in pending:
            self.add_series(s)

    @property
    def n_times(self) -> int:
        return len(self.t)

    def add_series(self, series: GraphSeries) -> None:
        """
        Append a series whose sample vector has one value per time step.

        Raises:
            ShapeMismatchError: if the vector length differs from the time axis.
        """
        expected = (len(self.t),)
        if series.samples.ndim != 1 or series.samples.shape != expected:
            raise ShapeMismatchError(f"{self.title}/{series.title} samples", expected, series.samples.shape)
        self.series.append(series)

    def display_range(self) -> tuple[float, float]:
        """Union of all series' padded ranges."""
        return _global_range(self.series)

    def setup(self, surface: RenderSurface) -> None:
        logger.debug(f"Setting up temporal observable '{self.title}' ({len(self.series)} series)")
        surface.clear()
        self._annotations = []
        self.tracers = []

        surface.set_x_range(*widen_degenerate(float(self.t[0]), float(self.t[-1])))
        surface.set_x_label(T_AXIS_LABEL)

        for i, s in enumerate(self.series):
            color = palette_color(i)
            line = surface.add_line(s.title, color)
            self._annotations.append(_SeriesAnnotation(
                line=line,
                tracer=surface.add_tracer(line),
                label=surface.add_label(color),
                connector=surface.add_connector(color),
            ))

        if self.series:
            surface.set_y_range(*widen_degenerate(*self.display_range()))
        surface.set_y_label(self.y_label)
        surface.set_y_log_scale(self.log_scale)

    def update(self, surface: RenderSurface, time_index: int) -> None:
        _check_time_index(time_index, self.n_times)
        if len(self._annotations) != len(self.series):
            raise RuntimeError(f"'{self.title}': setup() must be called before update().")

        tracers = []
        if self.series:
            global_range = widen_degenerate(*self.display_range())
        for handles, s in zip(self._annotations, self.series):
            surface.set_line_data(handles.line, self.t, s.samples)

            state = compute_tracer_state(s.title, self.t, s.samples, time_index, global_range)
            surface.position_tracer(handles.tracer, *state.marker, interpolating=state.interpolating)
            surface.position_label(handles.label, state.text, *state.label_position, anchor=state.label_anchor)
            surface.position_connector(handles.connector, state.connector)
            tracers.append(state)

        self.tracers = tracers
        surface.redraw()


Observable = Union[SpatialObservable, TemporalObservable]
