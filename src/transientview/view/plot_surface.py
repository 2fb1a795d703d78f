"""
PyQtGraph Render Surface
========================
Implements the render surface contract (`transientview.model.surface`) on a
`pg.PlotWidget`.

Why is this file needed?
------------------------
The observables only describe WHAT to draw: lines, a tracer marker, a text
label and a curved connector with pixel offsets. This class owns the
pyqtgraph items and converts display-unit (pixel) offsets into data
coordinates using the current view box scale. Connectors are re-laid out
whenever the view range changes so they keep their on-screen shape while
panning and zooming.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
import math
from typing import Optional, TYPE_CHECKING

import numpy as np
import pyqtgraph as pg
from PySide6.QtCore import QPointF
from PySide6.QtGui import QPainterPath
from PySide6.QtWidgets import QGraphicsPathItem

from transientview.config import TRACER_COLOR, TRACER_SIZE

if TYPE_CHECKING:
    from transientview.model.surface import Color
    from transientview.model.tracer import ConnectorGeometry

logger = logging.getLogger(__name__)


@dataclass
class _Tracer:
    line: pg.PlotDataItem
    marker: pg.ScatterPlotItem


@dataclass
class _Connector:
    path: QGraphicsPathItem
    arrow: pg.ArrowItem
    geometry: Optional[ConnectorGeometry] = None


class PlotSurface:
    """Render surface backed by a single pyqtgraph plot."""

    def __init__(self, plot_widget: pg.PlotWidget) -> None:
        self.widget = plot_widget
        self.plot_item: pg.PlotItem = plot_widget.getPlotItem()
        self.view_box: pg.ViewBox = self.plot_item.getViewBox()

        self.plot_item.showGrid(x=True, y=True, alpha=0.3)
        self.plot_item.addLegend(offset=(10, 10))

        self._log_y: bool = False
        self._y_range: Optional[tuple[float, float]] = None
        self._connectors: list[_Connector] = []

        self.view_box.sigRangeChanged.connect(self._refresh_connectors)

    # --- lines ---

    def clear(self) -> None:
        self.plot_item.clear()
        self._connectors = []
        self._y_range = None

    def add_line(self, name: str, color: Color) -> pg.PlotDataItem:
        return self.plot_item.plot([], [], pen=pg.mkPen(color=color, width=2), name=name)

    def set_line_data(self, line: pg.PlotDataItem, x: np.ndarray, y: np.ndarray) -> None:
        line.setData(x, y)

    # --- axes ---

    def set_x_range(self, lo: float, hi: float) -> None:
        self.plot_item.setXRange(lo, hi, padding=0)

    def set_y_range(self, lo: float, hi: float) -> None:
        self._y_range = (lo, hi)
        self._apply_y_range()

    def set_x_label(self, text: str) -> None:
        self.plot_item.setLabel("bottom", text)

    def set_y_label(self, text: str) -> None:
        self.plot_item.setLabel("left", text)

    def set_y_log_scale(self, enabled: bool) -> None:
        self._log_y = enabled
        self.plot_item.setLogMode(x=False, y=enabled)
        self._apply_y_range()

    def _apply_y_range(self) -> None:
        if self._y_range is None:
            return
        lo, hi = self._y_range
        if self._log_y:
            if lo <= 0 or hi <= 0:
                logger.warning(f"Non-positive y range {self._y_range} on a log axis, using auto range")
                self.view_box.enableAutoRange(axis=pg.ViewBox.YAxis)
                return
            lo, hi = math.log10(lo), math.log10(hi)
        self.plot_item.setYRange(lo, hi, padding=0)

    def _view_y(self, y: float) -> float:
        """Data value -> view box coordinate (log10 on a log axis)."""
        if self._log_y:
            return math.log10(y) if y > 0 else float("nan")
        return y

    # --- annotations ---

    def add_tracer(self, line: pg.PlotDataItem) -> _Tracer:
        marker = pg.ScatterPlotItem(
            size=TRACER_SIZE,
            symbol="o",
            pen=pg.mkPen(TRACER_COLOR),
            brush=pg.mkBrush(TRACER_COLOR),
        )
        self.plot_item.addItem(marker, ignoreBounds=True)
        return _Tracer(line=line, marker=marker)

    def position_tracer(self, tracer: _Tracer, x: float, y: float, interpolating: bool) -> None:
        if interpolating:
            xs, ys = tracer.line.getOriginalDataset()
            if xs is not None and len(xs) > 0:
                y = float(np.interp(x, xs, ys))
        tracer.marker.setData([x], [self._view_y(y)])

    def add_label(self, color: Color) -> pg.TextItem:
        label = pg.TextItem(
            color=color,
            anchor=(0.0, 0.5),
            border=pg.mkPen(color),
            fill=pg.mkBrush(255, 255, 255, 200),
        )
        self.plot_item.addItem(label, ignoreBounds=True)
        return label

    def position_label(self, label: pg.TextItem, text: str, x: float, y: float,
                       anchor: tuple[float, float]) -> None:
        label.setText(text)
        label.setAnchor(anchor)
        label.setPos(x, self._view_y(y))

    def add_connector(self, color: Color) -> _Connector:
        path = QGraphicsPathItem()
        path.setPen(pg.mkPen(color, width=1.5))
        arrow = pg.ArrowItem(headLen=10, tipAngle=30, pen=pg.mkPen(color), brush=pg.mkBrush(color))
        self.plot_item.addItem(path, ignoreBounds=True)
        self.plot_item.addItem(arrow, ignoreBounds=True)
        connector = _Connector(path=path, arrow=arrow)
        self._connectors.append(connector)
        return connector

    def position_connector(self, connector: _Connector, geometry: ConnectorGeometry) -> None:
        connector.geometry = geometry
        self._layout_connector(connector)

    def _layout_connector(self, connector: _Connector) -> None:
        geometry = connector.geometry
        if geometry is None:
            return

        px_w, px_h = self.view_box.viewPixelSize()

        def offset(point: QPointF, delta: tuple[float, float]) -> QPointF:
            return QPointF(point.x() + delta[0] * px_w, point.y() + delta[1] * px_h)

        start = QPointF(geometry.start[0], self._view_y(geometry.start[1]))
        end = offset(QPointF(geometry.end[0], self._view_y(geometry.end[1])), geometry.end_offset)

        path = QPainterPath(start)
        path.cubicTo(offset(start, geometry.start_direction), offset(end, geometry.end_direction), end)
        connector.path.setPath(path)

        # tip points along the curve's direction of travel into `end`
        dx, dy = -geometry.end_direction[0], -geometry.end_direction[1]
        connector.arrow.setStyle(angle=math.degrees(math.atan2(dy, -dx)))
        connector.arrow.setPos(end)

    def _refresh_connectors(self, *args) -> None:
        for connector in self._connectors:
            self._layout_connector(connector)

    def redraw(self) -> None:
        self.plot_item.update()
