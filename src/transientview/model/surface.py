"""
Render Surface Contract
=======================
The drawing operations an observable needs from a plotting backend.

The Qt implementation lives in `transientview.view.plot_surface`; tests use
an in-memory recorder. Handles returned by the `add_*` methods are opaque to
the caller and only valid until the next `clear()`.
"""
from __future__ import annotations

from typing import Any, Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    import numpy as np
    from transientview.model.tracer import ConnectorGeometry

Color = tuple[int, int, int]
Handle = Any


class RenderSurface(Protocol):
    def clear(self) -> None: ...

    def add_line(self, name: str, color: Color) -> Handle: ...
    def set_line_data(self, line: Handle, x: np.ndarray, y: np.ndarray) -> None: ...

    def set_x_range(self, lo: float, hi: float) -> None: ...
    def set_y_range(self, lo: float, hi: float) -> None: ...
    def set_x_label(self, text: str) -> None: ...
    def set_y_label(self, text: str) -> None: ...
    def set_y_log_scale(self, enabled: bool) -> None: ...

    def add_tracer(self, line: Handle) -> Handle: ...
    def position_tracer(self, tracer: Handle, x: float, y: float, interpolating: bool) -> None: ...

    def add_label(self, color: Color) -> Handle: ...
    def position_label(self, label: Handle, text: str, x: float, y: float,
                       anchor: tuple[float, float]) -> None: ...

    def add_connector(self, color: Color) -> Handle: ...
    def position_connector(self, connector: Handle, geometry: ConnectorGeometry) -> None: ...

    def redraw(self) -> None: ...
