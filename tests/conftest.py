"""
Shared fixtures for the transientview test suite.

Provides:
1. RecordingSurface: an in-memory render surface that stores everything an
   observable draws, so setup/update can be checked without Qt.
2. Writers for Armadillo text files and a builder for complete dataset
   directories in `tmp_path`.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any, Optional

import numpy as np
import pytest


class RecordingSurface:
    def __init__(self) -> None:
        self.calls: list[str] = []
        self.clear_count = 0
        self.redraw_count = 0
        self._next = 0
        self.reset_items()

    def reset_items(self) -> None:
        self.lines: dict[int, dict[str, Any]] = {}
        self.tracers: dict[int, dict[str, Any]] = {}
        self.labels: dict[int, dict[str, Any]] = {}
        self.connectors: dict[int, dict[str, Any]] = {}
        self.x_range: Optional[tuple[float, float]] = None
        self.y_range: Optional[tuple[float, float]] = None
        self.x_label: Optional[str] = None
        self.y_label: Optional[str] = None
        self.log_y: bool = False

    def _handle(self) -> int:
        self._next += 1
        return self._next

    def clear(self) -> None:
        self.calls.append("clear")
        self.clear_count += 1
        self.reset_items()

    def add_line(self, name, color):
        h = self._handle()
        self.lines[h] = {"name": name, "color": color, "x": None, "y": None}
        return h

    def set_line_data(self, line, x, y) -> None:
        self.lines[line]["x"] = np.array(x, copy=True)
        self.lines[line]["y"] = np.array(y, copy=True)

    def set_x_range(self, lo, hi) -> None:
        self.x_range = (lo, hi)

    def set_y_range(self, lo, hi) -> None:
        self.y_range = (lo, hi)

    def set_x_label(self, text) -> None:
        self.x_label = text

    def set_y_label(self, text) -> None:
        self.y_label = text

    def set_y_log_scale(self, enabled) -> None:
        self.log_y = enabled

    def add_tracer(self, line):
        h = self._handle()
        self.tracers[h] = {"line": line}
        return h

    def position_tracer(self, tracer, x, y, interpolating) -> None:
        self.tracers[tracer].update(x=x, y=y, interpolating=interpolating)

    def add_label(self, color):
        h = self._handle()
        self.labels[h] = {"color": color}
        return h

    def position_label(self, label, text, x, y, anchor) -> None:
        self.labels[label].update(text=text, x=x, y=y, anchor=anchor)

    def add_connector(self, color):
        h = self._handle()
        self.connectors[h] = {"color": color}
        return h

    def position_connector(self, connector, geometry) -> None:
        self.connectors[connector]["geometry"] = geometry

    def redraw(self) -> None:
        self.calls.append("redraw")
        self.redraw_count += 1

    def snapshot(self) -> dict[str, Any]:
        """Everything drawn, with arrays converted to bytes for exact comparison."""
        lines = {h: (d["name"], d["x"].tobytes(), d["y"].tobytes()) for h, d in self.lines.items()}
        return {
            "lines": lines,
            "tracers": {h: dict(d) for h, d in self.tracers.items()},
            "labels": {h: dict(d) for h, d in self.labels.items()},
            "connectors": {h: dict(d) for h, d in self.connectors.items()},
            "x_range": self.x_range,
            "y_range": self.y_range,
        }


def write_arma(path: Path, matrix: np.ndarray) -> Path:
    """Write `matrix` (rows, cols) in Armadillo text format."""
    matrix = np.asarray(matrix, dtype=np.float64)
    if matrix.ndim == 1:
        matrix = matrix.reshape(-1, 1)
    rows, cols = matrix.shape
    lines = ["ARMA_MAT_TXT_FN008", f"{rows} {cols}"]
    lines += [" ".join(f"{v:.17g}" for v in row) for row in matrix]
    path.write_text("\n".join(lines) + "\n")
    return path


DEVICE_INI = """\
# device parameters
E_g = 1.0
E_gc = 2.0
N_x = 3
N_sc = 1
N_dc = 1
"""


def build_dataset_dir(
    root: Path,
    *,
    n_times: int = 4,
    with_device: bool = True,
    device_text: str = DEVICE_INI,
    skip: tuple[str, ...] = (),
    v_traces: int = 3,
    phi_rows: int = 3,
) -> Path:
    """
    A three-point device over `n_times` steps. Matrices are (space, time),
    except V which is (time, terminal).
    """
    root.mkdir(parents=True, exist_ok=True)
    x = np.array([0.0, 1.0, 2.0])
    t = np.linspace(0.0, 1e-12 * (n_times - 1), n_times)

    if with_device:
        (root / "device.ini").write_text(device_text)
    if "xtics" not in skip:
        write_arma(root / "xtics.arma", x.reshape(-1, 1))
    if "ttics" not in skip:
        write_arma(root / "ttics.arma", t.reshape(-1, 1))

    steps = np.arange(n_times, dtype=np.float64)
    if "phi" not in skip:
        phi = np.add.outer(np.arange(phi_rows, dtype=np.float64), 0.1 * steps)
        write_arma(root / "phi.arma", phi)
    if "n" not in skip:
        write_arma(root / "n.arma", np.add.outer(np.array([1e20, 2e20, 3e20]), 1e19 * steps))
    if "I" not in skip:
        current = np.add.outer(np.array([5.0, 7.0, 9.0]), steps)
        write_arma(root / "I.arma", current)
    if "V" not in skip:
        write_arma(root / "V.arma", np.column_stack([steps * (k + 1) for k in range(v_traces)]))
    return root


@pytest.fixture
def surface() -> RecordingSurface:
    return RecordingSurface()


@pytest.fixture
def dataset_dir(tmp_path: Path) -> Path:
    return build_dataset_dir(tmp_path / "run")
