"""
Derived Quantities
==================
Secondary series computed once at load time from primary arrays.

Functions:
    band_edges: Valence/conduction band edges from the electrostatic potential.
    terminal_currents: Source/drain current traces from the spatial current.
    terminal_voltages: Source/gate/drain voltage traces.
"""
from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from transientview.model.errors import ShapeMismatchError
from transientview.model.series import GraphSeries, padded_range

if TYPE_CHECKING:
    from transientview.model.device import DeviceParameters

logger = logging.getLogger(__name__)

VOLTAGE_TITLES: tuple[str, ...] = ("V_s", "V_g", "V_d")


def gap_profile(device: DeviceParameters) -> np.ndarray:
    """Band gap at every space index: E_gc inside both contacts, E_g in the bulk."""
    gap = np.full(device.N_x, device.E_g, dtype=np.float64)
    gap[:device.N_sc] = device.E_gc
    gap[device.N_x - device.N_dc:] = device.E_gc
    return gap


def band_edges(phi: np.ndarray, device: DeviceParameters) -> tuple[GraphSeries, GraphSeries]:
    """
    Offset the potential by half the local band gap.

    Args:
        phi: Potential frames, shape (n_times, N_x).
        device: Grid and gap parameters.

    Returns:
        (valence, conduction) series with conservative display ranges: the
        padded potential range shifted by the larger half gap on the outer
        side and the smaller half gap on the inner side.

    Raises:
        ShapeMismatchError: if any frame length differs from N_x. Nothing is
            built in that case.
    """
    phi = np.asarray(phi, dtype=np.float64)
    if phi.ndim != 2 or phi.shape[1] != device.N_x:
        raise ShapeMismatchError("phi frame length (N_x)", device.N_x, phi.shape[-1] if phi.ndim else phi.shape)

    half_gap = 0.5 * gap_profile(device)
    conduction = phi + half_gap
    valence = phi - half_gap

    phi_min, phi_max = padded_range(float(phi.min()), float(phi.max()))
    g_small = 0.5 * min(device.E_g, device.E_gc)
    g_large = 0.5 * max(device.E_g, device.E_gc)

    valence_series = GraphSeries.with_range("Valence Band", valence, phi_min - g_large, phi_max - g_small)
    conduction_series = GraphSeries.with_range("Conduction Band", conduction, phi_min + g_small, phi_max + g_large)
    return valence_series, conduction_series


def terminal_currents(current: np.ndarray) -> tuple[GraphSeries, GraphSeries]:
    """
    Source and drain current over time: the first and last space point of every frame.

    Each trace gets its own padded range, independent of the spatial current's range.
    """
    current = np.asarray(current, dtype=np.float64)
    if current.ndim != 2 or current.shape[1] == 0:
        raise ShapeMismatchError("current frames", "(n_times, n_x >= 1)", current.shape)

    source = GraphSeries.from_samples("Source Current", current[:, 0])
    drain = GraphSeries.from_samples("Drain Current", current[:, -1])
    return source, drain


def terminal_voltages(traces: np.ndarray) -> list[GraphSeries]:
    """
    One series per terminal from exactly three voltage traces (source, gate, drain).

    Raises:
        ShapeMismatchError: for any other number of traces; no series is built.
    """
    traces = np.asarray(traces, dtype=np.float64)
    if traces.ndim != 2 or traces.shape[0] != len(VOLTAGE_TITLES):
        raise ShapeMismatchError("voltage traces", len(VOLTAGE_TITLES), traces.shape[0] if traces.ndim else 0)
    return [GraphSeries.from_samples(title, trace) for title, trace in zip(VOLTAGE_TITLES, traces)]
