"""
Dataset Assembly
================
Turns a simulation output directory into the list of observables shown by
the viewer.

Why is this file needed?
------------------------
1. Isolation: Each observable is built on its own. A missing or malformed
   file removes only the observables that depend on it.
2. Atomicity: `load_dataset` returns a fully built Dataset or raises
   DatasetError; callers never see a half-populated collection.
3. Eager derivation: Band edges and terminal currents are computed here,
   once, so a time step change only selects a slice.

Directory layout:
    device.ini      E_g, E_gc, N_x, N_sc, N_dc
    xtics.<ext>     space axis (required)
    ttics.<ext>     time axis (required)
    phi.<ext>       potential, one column per time step
    n.<ext>         charge density, one column per time step
    I.<ext>         current, one column per time step
    V.<ext>         terminal voltages, one column per terminal (source, gate, drain)
"""
from __future__ import annotations

from dataclasses import dataclass, field
import logging
from pathlib import Path
from typing import Callable, Optional

import numpy as np

from transientview.config import DEVICE_FILE
from transientview.model.derived import band_edges, terminal_currents, terminal_voltages
from transientview.model.device import DeviceParameters, load_device_parameters
from transientview.model.errors import ConfigError, DatasetError, TransientViewError
from transientview.model.io import ArrayIO
from transientview.model.observable import Observable, SpatialObservable, TemporalObservable, as_axis
from transientview.model.series import GraphSeries

logger = logging.getLogger(__name__)

# observable titles, in display order
POTENTIAL = "Potential"
BANDSTRUCTURE = "Bandstructure"
CHARGE_DENSITY = "Charge density"
CURRENT = "Current (spatial)"
SOURCE_CURRENT = "Source Current"
DRAIN_CURRENT = "Drain Current"
VOLTAGE = "Voltage"


@dataclass
class Dataset:
    """All observables built from one directory, plus the shared axes."""
    directory: Path
    x: np.ndarray
    t: np.ndarray
    device: Optional[DeviceParameters] = None
    observables: list[Observable] = field(default_factory=list)
    skipped: dict[str, str] = field(default_factory=dict)  # title -> reason

    @property
    def titles(self) -> list[str]:
        return [o.title for o in self.observables]

    @property
    def n_times(self) -> int:
        return len(self.t)

    def __len__(self) -> int:
        return len(self.observables)

    def add(self, title: str, factory: Callable[[], Observable]) -> None:
        """Build one observable; on failure record the reason and leave the collection untouched."""
        try:
            observable = factory()
        except TransientViewError as e:
            self.skip(title, e)
            return
        self.observables.append(observable)
        logger.info(f"Built observable '{title}' ({len(observable.series)} series)")

    def skip(self, title: str, reason: Exception | str) -> None:
        kind = type(reason).__name__ if isinstance(reason, Exception) else "Skipped"
        self.skipped[title] = f"{kind}: {reason}"
        logger.warning(f"Observable '{title}' not available: {self.skipped[title]}")


def _load_axis(directory: Path, stem: str) -> np.ndarray:
    try:
        return as_axis(ArrayIO.load_vector(ArrayIO.resolve(directory, stem)), stem)
    except (TransientViewError, ValueError) as e:
        raise DatasetError(f"Cannot load axis '{stem}' from {directory}: {e}") from e


def _read_frames(dataset: Dataset, stem: str, dependents: tuple[str, ...]) -> Optional[np.ndarray]:
    """Load `<stem>.<ext>` as frames, or mark every dependent observable as skipped."""
    try:
        return ArrayIO.load_frames(ArrayIO.resolve(dataset.directory, stem))
    except TransientViewError as e:
        for title in dependents:
            dataset.skip(title, e)
        return None


def _bandstructure(dataset: Dataset, phi: np.ndarray) -> SpatialObservable:
    if dataset.device is None:
        raise ConfigError(f"no usable {DEVICE_FILE}")
    valence, conduction = band_edges(phi, dataset.device)
    return SpatialObservable(BANDSTRUCTURE, "phi / V", dataset.x, dataset.t, [valence, conduction])


def load_dataset(directory: str | Path) -> Dataset:
    """
    Load every observable available in `directory`.

    Raises:
        DatasetError: if the directory or one of the axis files is unusable.
    """
    directory = Path(directory)
    logger.info(f"Loading dataset from: {directory}")
    if not directory.is_dir():
        raise DatasetError(f"Not a directory: {directory}")

    x = _load_axis(directory, "xtics")
    t = _load_axis(directory, "ttics")
    dataset = Dataset(directory=directory, x=x, t=t)
    logger.info(f"Axes: {len(x)} space points, {len(t)} time steps")

    try:
        dataset.device = load_device_parameters(directory / DEVICE_FILE)
    except ConfigError as e:
        logger.warning(f"Device parameters unavailable, band structure disabled: {e}")

    phi = _read_frames(dataset, "phi", (POTENTIAL, BANDSTRUCTURE))
    if phi is not None:
        dataset.add(POTENTIAL, lambda: SpatialObservable(
            POTENTIAL, "phi / V", x, t, [GraphSeries.from_samples(POTENTIAL, phi)]))
        dataset.add(BANDSTRUCTURE, lambda: _bandstructure(dataset, phi))

    n = _read_frames(dataset, "n", (CHARGE_DENSITY,))
    if n is not None:
        dataset.add(CHARGE_DENSITY, lambda: SpatialObservable(
            CHARGE_DENSITY, "n / C m^-3", x, t, [GraphSeries.from_samples(CHARGE_DENSITY, n)]))

    current = _read_frames(dataset, "I", (CURRENT, SOURCE_CURRENT, DRAIN_CURRENT))
    if current is not None:
        dataset.add(CURRENT, lambda: SpatialObservable(
            CURRENT, "I / A", x, t, [GraphSeries.from_samples("Current", current)]))
        source, drain = None, None
        try:
            source, drain = terminal_currents(current)
        except TransientViewError as e:
            dataset.skip(SOURCE_CURRENT, e)
            dataset.skip(DRAIN_CURRENT, e)
        if source is not None:
            dataset.add(SOURCE_CURRENT, lambda: TemporalObservable(SOURCE_CURRENT, "I / A", x, t, [source]))
            dataset.add(DRAIN_CURRENT, lambda: TemporalObservable(DRAIN_CURRENT, "I / A", x, t, [drain]))

    voltage = _read_frames(dataset, "V", (VOLTAGE,))
    if voltage is not None:
        dataset.add(VOLTAGE, lambda: TemporalObservable(
            VOLTAGE, "V / V", x, t, terminal_voltages(voltage)))

    if not dataset.observables:
        logger.warning(f"No observables could be built from {directory}")
    else:
        logger.info(f"Loaded {len(dataset)} observables: {', '.join(dataset.titles)}")
    return dataset
