"""
Viewer State (Data Model)
=========================
This module defines the central data structure for the running application.

Why is this file needed?
------------------------
1. State Management: It holds the loaded dataset, the selected observable and
   the selected time step in one place.
2. Decoupling: The GUI reads from this object; the controller writes to it.

Classes:
    ViewerState: The main container class.
"""
from __future__ import annotations

from dataclasses import dataclass
import logging
from typing import Optional, TYPE_CHECKING

from transientview.config import TIME_LABEL_DECIMALS, TIME_LABEL_SCALE, TIME_LABEL_UNIT

if TYPE_CHECKING:
    from transientview.model.dataset import Dataset
    from transientview.model.observable import Observable

logger = logging.getLogger(__name__)


def time_index_from_scroll(raw_value: int, raw_max: int, n_times: int) -> int:
    """
    Map a scroll control value in [0, raw_max] onto a time index in [0, n_times).

    time_index = raw_value * n_times // (raw_max + 1), clamped to the valid range.
    """
    if n_times <= 0:
        return 0
    index = raw_value * n_times // (raw_max + 1)
    return min(max(index, 0), n_times - 1)


def format_time_label(t_value: float) -> str:
    """E.g. 't = 1.50000 ps' for t_value = 1.5e-12."""
    return f"t = {t_value * TIME_LABEL_SCALE:.{TIME_LABEL_DECIMALS}f} {TIME_LABEL_UNIT}"


@dataclass
class ViewerState:
    """
    Holds the state of the open dataset.
    Pass this instance to the controller and the views.
    """
    dataset: Optional[Dataset] = None
    selected: int = 0
    time_index: int = 0

    @property
    def observables(self) -> list[Observable]:
        return self.dataset.observables if self.dataset is not None else []

    @property
    def active_observable(self) -> Optional[Observable]:
        if 0 <= self.selected < len(self.observables):
            return self.observables[self.selected]
        return None

    @property
    def n_times(self) -> int:
        return self.dataset.n_times if self.dataset is not None else 0

    def replace_dataset(self, dataset: Dataset) -> None:
        """Swap in a fully built dataset and rewind selection and time."""
        self.dataset = dataset
        self.selected = 0
        self.time_index = 0
        logger.info(f"Viewer state now holds {len(dataset)} observables from {dataset.directory}")

    def reset(self) -> None:
        """Clear all data."""
        self.dataset = None
        self.selected = 0
        self.time_index = 0
        logger.info("Viewer state has been reset.")
