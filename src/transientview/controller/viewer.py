"""
Viewer Controller
=================
Handles the three events of the viewer: a directory was chosen, the
observable selection changed, the time control moved.

Why is this file needed?
------------------------
1. Ordering: Every event is handled to completion (setup, then update) before
   the next one, so the render surface always shows one consistent frame.
2. Atomic reload: A new directory replaces the observable collection only once
   it is fully built; a failed load leaves the current view untouched.
3. Testability: It talks to the render surface contract only, never to Qt
   widgets, so it runs headless in the test suite.
"""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from transientview.config import SCROLL_MAXIMUM
from transientview.model.dataset import load_dataset
from transientview.model.errors import DatasetError
from transientview.model.state import ViewerState, format_time_label, time_index_from_scroll

if TYPE_CHECKING:
    from transientview.model.observable import Observable
    from transientview.model.surface import RenderSurface

logger = logging.getLogger(__name__)


class ViewerController:
    def __init__(self, surface: RenderSurface, state: Optional[ViewerState] = None) -> None:
        self.surface = surface
        self.state = state if state is not None else ViewerState()
        self.last_error: Optional[str] = None

    # --- queries ---

    @property
    def active_observable(self) -> Optional[Observable]:
        return self.state.active_observable

    @property
    def time_index(self) -> int:
        return self.state.time_index

    def titles(self) -> list[str]:
        return [o.title for o in self.state.observables]

    def time_label(self) -> str:
        if self.state.dataset is None:
            return "t = -"
        return format_time_label(float(self.state.dataset.t[self.state.time_index]))

    # --- events ---

    def open_directory(self, path: str | Path) -> bool:
        """
        Load `path` and, on success, show its first observable at time step 0.

        Returns:
            False if the directory could not be loaded; the previous dataset
            (if any) stays active and `last_error` holds the reason.
        """
        try:
            dataset = load_dataset(path)
        except DatasetError as e:
            logger.error(f"Directory load aborted: {e}")
            self.last_error = str(e)
            return False

        self.last_error = None
        self.state.replace_dataset(dataset)
        if not self.select_observable(0):
            # nothing to show; drop the previous dataset's plot
            self.surface.clear()
            self.surface.redraw()
        return True

    def select_observable(self, index: int) -> bool:
        """Set up and draw the observable at `index`; out-of-range indices are ignored."""
        if not 0 <= index < len(self.state.observables):
            logger.debug(f"Ignoring selection of observable {index}")
            return False

        self.state.selected = index
        observable = self.state.observables[index]
        logger.debug(f"Selected observable '{observable.title}'")
        observable.setup(self.surface)
        observable.update(self.surface, self.state.time_index)
        return True

    def set_time(self, raw_value: int, raw_max: int = SCROLL_MAXIMUM) -> int:
        """Map a scroll value to a time index and redraw the active observable."""
        index = time_index_from_scroll(raw_value, raw_max, self.state.n_times)
        self.state.time_index = index

        observable = self.state.active_observable
        if observable is not None:
            observable.update(self.surface, index)
        return index
