"""
Graph Series
============
One named series of samples together with its padded display range.

A series under a spatial observable holds a sequence of frames (one sample
vector per time step). A series under a temporal observable holds a single
vector indexed by time. Both are stored as float64 numpy arrays: 2-D
`(n_times, n_space)` and 1-D `(n_times,)` respectively.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence, TYPE_CHECKING

import numpy as np

from transientview.config import PADDING_FRACTION, MIN_AXIS_SPAN
from transientview.model.errors import ShapeMismatchError

if TYPE_CHECKING:
    import numpy.typing as npt


def padded_range(lo: float, hi: float, fraction: float = PADDING_FRACTION) -> tuple[float, float]:
    """
    Expand [lo, hi] by `fraction` of its span on each side.

    A zero span yields zero padding, so `(v, v)` maps to `(v, v)`.
    """
    delta = hi - lo
    return lo - delta * fraction, hi + delta * fraction


def union_range(ranges: Sequence[tuple[float, float]]) -> tuple[float, float]:
    """Smallest interval containing every (lo, hi) in `ranges`."""
    if not ranges:
        raise ValueError("Cannot build a union of zero ranges.")
    return min(r[0] for r in ranges), max(r[1] for r in ranges)


def widen_degenerate(lo: float, hi: float) -> tuple[float, float]:
    """
    Return a non-degenerate axis range.

    Ranges with a positive span are returned unchanged. A zero-span range is
    widened symmetrically by 5% of the magnitude of its value, falling back to
    MIN_AXIS_SPAN when the value itself is zero.
    """
    if hi > lo:
        return lo, hi
    half = max(abs(lo) * PADDING_FRACTION, MIN_AXIS_SPAN)
    return lo - half, hi + half


@dataclass
class GraphSeries:
    title: str
    display_min: float
    display_max: float
    samples: np.ndarray

    @classmethod
    def from_samples(cls, title: str, samples: npt.ArrayLike) -> GraphSeries:
        """Build a series whose display range is the padded raw range of `samples`."""
        arr = np.asarray(samples, dtype=np.float64)
        if arr.size == 0:
            raise ShapeMismatchError(f"series '{title}'", "at least one sample", 0)
        lo, hi = padded_range(float(np.min(arr)), float(np.max(arr)))
        return cls(title=title, display_min=lo, display_max=hi, samples=arr)

    @classmethod
    def with_range(cls, title: str, samples: npt.ArrayLike, display_min: float, display_max: float) -> GraphSeries:
        """Build a series with an externally computed display range (derived quantities)."""
        arr = np.asarray(samples, dtype=np.float64)
        return cls(title=title, display_min=float(display_min), display_max=float(display_max), samples=arr)

    @property
    def display_range(self) -> tuple[float, float]:
        return self.display_min, self.display_max

    @property
    def n_frames(self) -> int:
        """Number of time steps held by this series."""
        return int(self.samples.shape[0])

    @property
    def raw_min(self) -> float:
        return float(np.min(self.samples))

    @property
    def raw_max(self) -> float:
        return float(np.max(self.samples))

    def frame(self, time_index: int) -> np.ndarray:
        """Sample vector of a spatial series at `time_index`."""
        return self.samples[time_index]
