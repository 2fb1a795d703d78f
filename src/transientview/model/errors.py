"""
Error Types
===========
Exception hierarchy used while loading a dataset directory.

Why is this file needed?
------------------------
The loader degrades the set of available observables instead of aborting the
session. Each failure kind has its own class so the dataset assembly can decide
whether to skip one observable or abandon the whole directory.
"""
from __future__ import annotations

from pathlib import Path
from typing import Any


class TransientViewError(Exception):
    """Base class for all errors raised by transientview."""
    pass


class MissingFileError(TransientViewError):
    """An input file is absent, unreadable or cannot be parsed."""

    def __init__(self, path: str | Path, reason: str = "not found") -> None:
        self.path = Path(path)
        self.reason = reason
        super().__init__(f"{self.path}: {reason}")


class ShapeMismatchError(TransientViewError):
    """An array's dimensions disagree with an axis or the device grid."""

    def __init__(self, what: str, expected: Any, actual: Any) -> None:
        self.what = what
        self.expected = expected
        self.actual = actual
        super().__init__(f"{what}: expected {expected}, got {actual}")


class ConfigError(TransientViewError):
    """The device parameter file is missing, malformed or incomplete."""
    pass


class DatasetError(TransientViewError):
    """The whole directory load was aborted (no observable can be built)."""
    pass
