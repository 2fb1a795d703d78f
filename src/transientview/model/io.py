"""
Array Input (Armadillo / NumPy / HDF5 / text)
Reads the dense numeric arrays written by the simulation run.

Every file is read into a float64 matrix of shape (rows, cols). Matrices are
stored with one column per time step (for `phi`, `n`, `I`) or one column per
terminal (for `V`), so callers usually want `load_frames`, which returns the
columns as rows of a new array.
"""
from __future__ import annotations

import logging
from pathlib import Path

import h5py
import numpy as np

from transientview.config import ARRAY_EXTENSIONS
from transientview.model.errors import MissingFileError, ShapeMismatchError

logger = logging.getLogger(__name__)

_ARMA_TXT = b"ARMA_MAT_TXT_"
_ARMA_BIN = b"ARMA_MAT_BIN_"

# element type code in the Armadillo header -> numpy dtype (little endian)
_ARMA_DTYPES: dict[str, str] = {
    "FN008": "<f8",
    "FN004": "<f4",
    "IS008": "<i8",
    "IS004": "<i4",
    "IS002": "<i2",
    "IS001": "<i1",
    "IU008": "<u8",
    "IU004": "<u4",
    "IU002": "<u2",
    "IU001": "<u1",
}


class ArrayIO:

    @staticmethod
    def resolve(directory: str | Path, stem: str) -> Path:
        """
        Find `<stem><ext>` in `directory`, trying ARRAY_EXTENSIONS in order.

        Raises:
            MissingFileError: if no candidate exists.
        """
        directory = Path(directory)
        for ext in ARRAY_EXTENSIONS:
            candidate = directory / f"{stem}{ext}"
            if candidate.is_file():
                return candidate
        raise MissingFileError(directory / f"{stem}.*", f"no file with extension {', '.join(ARRAY_EXTENSIONS)}")

    @staticmethod
    def load(path: str | Path) -> np.ndarray:
        """
        Read an array file into a float64 matrix of shape (rows, cols).

        Raises:
            MissingFileError: if the file is absent, unreadable or corrupt.
            ShapeMismatchError: if the stored array has more than 2 dimensions.
        """
        path = Path(path)
        if not path.is_file():
            raise MissingFileError(path)

        suffix = path.suffix.lower()
        try:
            if suffix == ".arma":
                data = ArrayIO._load_arma(path)
            elif suffix == ".npy":
                data = np.load(path, allow_pickle=False)
            elif suffix == ".h5":
                data = ArrayIO._load_hdf5(path)
            else:
                data = np.loadtxt(path, ndmin=2)
            values = np.array(data, dtype=np.float64)
        except (OSError, ValueError, TypeError, KeyError, EOFError) as e:
            raise MissingFileError(path, f"cannot read array: {e}") from e

        matrix = ArrayIO._as_matrix(values, path)
        logger.debug(f"Loaded {path.name}: shape {matrix.shape}")
        return matrix

    @staticmethod
    def load_vector(path: str | Path) -> np.ndarray:
        """Read a single-row or single-column file as a 1-D vector."""
        matrix = ArrayIO.load(path)
        if 1 not in matrix.shape:
            raise ShapeMismatchError(f"{Path(path).name} (vector)", "(n, 1) or (1, n)", matrix.shape)
        return matrix.ravel()

    @staticmethod
    def load_frames(path: str | Path) -> np.ndarray:
        """Read a matrix and return its columns as rows, shape (cols, rows)."""
        return np.ascontiguousarray(ArrayIO.load(path).T)

    # --- format readers ---

    @staticmethod
    def _as_matrix(arr: np.ndarray, path: Path) -> np.ndarray:
        if arr.ndim == 0:
            return arr.reshape(1, 1)
        if arr.ndim == 1:
            return arr.reshape(-1, 1)
        if arr.ndim == 2:
            return arr
        raise ShapeMismatchError(f"{path.name} dimensions", "<= 2", arr.ndim)

    @staticmethod
    def _load_arma(path: Path) -> np.ndarray:
        raw = path.read_bytes()
        if raw.startswith(_ARMA_TXT):
            return ArrayIO._parse_arma_text(raw)
        if raw.startswith(_ARMA_BIN):
            return ArrayIO._parse_arma_binary(raw)
        # headerless files are plain whitespace-separated text
        return np.loadtxt(path, ndmin=2)

    @staticmethod
    def _arma_header(header: bytes, dims: bytes) -> tuple[str, int, int]:
        code = header.decode("ascii").strip()[len(_ARMA_TXT):]
        if code not in _ARMA_DTYPES:
            raise ValueError(f"unsupported Armadillo element type '{code}'")
        fields = dims.split()
        if len(fields) != 2:
            raise ValueError(f"invalid Armadillo size line {dims!r}")
        rows, cols = (int(f) for f in fields)
        return code, rows, cols

    @staticmethod
    def _parse_arma_text(raw: bytes) -> np.ndarray:
        header, dims, body = (raw.split(b"\n", 2) + [b""])[:3]
        _, rows, cols = ArrayIO._arma_header(header, dims)
        values = np.array(body.decode("ascii").split(), dtype=np.float64)
        if values.size != rows * cols:
            raise ValueError(f"expected {rows * cols} values, found {values.size}")
        return values.reshape(rows, cols)

    @staticmethod
    def _parse_arma_binary(raw: bytes) -> np.ndarray:
        header, dims, body = (raw.split(b"\n", 2) + [b""])[:3]
        code, rows, cols = ArrayIO._arma_header(header, dims)
        dtype = np.dtype(_ARMA_DTYPES[code])
        count = rows * cols
        if len(body) < count * dtype.itemsize:
            raise ValueError(f"truncated data: expected {count * dtype.itemsize} bytes, found {len(body)}")
        values = np.frombuffer(body, dtype=dtype, count=count)
        # Armadillo stores elements column by column
        return values.reshape((rows, cols), order="F")

    @staticmethod
    def _load_hdf5(path: Path) -> np.ndarray:
        with h5py.File(path, "r") as f:
            if "data" in f and isinstance(f["data"], h5py.Dataset):
                return f["data"][()]

            found: list[str] = []
            f.visititems(lambda name, obj: found.append(name) if isinstance(obj, h5py.Dataset) else None)
            if not found:
                raise KeyError(f"no dataset in {path.name}")
            return f[found[0]][()]
