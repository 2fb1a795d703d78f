"""
Device Parameters
=================
Reads the `device.ini` written by the simulation run.

Only the grid and band-gap parameters needed for the band-structure
derivation are consumed; every other key in the file is ignored.
"""
from __future__ import annotations

import configparser
from dataclasses import dataclass
import logging
from pathlib import Path
from typing import Mapping

from transientview.model.errors import ConfigError

logger = logging.getLogger(__name__)

_SECTION = "device"


@dataclass(frozen=True)
class DeviceParameters:
    E_g: float   # bulk band gap
    E_gc: float  # contact band gap
    N_x: int     # total number of space points
    N_sc: int    # left (source) contact width
    N_dc: int    # right (drain) contact width

    def __post_init__(self) -> None:
        if self.N_x <= 0:
            raise ConfigError(f"N_x must be positive, got {self.N_x}")
        if self.N_sc < 0 or self.N_dc < 0:
            raise ConfigError(f"Contact widths must be non-negative, got N_sc={self.N_sc}, N_dc={self.N_dc}")
        if self.N_sc + self.N_dc > self.N_x:
            raise ConfigError(f"Contacts overlap: N_sc + N_dc = {self.N_sc + self.N_dc} > N_x = {self.N_x}")

    @staticmethod
    def from_mapping(values: Mapping[str, str]) -> DeviceParameters:
        return DeviceParameters(
            E_g=_as_float(values, "E_g"),
            E_gc=_as_float(values, "E_gc"),
            N_x=_as_int(values, "N_x"),
            N_sc=_as_int(values, "N_sc"),
            N_dc=_as_int(values, "N_dc"),
        )


def _lookup(values: Mapping[str, str], key: str) -> str:
    if key not in values:
        raise ConfigError(f"Missing device parameter '{key}'")
    return values[key]


def _as_float(values: Mapping[str, str], key: str) -> float:
    raw = _lookup(values, key)
    try:
        return float(raw)
    except ValueError:
        raise ConfigError(f"Device parameter '{key}' is not a number: {raw!r}") from None


def _as_int(values: Mapping[str, str], key: str) -> int:
    number = _as_float(values, key)
    if not number.is_integer():
        raise ConfigError(f"Device parameter '{key}' must be an integer, got {number}")
    return int(number)


def parse_device_parameters(text: str) -> DeviceParameters:
    """
    Parse `key = value` lines into DeviceParameters.

    Section headers are optional; keys from all sections are merged, later
    ones winning. Keys are case-sensitive. `#` and `;` start comments.

    Raises:
        ConfigError: on syntax errors, missing keys or invalid values.
    """
    parser = configparser.ConfigParser(
        interpolation=None,
        strict=False,
        inline_comment_prefixes=("#", ";"),
    )
    parser.optionxform = str  # keep E_g and E_gc distinct from e_g

    try:
        parser.read_string(f"[{_SECTION}]\n{text}")
    except configparser.Error as e:
        raise ConfigError(f"Cannot parse device parameters: {e}") from e

    merged: dict[str, str] = {}
    for section in parser.sections():
        merged.update(parser.items(section))

    return DeviceParameters.from_mapping(merged)


def load_device_parameters(path: str | Path) -> DeviceParameters:
    """Read and parse a device parameter file."""
    path = Path(path)
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Cannot read device parameters from '{path}': {e}") from e

    device = parse_device_parameters(text)
    logger.debug(f"Device parameters from {path}: {device}")
    return device
