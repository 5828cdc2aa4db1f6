# models.py
from __future__ import annotations
from dataclasses import dataclass, asdict, fields, replace
from enum import Enum
from numbers import Integral, Real
from typing import Any, Dict, Optional, Tuple
import math
import numpy as np

from .config import (
    DEFAULT_AZIMUTH,
    DEFAULT_ALTITUDE,
    DEFAULT_EXAGGERATE,
    DEFAULT_METHOD,
    DEFAULT_BLOCK_SIZE,
    TILING_THRESHOLD_CELLS,
    BORDER_MODES,
    DEFAULT_BORDER_MODE,
)


# region Elevation Grid
@dataclass
class ElevationGrid:
    """
    Z:        elevations, shape (rows, cols)
    cellsize: ground distance per cell, same units as Z, uniform in x/y
    name:     descriptive name of the layer
    zunit:    unit of the values in Z ('' when unitless)
    """
    Z: np.ndarray
    cellsize: float = 1.0
    name: str = ""
    zunit: str = ""

    def __post_init__(self):
        Z = np.asarray(self.Z)
        if Z.ndim != 2:
            raise ValueError(f"Z must be a 2D array, got shape {Z.shape}")
        if Z.dtype == bool or not np.issubdtype(Z.dtype, np.number):
            raise ValueError(f"Z must hold real numbers, got dtype {Z.dtype}")
        self.Z = Z
        self.cellsize = _as_float("cellsize", self.cellsize)
        if not (math.isfinite(self.cellsize) and self.cellsize > 0):
            raise ValueError(f"cellsize must be a positive finite number, got {self.cellsize}")

    @property
    def shape(self) -> Tuple[int, int]:
        return self.Z.shape

    @property
    def size(self) -> int:
        return int(self.Z.size)

    def with_values(self, Z: np.ndarray, **metadata) -> "ElevationGrid":
        """New grid sharing this grid's metadata, with Z (and any given metadata) replaced."""
        Z = np.asarray(Z)
        if Z.shape != self.Z.shape:
            raise ValueError(f"replacement values have shape {Z.shape}, expected {self.Z.shape}")
        return replace(self, Z=Z, **metadata)
# endregion


# region Shading Method
class ShadingMethod(str, Enum):
    SURFNORM = "surfnorm"   # single light direction
    MDOW = "mdow"           # multi-directional, oblique weighting

    @classmethod
    def parse(cls, value) -> "ShadingMethod":
        """
        Accepts a member, its value, or the long name ('single-direction',
        'multi-direction-oblique'). Case-insensitive; unambiguous prefixes
        such as 'surf' or 'md' are accepted too.
        """
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            raise ValueError(f"method must be a string, got {type(value).__name__}")
        key = value.strip().lower()
        names = {
            "surfnorm": cls.SURFNORM,
            "single-direction": cls.SURFNORM,
            "mdow": cls.MDOW,
            "multi-direction-oblique": cls.MDOW,
        }
        if key in names:
            return names[key]
        hits = {m for name, m in names.items() if key and name.startswith(key)}
        if len(hits) == 1:
            return hits.pop()
        raise ValueError(
            f"Unknown method {value!r}; expected one of {sorted(names)}"
        )
# endregion


# region Options
def _as_float(name: str, value) -> float:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Real):
        raise TypeError(f"{name} must be a real number, got {type(value).__name__}")
    return float(value)


def _as_int(name: str, value) -> int:
    if isinstance(value, (bool, np.bool_)) or not isinstance(value, Integral):
        raise TypeError(f"{name} must be an integer, got {type(value).__name__}")
    return int(value)


@dataclass
class HillshadeOptions:
    azimuth: float = DEFAULT_AZIMUTH
    altitude: float = DEFAULT_ALTITUDE
    exaggerate: float = DEFAULT_EXAGGERATE
    method: ShadingMethod = DEFAULT_METHOD
    use_tiling: bool = True
    use_parallel: bool = True
    block_size: int = DEFAULT_BLOCK_SIZE
    tiling_threshold: int = TILING_THRESHOLD_CELLS
    max_workers: Optional[int] = None
    border_mode: str = DEFAULT_BORDER_MODE

    def __post_init__(self):
        self.azimuth = _as_float("azimuth", self.azimuth)
        if not (0.0 <= self.azimuth <= 360.0):
            raise ValueError(f"azimuth must be within [0, 360], got {self.azimuth}")

        self.altitude = _as_float("altitude", self.altitude)
        if not (0.0 <= self.altitude <= 90.0):
            raise ValueError(f"altitude must be within [0, 90], got {self.altitude}")

        self.exaggerate = _as_float("exaggerate", self.exaggerate)
        if not (math.isfinite(self.exaggerate) and self.exaggerate > 0.0):
            raise ValueError(f"exaggerate must be a positive finite number, got {self.exaggerate}")

        self.method = ShadingMethod.parse(self.method)
        self.use_tiling = bool(self.use_tiling)
        self.use_parallel = bool(self.use_parallel)

        self.block_size = _as_int("block_size", self.block_size)
        if self.block_size < 1:
            raise ValueError(f"block_size must be a positive integer, got {self.block_size}")

        self.tiling_threshold = _as_int("tiling_threshold", self.tiling_threshold)
        if self.tiling_threshold < 0:
            raise ValueError(f"tiling_threshold must be >= 0, got {self.tiling_threshold}")

        if self.max_workers is not None:
            self.max_workers = _as_int("max_workers", self.max_workers)
            if self.max_workers < 1:
                raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")

        mode = str(self.border_mode).strip().lower()
        if mode not in BORDER_MODES:
            raise ValueError(f"border_mode must be one of {BORDER_MODES}, got {self.border_mode!r}")
        self.border_mode = mode

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "HillshadeOptions":
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(cfg) - known)
        if unknown:
            raise ValueError(f"Unknown hillshade option(s): {', '.join(unknown)}")
        return cls(**cfg)

    def to_dict(self) -> Dict[str, Any]:
        out = asdict(self)
        out["method"] = self.method.value
        return out

    def updated(self, **overrides) -> "HillshadeOptions":
        """Copy with overrides applied; the copy is validated again."""
        if not overrides:
            return self
        merged = self.to_dict()
        merged.update(overrides)
        return HillshadeOptions.from_dict(merged)
# endregion


# region Block Spec
@dataclass(frozen=True)
class BlockSpec:
    """
    One block of a tiled run.

    row_start..col_end:           core bounds in the full grid (half-open)
    row_start_full..col_end_full: bounds read from the full grid (core + halo)
    pad_*:                        halo cells synthesised by mirroring at the grid edge
    """
    index: int
    row_start: int
    row_end: int
    col_start: int
    col_end: int
    row_start_full: int
    row_end_full: int
    col_start_full: int
    col_end_full: int
    pad_top: int = 0
    pad_bottom: int = 0
    pad_left: int = 0
    pad_right: int = 0

    @property
    def core_shape(self) -> Tuple[int, int]:
        return (self.row_end - self.row_start, self.col_end - self.col_start)

    @property
    def read_slice(self) -> Tuple[slice, slice]:
        return (
            slice(self.row_start_full, self.row_end_full),
            slice(self.col_start_full, self.col_end_full),
        )

    @property
    def write_slice(self) -> Tuple[slice, slice]:
        return (
            slice(self.row_start, self.row_end),
            slice(self.col_start, self.col_end),
        )

    @property
    def core_slice(self) -> Tuple[slice, slice]:
        """Core cells inside the (read + padded) block array."""
        top = self.row_start - self.row_start_full + self.pad_top
        left = self.col_start - self.col_start_full + self.pad_left
        rows, cols = self.core_shape
        return (slice(top, top + rows), slice(left, left + cols))
# endregion
