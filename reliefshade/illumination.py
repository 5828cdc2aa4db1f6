# region Imports
from __future__ import annotations
from typing import Sequence, Tuple, Union
import numpy as np

from .config import MDOW_AZIMUTHS, MDOW_ALTITUDE, MDOW_DIVISOR
from .models import HillshadeOptions, ShadingMethod
from .normals import surface_normals
# endregion

ArrayLike = Union[float, Sequence[float], np.ndarray]


# region Light Vectors
def light_vectors(azimuth: ArrayLike, altitude: ArrayLike) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unit vectors pointing at the light source(s).

    azimuth is in compass degrees (clockwise from north) and is turned by
    -90 degrees so that it lines up with the grid axes; altitude is in degrees
    above the horizon. Inputs broadcast against each other.
    """
    az = np.radians((np.asarray(azimuth, dtype=np.float64) - 90.0) % 360.0)
    alt = np.radians(np.asarray(altitude, dtype=np.float64))
    az, alt = np.broadcast_arrays(az, alt)
    sx = np.cos(alt) * np.cos(az)
    sy = np.cos(alt) * np.sin(az)
    sz = np.sin(alt)
    return sx, sy, sz


def light_vector(azimuth: float, altitude: float) -> Tuple[float, float, float]:
    sx, sy, sz = light_vectors(azimuth, altitude)
    return float(sx), float(sy), float(sz)
# endregion

# region Shading Models
def shade_surfnorm(
    Z: np.ndarray,
    cellsize: float,
    azimuth: float,
    altitude: float,
    exaggerate: float = 1.0,
) -> np.ndarray:
    """cos(angle) between surface normal and the light; not clipped, slopes facing away go negative."""
    nx, ny, nz = surface_normals(Z, cellsize, exaggerate)
    sx, sy, sz = light_vector(azimuth, altitude)
    return nx * sx + ny * sy + nz * sz


def shade_mdow(
    Z: np.ndarray,
    cellsize: float,
    exaggerate: float = 1.0,
) -> np.ndarray:
    """
    Multi-directional oblique weighting: four low (30 degree) lights from the
    NW quadrant. Each contribution is clipped at zero before summing, and the
    sum is divided by MDOW_DIVISOR (3, not the number of lights).
    """
    nx, ny, nz = surface_normals(Z, cellsize, exaggerate)
    sx, sy, sz = light_vectors(MDOW_AZIMUTHS, MDOW_ALTITUDE)

    H = np.zeros(nx.shape, dtype=np.float64)
    for i in range(sx.size):
        # fmax: an undefined normal contributes nothing rather than NaN
        H += np.fmax(nx * sx[i] + ny * sy[i] + nz * sz[i], 0.0)
    return H / MDOW_DIVISOR
# endregion

# region Dispatch
def shade_block(Z: np.ndarray, cellsize: float, options: HillshadeOptions) -> np.ndarray:
    """Run the configured shading model on one elevation array (full grid or halo'd block)."""
    method = options.method
    if method is ShadingMethod.SURFNORM:
        return shade_surfnorm(Z, cellsize, options.azimuth, options.altitude, options.exaggerate)
    elif method is ShadingMethod.MDOW:
        return shade_mdow(Z, cellsize, options.exaggerate)
    raise ValueError(f"Unknown shading method: {method!r}")
# endregion
