# region Imports
from typing import Tuple
import numpy as np
# endregion

# region Derivatives
def _derivative(surface: np.ndarray, axis: int) -> np.ndarray:
    """
    Central differences inside, second-order one-sided differences on the
    boundary. Axes too short for that stencil fall back to first order, or
    to a flat derivative for a single cell.
    """
    n = surface.shape[axis]
    if n >= 3:
        return np.gradient(surface, axis=axis, edge_order=2)
    if n == 2:
        return np.gradient(surface, axis=axis, edge_order=1)
    return np.zeros_like(surface)
# endregion

# region Surface Normals
def surface_normals(
    Z: np.ndarray,
    cellsize: float = 1.0,
    exaggerate: float = 1.0,
) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Unit surface normals (Nx, Ny, Nz) of the surface Z * exaggerate / cellsize,
    sampled on a unit grid (x = column index, y = row index).

    The normal is the cross product of the row and column tangents
    (1, 0, dz/dx) x (0, 1, dz/dy) = (-dz/dx, -dz/dy, 1), normalised.
    Every cell only looks at its direct neighbours (two cells inward at the
    grid boundary), so a block padded with a one-cell halo gives the same
    normals as the full grid.
    """
    surface = np.asarray(Z, dtype=np.float64) / cellsize * exaggerate

    dzdx = _derivative(surface, axis=1)
    dzdy = _derivative(surface, axis=0)

    nx = -dzdx
    ny = -dzdy
    # |(nx, ny, 1)| >= 1, no zero-length guard needed
    mag = np.sqrt(nx * nx + ny * ny + 1.0)
    return nx / mag, ny / mag, 1.0 / mag
# endregion
