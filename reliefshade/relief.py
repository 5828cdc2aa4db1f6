"""
Shaded relief from a digital elevation model.

hillshade() computes the illumination of a surface lit from a given
azimuth and altitude. The result is the cosine of the angle between
surface normal and light (method 'surfnorm'), or the multi-directional
oblique weighting of four low light sources (method 'mdow').

Grids larger than options.tiling_threshold cells are processed in blocks,
optionally on a worker pool; the result is the same as in a single pass.

Example:
    >>> dem = ElevationGrid(Z, cellsize=30.0, name="dem", zunit="m")
    >>> H = hillshade(dem, azimuth=315, altitude=45, exaggerate=2)
    >>> H.name, H.shape == dem.shape
    ('hillshade', True)
"""

from __future__ import annotations
from typing import Any, Dict, Optional, Union
import logging

from .config import OUTPUT_NAME
from .illumination import shade_block
from .models import ElevationGrid, HillshadeOptions
from .tiling import process_blocks
from .viz import show_hillshade

logger = logging.getLogger(__name__)

OptionsLike = Union[HillshadeOptions, Dict[str, Any], None]


def _resolve_options(options: OptionsLike, overrides: Dict[str, Any]) -> HillshadeOptions:
    if options is None:
        return HillshadeOptions.from_dict(overrides)
    if isinstance(options, HillshadeOptions):
        return options.updated(**overrides)
    if isinstance(options, dict):
        return HillshadeOptions.from_dict({**options, **overrides})
    raise TypeError(f"options must be HillshadeOptions, dict or None, got {type(options).__name__}")


def _as_grid(dem) -> ElevationGrid:
    if isinstance(dem, ElevationGrid):
        return dem
    # any object exposing Z and cellsize will do
    try:
        Z, cellsize = dem.Z, dem.cellsize
    except AttributeError:
        raise TypeError(
            f"dem must expose 'Z' and 'cellsize', got {type(dem).__name__}"
        ) from None
    return ElevationGrid(
        Z=Z,
        cellsize=cellsize,
        name=getattr(dem, "name", ""),
        zunit=getattr(dem, "zunit", ""),
    )


def hillshade(dem, options: OptionsLike = None, **overrides) -> ElevationGrid:
    """
    Compute the hillshade of an elevation grid.

    Args:
        dem: ElevationGrid, or any object with a 2D array ``Z`` and a scalar ``cellsize``
        options: HillshadeOptions or dict of options (None for defaults)
        **overrides: individual options (azimuth, altitude, exaggerate, method,
            use_tiling, use_parallel, block_size, tiling_threshold, max_workers,
            border_mode), applied on top of ``options``

    Returns:
        ElevationGrid of the same shape with Z replaced by the shading values,
        name 'hillshade' and an empty zunit. 'surfnorm' values are not clipped
        and are negative on slopes facing away from the light.

    Raises:
        ValueError, TypeError: invalid options or grid, before any computation
    """
    opts = _resolve_options(options, overrides)
    grid = _as_grid(dem)

    if opts.use_tiling and grid.size > opts.tiling_threshold:
        logger.info(
            f"hillshade: {grid.shape[0]}x{grid.shape[1]} cells exceed "
            f"{opts.tiling_threshold}; tiled ({opts.method.value})"
        )
        H = process_blocks(grid.Z, grid.cellsize, opts)
    else:
        logger.info(f"hillshade: {grid.shape[0]}x{grid.shape[1]} cells; direct ({opts.method.value})")
        H = shade_block(grid.Z, grid.cellsize, opts)

    return grid.with_values(H, name=OUTPUT_NAME, zunit="")


def plot_hillshade(
    dem,
    ax=None,
    title: Optional[str] = None,
    show: bool = True,
    options: OptionsLike = None,
    **overrides,
):
    """Compute the hillshade and display it as an 8-bit gray image. Returns the AxesImage."""
    H = hillshade(dem, options, **overrides)
    return show_hillshade(H, ax=ax, title=title, show=show)
