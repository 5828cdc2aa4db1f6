"""reliefshade - shaded relief (hillshade) for digital elevation grids."""

__version__ = "0.1.0"

from .models import ElevationGrid, HillshadeOptions, ShadingMethod, BlockSpec
from .normals import surface_normals
from .illumination import light_vector, light_vectors, shade_surfnorm, shade_mdow, shade_block
from .tiling import best_block_size, generate_blocks, extract_block, process_blocks
from .relief import hillshade, plot_hillshade
from .viz import to_uint8, show_hillshade
from .synthetic import make_synthetic_dem

__all__ = [
    "__version__",
    "ElevationGrid",
    "HillshadeOptions",
    "ShadingMethod",
    "BlockSpec",
    "surface_normals",
    "light_vector",
    "light_vectors",
    "shade_surfnorm",
    "shade_mdow",
    "shade_block",
    "best_block_size",
    "generate_blocks",
    "extract_block",
    "process_blocks",
    "hillshade",
    "plot_hillshade",
    "to_uint8",
    "show_hillshade",
    "make_synthetic_dem",
]
