# config.py
DEFAULT_AZIMUTH = 315.0      # compass degrees, clockwise from north
DEFAULT_ALTITUDE = 60.0      # degrees above the horizon
DEFAULT_EXAGGERATE = 1.0
DEFAULT_METHOD = "surfnorm"

DEFAULT_BLOCK_SIZE = 2000
# Grids with more cells than this are processed block by block
TILING_THRESHOLD_CELLS = 10001 * 10001
BLOCK_BORDER = 1             # halo width; matches the normal estimator's stencil radius
MIN_BLOCK_EXTENT = 2         # narrower trailing blocks are merged into their neighbour
BORDER_MODES = ("clip", "symmetric")
DEFAULT_BORDER_MODE = "clip"

# Multi-directional oblique weighting: four fixed sources at a low sun
MDOW_AZIMUTHS = (360.0, 315.0, 225.0, 270.0)
MDOW_ALTITUDE = 30.0
MDOW_DIVISOR = 3.0

OUTPUT_NAME = "hillshade"
