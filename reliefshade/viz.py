# region Imports
import numpy as np
import matplotlib.pyplot as plt
# endregion

# region Quantization
def to_uint8(H) -> np.ndarray:
    """Scale shading to 0..255 and saturate; NaN maps to 0, halves round up."""
    v = np.asarray(H, dtype=np.float64) * 255.0
    v = np.nan_to_num(v, nan=0.0, posinf=255.0, neginf=0.0)
    v = np.clip(v, 0.0, 255.0)
    return np.floor(v + 0.5).astype(np.uint8)
# endregion

# region Display
def show_hillshade(grid, ax=None, title=None, show=True):
    """
    Display a shading grid in gray. Axes are in ground units (cellsize * index),
    row 0 at the top. Returns the AxesImage.
    """
    img = to_uint8(grid.Z)
    rows, cols = img.shape
    cs = float(grid.cellsize)
    extent = (0.0, cols * cs, rows * cs, 0.0)

    if ax is None:
        fig, ax = plt.subplots(figsize=(8, 8))

    # color limits follow the data range, like a scaled image
    im = ax.imshow(img, origin="upper", cmap="gray", extent=extent)
    ax.set_title(title if title is not None else (grid.name or "hillshade"))
    ax.set_xlabel(f"x ({cs:g} per cell)")
    ax.set_ylabel("y")

    if show:
        plt.tight_layout()
        plt.show()
    return im
# endregion
