# synthetic.py
# ----------------
# Reproducible synthetic terrain for demos and tests.

from __future__ import annotations
import numpy as np

from .models import ElevationGrid


def make_synthetic_dem(
    H: int = 256,
    W: int = 256,
    seed: int = 0,
    cellsize: float = 30.0,
    relief: float = 200.0,
    n_craters: int = 6,
    noise_sd: float = 10.0,
) -> ElevationGrid:
    """
    Gentle undulations, a few gaussian depressions and some noise.
    Same seed, same grid.
    """
    if H < 1 or W < 1:
        raise ValueError(f"grid must have at least one cell, got {H}x{W}")

    rng = np.random.default_rng(seed)
    yy, xx = np.meshgrid(np.linspace(0, 6*np.pi, H), np.linspace(0, 6*np.pi, W), indexing='ij')

    base = relief * np.sin(0.2*xx) * np.cos(0.15*yy)
    long_waves = 0.6 * relief * np.sin(0.05*xx + 0.3) * np.cos(0.04*yy - 0.8)
    noise = rng.normal(0, noise_sd, (H, W)) if noise_sd > 0 else 0.0
    Z = base + long_waves + noise

    rr, cc = np.ogrid[:H, :W]
    for _ in range(n_craters):
        r0 = rng.integers(0, H)
        c0 = rng.integers(0, W)
        dist = np.hypot(rr - r0, cc - c0)
        Z = Z - 0.75 * relief * np.exp(-(dist**2) / (2*(rng.uniform(8, 18)**2)))

    return ElevationGrid(Z=Z.astype(np.float64), cellsize=cellsize, name="synthetic dem", zunit="m")
