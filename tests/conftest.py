import sys
from pathlib import Path

import matplotlib

matplotlib.use("Agg")

import numpy as np
import pytest


def _ensure_repo_on_path():
    # run_hillshade.py lives at the repo root, next to the package
    repo = Path(__file__).resolve().parents[1]
    if str(repo) not in sys.path:
        sys.path.insert(0, str(repo))


_ensure_repo_on_path()

from reliefshade import ElevationGrid, make_synthetic_dem  # noqa: E402


@pytest.fixture
def flat_dem():
    return ElevationGrid(Z=np.full((5, 5), 100.0), cellsize=30.0, name="flat", zunit="m")


@pytest.fixture
def rough_dem():
    return make_synthetic_dem(61, 47, seed=3, cellsize=30.0)


@pytest.fixture
def smooth_dem():
    return make_synthetic_dem(64, 64, seed=1, cellsize=100.0, noise_sd=0.0)
