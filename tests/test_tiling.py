import random
import threading
import time

import numpy as np
import pytest
from numpy.testing import assert_allclose, assert_array_equal

import reliefshade.tiling as tiling
from reliefshade.illumination import shade_block
from reliefshade.models import HillshadeOptions
from reliefshade.tiling import (
    best_block_size,
    extract_block,
    generate_blocks,
    process_blocks,
)


# region Block size solver
@pytest.mark.parametrize("shape, k, expected", [
    ((300, 120), 2000, (300, 120)),      # smaller than k: one block per axis
    ((6000, 500), 2000, (2000, 500)),    # k divides evenly
    ((4500, 100), 2000, (1500, 100)),    # largest exact divisor in [k/2, k]
    ((10001, 10001), 2000, (1667, 1667)),  # 10001 = 73 * 137: least padding wins
])
def test_best_block_size(shape, k, expected):
    assert best_block_size(shape, k) == expected


def test_best_block_size_never_below_two():
    assert best_block_size((50, 50), 1) == (2, 2)
# endregion


# region Block layout
def _coverage(shape, blocks):
    hits = np.zeros(shape, dtype=int)
    for b in blocks:
        hits[b.write_slice] += 1
    return hits


@pytest.mark.parametrize("shape, block_shape", [((20, 30), (7, 10)), ((9, 9), (3, 4)), ((5, 40), (5, 6))])
def test_blocks_cover_grid_exactly_once(shape, block_shape):
    blocks = generate_blocks(shape, block_shape)
    assert_array_equal(_coverage(shape, blocks), 1)
    assert [b.index for b in blocks] == list(range(len(blocks)))


def test_blocks_are_row_major():
    blocks = generate_blocks((10, 10), (5, 5))
    assert [(b.row_start, b.col_start) for b in blocks] == [(0, 0), (0, 5), (5, 0), (5, 5)]


def test_trailing_sliver_is_merged():
    blocks = generate_blocks((11, 10), (5, 5))
    assert sorted({(b.row_start, b.row_end) for b in blocks}) == [(0, 5), (5, 11)]
    assert_array_equal(_coverage((11, 10), blocks), 1)


def test_clip_mode_halo_stops_at_grid_edge():
    blocks = generate_blocks((10, 10), (5, 5), border=1, border_mode="clip")
    first, last = blocks[0], blocks[-1]
    assert (first.row_start_full, first.row_end_full) == (0, 6)
    assert (first.col_start_full, first.col_end_full) == (0, 6)
    assert (last.row_start_full, last.row_end_full) == (4, 10)
    assert all(b.pad_top == b.pad_bottom == b.pad_left == b.pad_right == 0 for b in blocks)


def test_symmetric_mode_mirrors_at_grid_edge():
    Z = np.arange(100, dtype=float).reshape(10, 10)
    blocks = generate_blocks(Z.shape, (5, 5), border=1, border_mode="symmetric")
    first = blocks[0]
    assert (first.pad_top, first.pad_bottom, first.pad_left, first.pad_right) == (1, 0, 1, 0)

    block = extract_block(Z, first)
    assert block.shape == (7, 7)
    assert_array_equal(block, np.pad(Z, 1, mode="symmetric")[0:7, 0:7])
    assert_array_equal(block[first.core_slice], Z[first.write_slice])


def test_interior_block_reads_one_cell_halo():
    blocks = generate_blocks((15, 15), (5, 5))
    middle = blocks[4]
    assert middle.read_slice == (slice(4, 11), slice(4, 11))
    assert middle.core_slice == (slice(1, 6), slice(1, 6))


def test_generate_blocks_rejects_empty_blocks():
    with pytest.raises(ValueError):
        generate_blocks((10, 10), (0, 5))
# endregion


# region Processing
@pytest.mark.parametrize("method", ["surfnorm", "mdow"])
@pytest.mark.parametrize("block_size", [2, 3, 7, 16, 1000])
@pytest.mark.parametrize("use_parallel", [False, True])
def test_tiled_equals_direct(rough_dem, method, block_size, use_parallel):
    opts = HillshadeOptions(
        method=method, azimuth=123, altitude=33, exaggerate=4,
        block_size=block_size, use_parallel=use_parallel, max_workers=4,
    )
    direct = shade_block(rough_dem.Z, rough_dem.cellsize, opts)
    tiled = process_blocks(rough_dem.Z, rough_dem.cellsize, opts)
    assert tiled.shape == rough_dem.shape
    assert_allclose(tiled, direct, rtol=1e-9, atol=1e-12)


def test_symmetric_mode_matches_direct_away_from_grid_edge(rough_dem):
    opts = HillshadeOptions(block_size=10, border_mode="symmetric", use_parallel=False)
    direct = shade_block(rough_dem.Z, rough_dem.cellsize, opts)
    tiled = process_blocks(rough_dem.Z, rough_dem.cellsize, opts)
    assert tiled.shape == direct.shape
    assert_allclose(tiled[1:-1, 1:-1], direct[1:-1, 1:-1], rtol=1e-9, atol=1e-12)


def test_result_does_not_depend_on_completion_order(rough_dem, monkeypatch):
    rng = random.Random(0)
    lock = threading.Lock()

    def slow_shade(Z, cellsize, options):
        with lock:
            delay = rng.random() * 0.01
        time.sleep(delay)
        return shade_block(Z, cellsize, options)

    monkeypatch.setattr(tiling, "shade_block", slow_shade)
    opts = HillshadeOptions(block_size=8, use_parallel=True, max_workers=8)
    tiled = process_blocks(rough_dem.Z, rough_dem.cellsize, opts)
    assert_allclose(tiled, shade_block(rough_dem.Z, rough_dem.cellsize, opts), rtol=1e-9, atol=1e-12)


@pytest.mark.parametrize("use_parallel", [False, True])
def test_block_failure_aborts_the_run(rough_dem, monkeypatch, use_parallel):
    calls = []
    lock = threading.Lock()

    def failing_shade(Z, cellsize, options):
        with lock:
            calls.append(1)
            n = len(calls)
        if n == 3:
            raise RuntimeError("worker fault")
        return shade_block(Z, cellsize, options)

    monkeypatch.setattr(tiling, "shade_block", failing_shade)
    opts = HillshadeOptions(block_size=8, use_parallel=use_parallel, max_workers=2)
    with pytest.raises(RuntimeError, match="worker fault"):
        process_blocks(rough_dem.Z, rough_dem.cellsize, opts)


def test_resolve_workers():
    assert tiling._resolve_workers(HillshadeOptions(use_parallel=False, max_workers=8), 10) == 1
    assert tiling._resolve_workers(HillshadeOptions(max_workers=8), 3) == 3
    assert tiling._resolve_workers(HillshadeOptions(max_workers=2), 10) == 2
    assert tiling._resolve_workers(HillshadeOptions(), 1) == 1
# endregion
