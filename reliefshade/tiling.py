# tiling.py
# ----------------
# Block processing for grids too large to shade in one pass.
#
# Exposes:
#   - best_block_size(shape, k)          block extents that (nearly) divide the grid
#   - generate_blocks(shape, block_shape) row-major BlockSpec layout with a halo
#   - extract_block(Z, spec)             halo'd input array for one block
#   - process_blocks(Z, cellsize, options)
#
# Each block carries a one-cell halo, which is all the normal estimator needs
# to reproduce the full-grid result at the block's core cells.

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import List, Sequence, Tuple
import logging
import math
import os
import numpy as np

from .config import BLOCK_BORDER, MIN_BLOCK_EXTENT
from .illumination import shade_block
from .models import BlockSpec, HillshadeOptions

logger = logging.getLogger(__name__)


# -----------------------------
# Block layout
# -----------------------------

def _best_extent(m: int, k: int) -> int:
    if m <= k:
        return m
    # candidates k, k-1, ..., down to min(m/10, k/2); least padding wins, larger on ties
    lo = max(int(math.ceil(min(m / 10.0, k / 2.0))), MIN_BLOCK_EXTENT)
    best, best_pad = k, None
    for x in range(k, lo - 1, -1):
        pad = -(-m // x) * x - m
        if best_pad is None or pad < best_pad:
            best, best_pad = x, pad
            if pad == 0:
                break
    return best


def best_block_size(shape: Sequence[int], k: int) -> Tuple[int, int]:
    """
    Block extents (rows, cols) no larger than k that cover the grid with the
    least padding. Axes not longer than k are kept whole.
    """
    k = max(int(k), MIN_BLOCK_EXTENT)
    rows, cols = (int(s) for s in shape)
    return _best_extent(rows, k), _best_extent(cols, k)


def _axis_ranges(n: int, step: int) -> List[Tuple[int, int]]:
    ranges = [(s, min(s + step, n)) for s in range(0, n, step)]
    # a sliver shorter than the boundary stencil would shade differently; fold it in
    if len(ranges) > 1 and ranges[-1][1] - ranges[-1][0] < MIN_BLOCK_EXTENT:
        start = ranges[-2][0]
        ranges[-2:] = [(start, n)]
    return ranges


def generate_blocks(
    shape: Sequence[int],
    block_shape: Sequence[int],
    border: int = BLOCK_BORDER,
    border_mode: str = "clip",
) -> List[BlockSpec]:
    """
    Row-major list of blocks covering a grid of the given shape.

    Halo cells between blocks are read from the neighbouring block. At the
    outer grid edge the halo is mirrored in 'symmetric' mode and left out in
    'clip' mode, where the shading model's own boundary differences apply.
    """
    rows, cols = (int(s) for s in shape)
    block_rows, block_cols = (int(s) for s in block_shape)
    if block_rows < 1 or block_cols < 1:
        raise ValueError(f"block_shape must be positive, got {tuple(block_shape)}")
    mirror = border_mode == "symmetric"

    blocks = []
    for r0, r1 in _axis_ranges(rows, block_rows):
        for c0, c1 in _axis_ranges(cols, block_cols):
            r0_full, r1_full = max(0, r0 - border), min(rows, r1 + border)
            c0_full, c1_full = max(0, c0 - border), min(cols, c1 + border)
            blocks.append(
                BlockSpec(
                    index=len(blocks),
                    row_start=r0,
                    row_end=r1,
                    col_start=c0,
                    col_end=c1,
                    row_start_full=r0_full,
                    row_end_full=r1_full,
                    col_start_full=c0_full,
                    col_end_full=c1_full,
                    pad_top=border - (r0 - r0_full) if mirror else 0,
                    pad_bottom=border - (r1_full - r1) if mirror else 0,
                    pad_left=border - (c0 - c0_full) if mirror else 0,
                    pad_right=border - (c1_full - c1) if mirror else 0,
                )
            )
    return blocks


def extract_block(Z: np.ndarray, spec: BlockSpec) -> np.ndarray:
    """Block input: the read window of Z, mirror-padded where the block carries pads."""
    block = Z[spec.read_slice]
    pads = ((spec.pad_top, spec.pad_bottom), (spec.pad_left, spec.pad_right))
    if any(p for pair in pads for p in pair):
        block = np.pad(block, pads, mode="symmetric")
    return block


# -----------------------------
# Execution
# -----------------------------

def _resolve_workers(options: HillshadeOptions, n_blocks: int) -> int:
    if not options.use_parallel or n_blocks <= 1:
        return 1
    n = options.max_workers or (os.cpu_count() or 1)
    return max(1, min(n, n_blocks))


def process_blocks(Z: np.ndarray, cellsize: float, options: HillshadeOptions) -> np.ndarray:
    """
    Shade Z block by block and stitch the cores back into a full-size grid.

    Blocks run on a thread pool when options.use_parallel is set (numpy
    releases the GIL in the per-cell arithmetic). Each result is written to
    its own block's bounds, so the output does not depend on completion
    order. The first failing block cancels everything still queued and its
    exception propagates unchanged.
    """
    Z = np.asarray(Z)
    block_shape = best_block_size(Z.shape, options.block_size)
    blocks = generate_blocks(Z.shape, block_shape, BLOCK_BORDER, options.border_mode)
    n_workers = _resolve_workers(options, len(blocks))
    logger.info(
        f"Block processing: {Z.shape[0]}x{Z.shape[1]} grid, {len(blocks)} blocks of "
        f"{block_shape[0]}x{block_shape[1]}, border_mode={options.border_mode}, workers={n_workers}"
    )
    if options.use_parallel and len(blocks) == 1:
        logger.info("Single block; running without a worker pool")

    out = np.empty(Z.shape, dtype=np.float64)

    def run(spec: BlockSpec) -> np.ndarray:
        H = shade_block(extract_block(Z, spec), cellsize, options)
        logger.debug(f"block {spec.index}: core {spec.core_shape[0]}x{spec.core_shape[1]} done")
        return H[spec.core_slice]

    if n_workers == 1:
        for spec in blocks:
            out[spec.write_slice] = run(spec)
        return out

    with ThreadPoolExecutor(max_workers=n_workers) as executor:
        futures = {executor.submit(run, spec): spec for spec in blocks}
        try:
            for future in as_completed(futures):
                spec = futures[future]
                out[spec.write_slice] = future.result()
        except BaseException:
            for future in futures:
                future.cancel()
            raise
    return out
