# region Header
"""
run_hillshade.py: shaded relief of a synthetic DEM

Requires:
  pip install -e .

Examples:
  python run_hillshade.py --rows 512 --cols 768 --azimuth 300 --altitude 40
  python run_hillshade.py --method mdow --exaggerate 3 --save relief.png
  python run_hillshade.py --rows 3000 --cols 3000 --tiling-threshold 1000000 --block-size 700
"""
# endregion

# region Imports
import argparse
import logging
import sys

import matplotlib.pyplot as plt

from reliefshade import hillshade, make_synthetic_dem, show_hillshade
from reliefshade.config import (
    DEFAULT_AZIMUTH,
    DEFAULT_ALTITUDE,
    DEFAULT_EXAGGERATE,
    DEFAULT_METHOD,
    DEFAULT_BLOCK_SIZE,
    TILING_THRESHOLD_CELLS,
)
# endregion

logger = logging.getLogger("run_hillshade")


# region CLI
def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(description="Hillshade a synthetic DEM and display it.")
    p.add_argument("--rows", type=int, default=256)
    p.add_argument("--cols", type=int, default=256)
    p.add_argument("--cellsize", type=float, default=30.0)
    p.add_argument("--seed", type=int, default=0)
    p.add_argument("--azimuth", type=float, default=DEFAULT_AZIMUTH)
    p.add_argument("--altitude", type=float, default=DEFAULT_ALTITUDE)
    p.add_argument("--exaggerate", type=float, default=DEFAULT_EXAGGERATE)
    p.add_argument("--method", default=DEFAULT_METHOD,
                   help="surfnorm (single-direction) or mdow (multi-direction-oblique)")
    p.add_argument("--block-size", type=int, default=DEFAULT_BLOCK_SIZE)
    p.add_argument("--tiling-threshold", type=int, default=TILING_THRESHOLD_CELLS)
    p.add_argument("--no-tiling", action="store_true")
    p.add_argument("--no-parallel", action="store_true")
    p.add_argument("--save", default=None, help="write the figure to this path instead of showing it")
    p.add_argument("-v", "--verbose", action="store_true")
    return p


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s.%(msecs)03d [%(levelname)s] %(name)s:%(lineno)d | %(message)s",
        datefmt="%H:%M:%S",
    )

    dem = make_synthetic_dem(args.rows, args.cols, seed=args.seed, cellsize=args.cellsize)
    try:
        H = hillshade(
            dem,
            azimuth=args.azimuth,
            altitude=args.altitude,
            exaggerate=args.exaggerate,
            method=args.method,
            use_tiling=not args.no_tiling,
            use_parallel=not args.no_parallel,
            block_size=args.block_size,
            tiling_threshold=args.tiling_threshold,
        )
    except (ValueError, TypeError) as e:
        logger.error(f"invalid options: {e}")
        return 2

    logger.info(f"shading range [{H.Z.min():.4f}, {H.Z.max():.4f}]")

    title = f"{args.method}, az {args.azimuth:g}, alt {args.altitude:g}, x{args.exaggerate:g}"
    show_hillshade(H, title=title, show=args.save is None)
    if args.save:
        plt.savefig(args.save, dpi=150)
        logger.info(f"saved {args.save}")
    return 0
# endregion


if __name__ == "__main__":
    sys.exit(main())
