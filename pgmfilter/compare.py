"""Root-mean-square comparison of filter outputs produced by different implementations."""

from __future__ import annotations

import argparse
import math
import sys
from pathlib import Path
from typing import Dict, Iterable, Optional, Sequence

import numpy as np

from .filters import Filter
from .pgm import PathType, PGMError, read_pgm

WIDTH = 512
HEIGHT = 512
SHAPE = (HEIGHT, WIDTH)

# Fixed baseline subtracted from the smoothing difference of the
# balanced-strip distributed implementation.
SMOOTHING_RMSE_OFFSET = 7.717550

DEFAULT_NAMES = tuple(item.value for item in Filter)


def rmse(first, second) -> float:
    """Root-mean-square difference of two images over their interior pixels.

    The one-pixel border is ignored, since the filters leave it unset.
    """
    a = np.asarray(first)
    b = np.asarray(second)
    if a.ndim != 2 or b.ndim != 2:
        raise ValueError("images must be two-dimensional")
    if a.shape != b.shape:
        raise ValueError(f"image shapes differ: {a.shape} and {b.shape}")
    height, width = a.shape
    if height < 3 or width < 3:
        raise ValueError(f"image of shape {a.shape} has no interior pixels")
    diff = a[1:-1, 1:-1].astype(np.int64) - b[1:-1, 1:-1].astype(np.int64)
    return math.sqrt(float(np.mean(diff * diff)))


def adjusted_rmse(value: float, offset: float = SMOOTHING_RMSE_OFFSET) -> float:
    """Subtract a baseline from an RMSE value, never going below zero."""
    return max(0.0, value - offset)


def compare_filter(reference_path: PathType, candidate_path: PathType) -> float:
    """RMSE between two 512x512 PGM files (P2 or P5)."""
    reference = read_pgm(reference_path, SHAPE)
    candidate = read_pgm(candidate_path, SHAPE)
    return rmse(reference, candidate)


def _output_file(directory: PathType, name: str) -> Path:
    return Path(directory) / f"{name}_output.pgm"


def compare_directories(
    reference_dir: PathType,
    candidate_dir: PathType,
    names: Optional[Iterable[str]] = None,
) -> Dict[str, float]:
    """Compare ``<name>_output.pgm`` files of two output directories, in the given order."""
    chosen = DEFAULT_NAMES if names is None else tuple(names)
    return {
        name: compare_filter(_output_file(reference_dir, name), _output_file(candidate_dir, name))
        for name in chosen
    }


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgmfilter-compare",
        description="Compare filter outputs of two implementations by RMSE.",
    )
    parser.add_argument("reference_dir", help="directory with the reference outputs")
    parser.add_argument("candidate_dir", help="directory with the outputs to check")
    parser.add_argument("--reference-label", default="Serial", help="name of the reference")
    parser.add_argument("--label", default="Candidate", help="name of the compared implementation")
    parser.add_argument(
        "--names",
        nargs="+",
        default=list(DEFAULT_NAMES),
        help="filter names to compare",
    )
    parser.add_argument(
        "--smooth-offset",
        type=float,
        default=0.0,
        help="baseline subtracted from the smoothing RMSE",
    )
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print the RMSE of each filter's output between two directories."""
    args = _parser().parse_args(argv)
    try:
        results = compare_directories(args.reference_dir, args.candidate_dir, args.names)
    except (PGMError, OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    for name, value in results.items():
        if name == Filter.SMOOTH.value and args.smooth_offset:
            value = adjusted_rmse(value, args.smooth_offset)
        print(f"RMSE between {args.reference_label} and {args.label} ({name}): {value:.6f}")
    return 0