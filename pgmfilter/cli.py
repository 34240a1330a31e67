"""Command-line entry point: apply a filter to a PGM image and convert between PNG and PGM."""

from __future__ import annotations

import argparse
import sys
import time
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, Union

import numpy as np

from .filters import Filter, Variant, apply_filter
from .partition import run_hybrid, run_mpi
from .pgm import PathType, PGMError, PGMFormat, read_pgm, write_pgm
from .pngconvert import ConversionError, pgm_to_png, png_to_pgm

DEFAULT_INPUT = Path("images/input/grayscale.pgm")
DEFAULT_OUTPUT_DIR = Path("images/output")
OPENMP_RUNS = 4
MPI = "mpi"
VARIANTS = (Variant.SERIAL.value, Variant.OPENMP.value, Variant.HYBRID.value, MPI)


def _filter_name(name: Union[Filter, str]) -> Filter:
    try:
        return Filter(name)
    except ValueError:
        raise ValueError(f"Unknown filter: {name}") from None


def _variant_name(variant: Union[Variant, str]) -> str:
    value = getattr(variant, "value", variant)
    if value not in VARIANTS:
        raise ValueError(f"Unknown variant: {value}")
    return value


def filter_output_path(output_dir: PathType, name: Union[Filter, str]) -> Path:
    """Where a filter's result is written: ``<output_dir>/<name>_output.pgm``."""
    return Path(output_dir) / f"{_filter_name(name).value}_output.pgm"


def _compute(pixels: np.ndarray, chosen: Filter, variant: str, workers: int) -> np.ndarray:
    if variant == MPI:
        return run_mpi(pixels, chosen, workers)
    if variant == Variant.HYBRID.value:
        return run_hybrid(pixels, chosen, workers)
    return apply_filter(pixels, chosen, variant)


def run_filter(
    input_path: PathType,
    output_dir: PathType,
    name: Union[Filter, str],
    variant: Union[Variant, str] = Variant.SERIAL,
    workers: int = 1,
    runs: Optional[int] = None,
) -> Tuple[Path, List[float]]:
    """Filter a PGM file, write the result and return its path with the time of each run.

    The serial variant writes raw (P5) output, the others plain (P2). By
    default the OpenMP variant is timed over four runs, the others over one.
    """
    chosen = _filter_name(name)
    mode = _variant_name(variant)
    if runs is None:
        runs = OPENMP_RUNS if mode == Variant.OPENMP.value else 1
    if runs < 1:
        raise ValueError(f"number of runs must be positive, got {runs}")
    if workers < 1:
        raise ValueError(f"number of workers must be positive, got {workers}")

    pixels = read_pgm(input_path)
    times = []
    result = None
    for _ in range(runs):
        started = time.perf_counter()
        result = _compute(pixels, chosen, mode, workers)
        times.append(time.perf_counter() - started)

    out_path = filter_output_path(output_dir, chosen)
    fmt = PGMFormat.RAW if mode == Variant.SERIAL.value else PGMFormat.PLAIN
    write_pgm(out_path, result, fmt)
    return out_path, times


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="pgmfilter",
        description="Apply 3x3 filters to greyscale PGM images.",
    )
    commands = parser.add_subparsers(dest="command", required=True)

    run = commands.add_parser("filter", help="apply a filter to an image")
    run.add_argument("name", help="filter name: smooth, sharpen, edge or emboss")
    run.add_argument("--variant", default=Variant.SERIAL.value, help=f"one of {', '.join(VARIANTS)}")
    run.add_argument("--workers", type=int, default=1, help="strips for the hybrid and mpi variants")
    run.add_argument("--runs", type=int, default=None, help="number of timed runs")
    run.add_argument("--input", default=str(DEFAULT_INPUT), help="input PGM file")
    run.add_argument("--output-dir", default=str(DEFAULT_OUTPUT_DIR), help="directory for the result")

    to_pgm = commands.add_parser("to-pgm", help="convert a PNG image to greyscale PGM")
    to_pgm.add_argument("png")
    to_pgm.add_argument("pgm")
    to_pgm.add_argument("--raw", action="store_true", help="write raw (P5) instead of plain (P2)")

    to_png = commands.add_parser("to-png", help="convert a PGM image to PNG")
    to_png.add_argument("pgm")
    to_png.add_argument("png")
    return parser


def _run_command(args: argparse.Namespace) -> None:
    if args.command == "filter":
        out_path, times = run_filter(
            args.input, args.output_dir, args.name, args.variant, args.workers, args.runs
        )
        if len(times) > 1:
            for number, taken in enumerate(times, start=1):
                print(f"Run {number}: {args.name} filter applied in {taken:.6f} seconds")
        print(f"{args.name} filter saved to {out_path}")
        label = "Average Execution Time" if len(times) > 1 else "Execution Time"
        print(f"{label}: {sum(times) / len(times):.6f} seconds")
    elif args.command == "to-pgm":
        fmt = PGMFormat.RAW if args.raw else PGMFormat.PLAIN
        png_to_pgm(args.png, args.pgm, fmt)
        print(f"Converted {args.png} to {args.pgm}")
    else:
        pgm_to_png(args.pgm, args.png)
        print(f"Converted {args.pgm} to {args.png}")


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the command line and return the exit status."""
    args = _parser().parse_args(argv)
    try:
        _run_command(args)
    except (PGMError, ConversionError, OSError, ValueError) as exc:
        print(exc, file=sys.stderr)
        return 1
    return 0