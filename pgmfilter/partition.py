"""Splitting an image into row strips and filtering the strips independently.

These functions reproduce how the distributed programs divide an image
between workers, including the rows each scheme leaves unfiltered, so that
their results can be reproduced and compared without a message-passing
runtime.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Union

import numpy as np

from .filters import Filter, apply_filter, smooth_zero_padded, sobel_magnitude


@dataclass(frozen=True)
class Strip:
    """A half-open range of image rows handled by one worker."""

    start: int
    stop: int

    def __post_init__(self) -> None:
        if self.start < 0 or self.stop < self.start:
            raise ValueError(f"invalid strip rows {self.start}..{self.stop}")

    @property
    def rows(self) -> int:
        """Number of rows in the strip."""
        return self.stop - self.start

    @property
    def slice(self) -> slice:
        """The strip's rows as a slice into the image."""
        return slice(self.start, self.stop)


def _check_split(height: int, workers: int) -> None:
    if height < 1:
        raise ValueError(f"image height must be positive, got {height}")
    if workers < 1:
        raise ValueError(f"number of workers must be positive, got {workers}")
    if workers > height:
        raise ValueError(f"cannot split {height} rows between {workers} workers")


def hybrid_strips(height: int, workers: int) -> List[Strip]:
    """Equal strips of ``height // workers`` rows; leftover rows are not assigned."""
    _check_split(height, workers)
    chunk = height // workers
    return [Strip(rank * chunk, (rank + 1) * chunk) for rank in range(workers)]


def mpi_strips(height: int, workers: int) -> List[Strip]:
    """Equal strips with the last taking the remainder, skipping the top and bottom rows."""
    _check_split(height, workers)
    per_worker = height // workers
    strips = []
    for rank in range(workers):
        start = rank * per_worker
        stop = height if rank == workers - 1 else start + per_worker
        if start == 0:
            start = 1
        if stop >= height - 1:
            stop = height - 1
        start = min(start, height)
        strips.append(Strip(start, max(stop, start)))
    return strips


def balanced_strips(height: int, workers: int) -> List[Strip]:
    """Strips whose sizes differ by at most one, larger strips first."""
    _check_split(height, workers)
    per_worker, extra = divmod(height, workers)
    strips = []
    for rank in range(workers):
        start = rank * per_worker + min(rank, extra)
        rows = per_worker + (1 if rank < extra else 0)
        strips.append(Strip(start, start + rows))
    return strips


def _as_image(image) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError(f"image must be two-dimensional, got {pixels.ndim} dimensions")
    return pixels


def padded_strip(image, strip: Strip) -> np.ndarray:
    """The strip's rows with one neighbouring row above and below; rows outside the image are zero."""
    pixels = _as_image(image)
    if strip.stop > pixels.shape[0]:
        raise ValueError(f"strip rows {strip.start}..{strip.stop} exceed image height {pixels.shape[0]}")
    padded = np.pad(pixels, ((1, 1), (0, 0)))
    return padded[strip.start:strip.stop + 2].copy()


def _filter_name(name: Union[Filter, str]) -> Filter:
    try:
        return Filter(name)
    except ValueError:
        raise ValueError(f"Unknown filter: {name}") from None


def _assemble(shape, pieces: Iterable) -> np.ndarray:
    result = np.zeros(shape, dtype=np.uint8)
    for strip, rows in pieces:
        result[strip.slice] = rows
    return result


def run_hybrid(image, name: Union[Filter, str], workers: int) -> np.ndarray:
    """Filter equal strips, each seeing zero rows beyond the image edge.

    Rows not assigned to any worker, and the outermost columns, stay zero.
    """
    chosen = _filter_name(name)
    pixels = _as_image(image)
    strips = hybrid_strips(pixels.shape[0], workers)
    pieces = (
        (strip, apply_filter(padded_strip(pixels, strip), chosen)[1:-1])
        for strip in strips
        if strip.rows
    )
    return _assemble(pixels.shape, pieces)


def run_mpi(image, name: Union[Filter, str], workers: int) -> np.ndarray:
    """Filter strips of the whole image as the per-filter distributed programs do.

    Edge detection uses the Sobel gradient magnitude; smoothing uses the
    balanced, zero-padded scheme of :func:`run_mpi_smoothing`.
    """
    chosen = _filter_name(name)
    if chosen is Filter.SMOOTH:
        return run_mpi_smoothing(image, workers)
    pixels = _as_image(image)
    strips = mpi_strips(pixels.shape[0], workers)

    def filtered(strip: Strip) -> np.ndarray:
        window = pixels[strip.start - 1:strip.stop + 1]
        if chosen is Filter.EDGE:
            return sobel_magnitude(window)[1:-1]
        return apply_filter(window, chosen)[1:-1]

    pieces = ((strip, filtered(strip)) for strip in strips if strip.rows)
    return _assemble(pixels.shape, pieces)


def run_mpi_smoothing(image, workers: int) -> np.ndarray:
    """Gaussian smoothing over balanced strips with one-row halos from neighbouring strips."""
    pixels = _as_image(image)
    strips = balanced_strips(pixels.shape[0], workers)
    pieces = (
        (strip, smooth_zero_padded(padded_strip(pixels, strip))[1:-1])
        for strip in strips
        if strip.rows
    )
    return _assemble(pixels.shape, pieces)