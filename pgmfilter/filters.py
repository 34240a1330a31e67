"""3x3 convolution filters for 8-bit greyscale images."""

from __future__ import annotations

import enum
from typing import Tuple, Union

import numpy as np

GAUSSIAN = np.array([[1, 2, 1], [2, 4, 2], [1, 2, 1]], dtype=np.int64)
SHARPEN = np.array([[0, -1, 0], [-1, 5, -1], [0, -1, 0]], dtype=np.int64)
LAPLACIAN = np.array([[-1, -1, -1], [-1, 8, -1], [-1, -1, -1]], dtype=np.int64)
EMBOSS = np.array([[-2, -1, 0], [-1, 1, 1], [0, 1, 2]], dtype=np.int64)
SOBEL_X = np.array([[-1, 0, 1], [-2, 0, 2], [-1, 0, 1]], dtype=np.int64)
SOBEL_Y = np.array([[-1, -2, -1], [0, 0, 0], [1, 2, 1]], dtype=np.int64)

GAUSSIAN_SUM = 16
EMBOSS_OFFSET = 128


class Filter(str, enum.Enum):
    """The named filters."""

    SMOOTH = "smooth"
    SHARPEN = "sharpen"
    EDGE = "edge"
    EMBOSS = "emboss"


class Variant(str, enum.Enum):
    """How a filter treats the image border and its arithmetic.

    SERIAL fills interior pixels and leaves the border at zero.
    OPENMP is SERIAL, except that smoothing uses the sharpening kernel
    divided by 16 with wrap-around instead of clamping.
    HYBRID treats rows outside the image as zero, so every row is filtered;
    only the leftmost and rightmost columns stay zero.
    """

    SERIAL = "serial"
    OPENMP = "openmp"
    HYBRID = "hybrid"


_SETTINGS = {
    Filter.SMOOTH: (GAUSSIAN, GAUSSIAN_SUM, 0),
    Filter.SHARPEN: (SHARPEN, 1, 0),
    Filter.EDGE: (LAPLACIAN, 1, 0),
    Filter.EMBOSS: (EMBOSS, 1, EMBOSS_OFFSET),
}


def clamp(value):
    """Limit a number or array to the 0..255 range."""
    if isinstance(value, np.ndarray):
        return np.clip(value, 0, 255)
    return max(0, min(255, value))


def _as_image(image) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise ValueError(f"image must be two-dimensional, got {pixels.ndim} dimensions")
    if not (np.issubdtype(pixels.dtype, np.integer) or pixels.dtype == np.bool_):
        raise ValueError(f"image pixels must be integers, got {pixels.dtype}")
    if pixels.size and (pixels.min() < 0 or pixels.max() > 255):
        raise ValueError("image pixels must lie between 0 and 255")
    return pixels.astype(np.int64)


def _as_kernel(kernel) -> np.ndarray:
    weights = np.asarray(kernel)
    if weights.ndim != 2 or weights.shape[0] != weights.shape[1] or weights.shape[0] % 2 == 0:
        raise ValueError(f"kernel must be square with odd size, got shape {weights.shape}")
    if not np.issubdtype(weights.dtype, np.integer):
        raise ValueError(f"kernel weights must be integers, got {weights.dtype}")
    return weights.astype(np.int64)


def _responses(pixels: np.ndarray, kernel: np.ndarray) -> np.ndarray:
    """Weighted neighbourhood sums for every pixel the kernel fully covers."""
    size = kernel.shape[0]
    height, width = pixels.shape
    out_h, out_w = height - size + 1, width - size + 1
    if out_h <= 0 or out_w <= 0:
        return np.zeros((max(out_h, 0), max(out_w, 0)), dtype=np.int64)
    total = np.zeros((out_h, out_w), dtype=np.int64)
    for (di, dj), weight in np.ndenumerate(kernel):
        if weight:
            total += weight * pixels[di:di + out_h, dj:dj + out_w]
    return total


def _interior(shape: Tuple[int, int], values: np.ndarray, radius: int) -> np.ndarray:
    """Place ``values`` inside a zero image, leaving a border of ``radius``."""
    height, width = shape
    out = np.zeros(shape, dtype=np.uint8)
    out[radius:height - radius, radius:width - radius] = values
    return out


def _trunc_div(values: np.ndarray, divisor: int) -> np.ndarray:
    """Integer division rounding towards zero."""
    if divisor == 1:
        return values
    quotient = np.abs(values) // abs(divisor)
    return np.where((values < 0) != (divisor < 0), -quotient, quotient)


def convolve(image, kernel, divisor: int = 1, offset: int = 0) -> np.ndarray:
    """Filter the interior of ``image``; border pixels are left at zero.

    Each result is the weighted sum divided by ``divisor`` (rounding towards
    zero), plus ``offset``, clamped to 0..255.
    """
    if divisor == 0:
        raise ValueError("divisor must not be zero")
    pixels = _as_image(image)
    weights = _as_kernel(kernel)
    values = clamp(_trunc_div(_responses(pixels, weights), divisor) + offset)
    return _interior(pixels.shape, values, weights.shape[0] // 2)


def _lookup(enum_cls, value, kind: str):
    try:
        return enum_cls(value)
    except ValueError:
        raise ValueError(f"Unknown {kind}: {value}") from None


def apply_filter(
    image,
    name: Union[Filter, str],
    variant: Union[Variant, str] = Variant.SERIAL,
) -> np.ndarray:
    """Apply a named filter to a whole image as the given variant does."""
    chosen = _lookup(Filter, name, "filter")
    mode = _lookup(Variant, variant, "variant")
    pixels = _as_image(image)
    kernel, divisor, offset = _SETTINGS[chosen]

    if mode is Variant.HYBRID:
        padded = np.pad(pixels, ((1, 1), (0, 0)))
        return convolve(padded, kernel, divisor, offset)[1:-1]

    if mode is Variant.OPENMP and chosen is Filter.SMOOTH:
        sums = _responses(pixels, SHARPEN)
        values = _trunc_div(sums, GAUSSIAN_SUM) % 256
        return _interior(pixels.shape, values, 1)

    return convolve(pixels, kernel, divisor, offset)


def sobel_magnitude(image) -> np.ndarray:
    """Sobel gradient magnitude of the interior, truncated and clamped; border zero."""
    pixels = _as_image(image)
    gx = _responses(pixels, SOBEL_X)
    gy = _responses(pixels, SOBEL_Y)
    magnitude = np.sqrt((gx * gx + gy * gy).astype(np.float64)).astype(np.int64)
    return _interior(pixels.shape, clamp(magnitude), 1)


def smooth_zero_padded(image) -> np.ndarray:
    """Gaussian smoothing of every pixel, treating outside pixels as zero."""
    pixels = _as_image(image)
    sums = _responses(np.pad(pixels, 1), GAUSSIAN)
    return (sums // GAUSSIAN_SUM).astype(np.uint8)