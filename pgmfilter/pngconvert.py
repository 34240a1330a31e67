"""Conversion between PNG images and 8-bit greyscale PGM files."""

from __future__ import annotations

from typing import Optional, Tuple, Union

import numpy as np
from PIL import Image, UnidentifiedImageError

from .pgm import PathType, PGMFormat, read_pgm, write_pgm

Shape = Optional[Tuple[int, int]]

# Rec. 709 luminance weights in 15-bit fixed point; they sum to 1 << 15.
_RED_WEIGHT = 6968
_GREEN_WEIGHT = 23434
_BLUE_WEIGHT = 2366
_FIXED_SHIFT = 15


class ConversionError(ValueError):
    """Raised when an image cannot be converted."""


def rgb_to_gray(r: int, g: int, b: int) -> int:
    """Greyscale value of one RGB pixel: 0.3 R + 0.59 G + 0.11 B, truncated."""
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"colour channels must lie between 0 and 255, got {channel}")
    return int(0.3 * r + 0.59 * g + 0.11 * b)


def _weighted_gray(rgb: np.ndarray) -> np.ndarray:
    channels = rgb.astype(np.float64)
    values = 0.3 * channels[..., 0] + 0.59 * channels[..., 1] + 0.11 * channels[..., 2]
    return values.astype(np.uint8)


def _luminance(rgb: np.ndarray) -> np.ndarray:
    channels = rgb.astype(np.int64)
    total = (
        _RED_WEIGHT * channels[..., 0]
        + _GREEN_WEIGHT * channels[..., 1]
        + _BLUE_WEIGHT * channels[..., 2]
        + (1 << (_FIXED_SHIFT - 1))
    )
    return (total >> _FIXED_SHIFT).astype(np.uint8)


def _to_gray(img: Image.Image, weighted: bool) -> np.ndarray:
    mode = img.mode
    if weighted:
        return _weighted_gray(np.asarray(img.convert("RGB")))
    if mode == "1":
        return np.asarray(img.convert("L"), dtype=np.uint8)
    if mode == "L":
        return np.asarray(img, dtype=np.uint8).copy()
    if mode == "LA":
        return np.asarray(img)[..., 0].astype(np.uint8)
    if mode.startswith("I"):
        # Sixteen-bit samples keep their high byte.
        return (np.asarray(img).astype(np.int64) >> 8).clip(0, 255).astype(np.uint8)
    if mode in ("RGB", "RGBA"):
        return _luminance(np.asarray(img)[..., :3])
    return _luminance(np.asarray(img.convert("RGB")))


def load_png_gray(path: PathType, weighted: bool = False) -> np.ndarray:
    """Load a PNG file as a (height, width) uint8 greyscale array.

    Alpha is discarded and sixteen-bit samples are cut to eight bits. Colour
    pixels use Rec. 709 luminance, or the 0.3/0.59/0.11 weighting when
    ``weighted`` is true.
    """
    try:
        with Image.open(path) as img:
            if img.format != "PNG":
                raise ConversionError(f"not a PNG file: {path}")
            img.load()
            return _to_gray(img, weighted)
    except UnidentifiedImageError:
        raise ConversionError(f"not a PNG file: {path}") from None


def _check_shape(pixels: np.ndarray, shape: Shape) -> None:
    if shape is None:
        return
    expected_h, expected_w = shape
    height, width = pixels.shape
    if (height, width) != (expected_h, expected_w):
        raise ConversionError(
            f"image must be {expected_w}x{expected_h}, got {width}x{height}"
        )


def png_to_pgm(
    png_path: PathType,
    pgm_path: PathType,
    fmt: Union[PGMFormat, str] = PGMFormat.PLAIN,
    shape: Shape = None,
) -> np.ndarray:
    """Convert a PNG file to a greyscale PGM file and return the pixels."""
    pixels = load_png_gray(png_path)
    _check_shape(pixels, shape)
    write_pgm(pgm_path, pixels, fmt)
    return pixels


def pgm_to_png(pgm_path: PathType, png_path: PathType, shape: Shape = None) -> np.ndarray:
    """Convert a P2 or P5 PGM file to an 8-bit greyscale PNG and return the pixels."""
    pixels = read_pgm(pgm_path)
    _check_shape(pixels, shape)
    Image.fromarray(np.ascontiguousarray(pixels, dtype=np.uint8)).save(png_path, format="PNG")
    return pixels