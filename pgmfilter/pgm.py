"""Reading and writing 8-bit greyscale PGM images in plain (P2) and raw (P5) form."""

from __future__ import annotations

import enum
from os import PathLike
from pathlib import Path
from typing import Optional, Tuple, Union

import numpy as np

MAXVAL = 255
_WHITESPACE = b" \t\n\r\v\f"

PathType = Union[str, "PathLike[str]"]
Shape = Optional[Tuple[int, int]]


class PGMError(ValueError):
    """Raised for malformed, unsupported or mismatched PGM data."""


class PGMFormat(str, enum.Enum):
    """The two PGM encodings: ASCII pixel values or raw bytes."""

    PLAIN = "P2"
    RAW = "P5"


def _is_space(data: bytes, pos: int) -> bool:
    return pos < len(data) and data[pos:pos + 1] in _WHITESPACE


def _next_token(data: bytes, pos: int) -> Tuple[bytes, int]:
    """Return the next header token and the position just after it."""
    size = len(data)
    while pos < size:
        if _is_space(data, pos):
            pos += 1
        elif data[pos:pos + 1] == b"#":
            end = data.find(b"\n", pos)
            pos = size if end < 0 else end + 1
        else:
            break
    start = pos
    while pos < size and not _is_space(data, pos) and data[pos:pos + 1] != b"#":
        pos += 1
    if start == pos:
        raise PGMError("unexpected end of PGM header")
    return data[start:pos], pos


def _header_int(data: bytes, pos: int, what: str) -> Tuple[int, int]:
    token, pos = _next_token(data, pos)
    try:
        value = int(token)
    except ValueError:
        raise PGMError(f"invalid {what} in PGM header: {token!r}") from None
    return value, pos


def _as_pixels(image) -> np.ndarray:
    pixels = np.asarray(image)
    if pixels.ndim != 2:
        raise PGMError(f"a PGM image must be two-dimensional, got {pixels.ndim} dimensions")
    if not (np.issubdtype(pixels.dtype, np.integer) or pixels.dtype == np.bool_):
        raise PGMError(f"PGM pixels must be integers, got {pixels.dtype}")
    if pixels.size and (pixels.min() < 0 or pixels.max() > MAXVAL):
        raise PGMError(f"PGM pixels must lie between 0 and {MAXVAL}")
    return pixels.astype(np.uint8)


def parse_pgm(data: bytes, shape: Shape = None) -> np.ndarray:
    """Decode P2 or P5 bytes into a (height, width) uint8 array.

    If ``shape`` is given, the image must have exactly that (height, width).
    """
    data = bytes(data)
    magic, pos = _next_token(data, 0)
    try:
        fmt = PGMFormat(magic.decode("ascii"))
    except (UnicodeDecodeError, ValueError):
        raise PGMError(f"unsupported PGM format: {magic!r} (need P2 or P5)") from None

    width, pos = _header_int(data, pos, "width")
    height, pos = _header_int(data, pos, "height")
    maxval, pos = _header_int(data, pos, "maxval")
    if width <= 0 or height <= 0:
        raise PGMError(f"invalid image size {width}x{height}")
    if not 0 < maxval <= MAXVAL:
        raise PGMError(f"unsupported maxval {maxval} (must be 1..{MAXVAL})")
    if shape is not None and (height, width) != tuple(shape):
        expected_h, expected_w = shape
        raise PGMError(
            f"image dimensions mismatch: expected {expected_w}x{expected_h}, "
            f"got {width}x{height}"
        )

    count = width * height
    if fmt is PGMFormat.RAW:
        if not _is_space(data, pos):
            raise PGMError("missing pixel data after PGM header")
        pixels = data[pos + 1:pos + 1 + count]
        if len(pixels) < count:
            raise PGMError(f"truncated pixel data: expected {count} bytes, got {len(pixels)}")
        return np.frombuffer(pixels, dtype=np.uint8).reshape(height, width).copy()

    tokens = data[pos:].split()[:count]
    if len(tokens) < count:
        raise PGMError(f"truncated pixel data: expected {count} values, got {len(tokens)}")
    try:
        values = np.array([int(token) for token in tokens], dtype=np.int64)
    except ValueError:
        raise PGMError("non-numeric pixel value in PGM data") from None
    return (values % 256).astype(np.uint8).reshape(height, width)


def format_pgm(image, fmt: Union[PGMFormat, str] = PGMFormat.PLAIN) -> bytes:
    """Encode a two-dimensional array of 0..255 values as PGM bytes."""
    try:
        fmt = PGMFormat(fmt)
    except ValueError:
        raise PGMError(f"unsupported PGM format: {fmt!r}") from None
    pixels = _as_pixels(image)
    height, width = pixels.shape
    header = f"{fmt.value}\n{width} {height}\n{MAXVAL}\n".encode("ascii")
    if fmt is PGMFormat.RAW:
        return header + pixels.tobytes()
    body = "".join(
        "".join(f"{value} " for value in row) + "\n" for row in pixels.tolist()
    )
    return header + body.encode("ascii")


def read_pgm(path: PathType, shape: Shape = None) -> np.ndarray:
    """Read a P2 or P5 file into a (height, width) uint8 array."""
    return parse_pgm(Path(path).read_bytes(), shape)


def write_pgm(path: PathType, image, fmt: Union[PGMFormat, str] = PGMFormat.PLAIN) -> None:
    """Write an image to a PGM file in the given encoding."""
    Path(path).write_bytes(format_pgm(image, fmt))