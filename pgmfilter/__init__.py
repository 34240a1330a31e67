"""Convolution filters, strip-wise filtering, PNG conversion and RMSE comparison for greyscale PGM images."""

__version__ = "0.1.0"
__all__ = ["pgm", "filters", "partition", "pngconvert", "compare", "cli"]