# pgmfilter

3×3 convolution filters for 8-bit greyscale PGM images, and the tools around them:

- reading and writing PGM files in plain (`P2`) and raw (`P5`) form (`pgmfilter.pgm`);
- the filters `smooth`, `sharpen`, `edge` and `emboss`, in several border and arithmetic variants (`pgmfilter.filters`);
- filtering an image strip by strip, the way the rows would be split between workers (`pgmfilter.partition`);
- converting PNG to greyscale PGM and PGM to PNG (`pgmfilter.pngconvert`);
- the root-mean-square difference between two filter outputs (`pgmfilter.compare`).

Images are NumPy `uint8` arrays of shape `(height, width)`.

## Installation

```
pip install .
```

With the test dependencies:

```
pip install .[test]
```

## Command line

### Filtering

```
pgmfilter filter smooth
pgmfilter filter edge --variant hybrid --workers 4
```

This reads `--input` (default `images/input/grayscale.pgm`), applies the filter and writes `<output-dir>/<name>_output.pgm` (default directory `images/output`). It prints the output path and the time taken.

Options:

- `--variant`: `serial` (default), `openmp`, `hybrid` or `mpi`. The `serial` variant writes a raw `P5` file and the others write a plain `P2` file.
- `--workers`: the number of strips for the `hybrid` and `mpi` variants (default 1).
- `--runs`: the number of timed runs. The default is 4 for `openmp` and 1 for the others. With more than one run, each run's time and the average are printed.

How the variants differ:

- `serial` filters the interior and leaves the one-pixel border at zero.
- `openmp` is the same as `serial`, except that `smooth` uses the sharpening kernel divided by 16, and the result wraps around modulo 256 instead of being clamped.
- `hybrid` splits the rows into equal strips of `height // workers` rows. Rows outside the image count as zero. Leftover rows and the outermost columns stay zero.
- `mpi` filters strips that skip the top and bottom rows. Its `edge` is the Sobel gradient magnitude. Its `smooth` is a Gaussian over balanced strips that treats pixels outside the image as zero.

### Conversion

```
pgmfilter to-pgm input.png grayscale.pgm          # plain P2
pgmfilter to-pgm input.png grayscale.pgm --raw    # raw P5
pgmfilter to-png edge_output.pgm edge_output.png
```

When reading a PNG, alpha is dropped and 16-bit samples are cut to 8 bits. Colour pixels are converted with Rec. 709 luminance.

### Comparison

```
pgmfilter-compare serial/images/output other/images/output --label Hybrid
```

For each filter name, this compares `<name>_output.pgm` in the two directories. Both files must be 512×512 PGM, in either `P2` or `P5` form. It prints `RMSE between <reference-label> and <label> (<name>): <value>`.

Options:

- `--names`: which filters to compare (default: all four).
- `--reference-label`: default `Serial`.
- `--label`: default `Candidate`.
- `--smooth-offset`: a baseline subtracted from the smoothing RMSE. The result never goes below zero.

Every command exits with status 1 and an error message if a file is malformed or missing, or if a name is unknown.

## Library

```python
from pgmfilter.pgm import read_pgm, write_pgm, PGMFormat
from pgmfilter.filters import apply_filter, Filter, Variant
from pgmfilter.partition import run_hybrid
from pgmfilter.compare import rmse

image = read_pgm("images/input/grayscale.pgm", (512, 512))
edges = apply_filter(image, Filter.EDGE)
write_pgm("images/output/edge_output.pgm", edges, PGMFormat.PLAIN)

print(rmse(edges, run_hybrid(image, "edge", 4)))
```

### `pgmfilter.pgm`

- `parse_pgm` and `format_pgm` convert between bytes and arrays.
- `read_pgm` and `write_pgm` do the same for files.
- `read_pgm` and `parse_pgm` take an optional `shape`, and raise `PGMError` if the image has a different shape.
- `PGMError` is also raised for bad headers, for a maxval above 255 and for truncated data.

### `pgmfilter.filters`

- `apply_filter(image, name, variant)` applies a named filter.
- `convolve(image, kernel, divisor, offset)` filters the interior with any odd square kernel.
- `sobel_magnitude` computes the Sobel gradient magnitude.
- `smooth_zero_padded` is a Gaussian over every pixel.
- `clamp` limits a value to 0..255.

### `pgmfilter.partition`

- Strip layouts: `hybrid_strips`, `mpi_strips` and `balanced_strips`. Each returns `Strip` objects.
- `padded_strip` returns a strip's rows with one neighbouring row above and below.
- `run_hybrid`, `run_mpi` and `run_mpi_smoothing` filter an image strip by strip.

### `pgmfilter.pngconvert`

- `load_png_gray(path, weighted)` loads a PNG as greyscale. With `weighted=True`, colour uses 0.3/0.59/0.11 weights.
- `png_to_pgm` and `pgm_to_png` convert between the formats. Both take an optional required `shape`.
- `rgb_to_gray` converts one pixel.
- `ConversionError` is raised for non-PNG input or a wrong shape.

### `pgmfilter.compare`

- `rmse(first, second)` measures the difference over the interior pixels.
- `adjusted_rmse` subtracts a baseline.
- `compare_filter` and `compare_directories` work on files.

## What it does not do

The strip-wise variants reproduce how rows are divided between workers. However, the strips are computed one after another in a single process. Nothing runs in parallel, and no message-passing or threading runtime is used. The timings reported by `pgmfilter filter` measure this single-process computation.

## Tests

```
pip install .[test]
python -m pytest
```