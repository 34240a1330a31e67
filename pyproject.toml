[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pgmfilter"
version = "0.1.0"
description = "3x3 convolution filters for greyscale PGM images, with strip-partitioned runs, PNG conversion and RMSE comparison"
requires-python = ">=3.10"
keywords = ["pgm", "image", "convolution", "filter", "sobel", "emboss", "sharpen", "smoothing", "png"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Environment :: Console",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Topic :: Scientific/Engineering :: Image Processing",
]
dependencies = [
    "numpy",
    "pillow",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
pgmfilter = "pgmfilter.cli:main"
pgmfilter-compare = "pgmfilter.compare:main"

[tool.hatch.build.targets.wheel]
packages = ["pgmfilter"]

[tool.pytest.ini_options]
addopts = "-ra"
