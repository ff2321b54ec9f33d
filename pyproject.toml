[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tileterm"
version = "0.1.0"
description = "Building blocks for a tile-based pseudo-terminal: geometry, encodings, bitmaps, image loading, procedural box-drawing tiles, option parsing and INI configuration."
requires-python = ">=3.10"
dependencies = [
    "pillow",
]
keywords = [
    "terminal",
    "roguelike",
    "tileset",
    "bitmap",
    "box-drawing",
    "codepage",
    "ini",
]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
    "Topic :: Games/Entertainment",
    "Topic :: Multimedia :: Graphics",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["tileterm"]

[tool.hatch.build.targets.sdist]
include = [
    "tileterm",
    "tests",
]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
