# tileterm

The parts of a tile-based pseudo-terminal that need no window. Each module can
be used by itself:

- `tileterm.geometry` defines the `Size`, `Point`, `Color` and `Rectangle`
  value types. `Color` takes its channels in the order `a, r, g, b`.
- `tileterm.encoding` converts text as UTF-8 (limited to the Basic Multilingual
  Plane), UCS-2 and UCS-4. It also supports custom single-byte codepages built
  from a list of code points and ranges (`CustomCodepage`,
  `get_unibyte_encoding`).
- `tileterm.bitmap` provides an ARGB `Bitmap`. It can blit (checked or
  clipped), extract regions, apply colour-key transparency and estimate a
  centre of mass. It resizes with three filters (`ResizeFilter.NEAREST`,
  `BILINEAR`, `BICUBIC`) and three modes (`ResizeMode.STRETCH`, `FIT`, `CROP`).
- `tileterm.imageload` decodes BMP data (uncompressed 8, 24 or 32 bits per
  pixel), PNG data and JPEG data into a `Bitmap`. `load_bitmap` picks the
  format from the leading bytes. Data it cannot read raises `ImageFormatError`.
- `tileterm.tiles` holds the drawing primitives for procedural glyphs: box
  lines, dashes, vertical and horizontal splits, quadrants, and a placeholder
  frame.
- `tileterm.dynamic_tileset` builds on those primitives to generate and cache
  tiles for the Unicode range U+2500 to U+259F and for U+FFFD
  (`is_dynamic_tile`, `generate_dynamic_tile`, `DynamicTileset`).
- `tileterm.options` parses option strings of the form
  `name.sub: value, key=value; ...` (`parse_options`, `OptionGroup`).
- `tileterm.config` provides `Config`, which holds properties in `ini.` and
  `sys.` domains. Section and property names are matched without regard to
  case.
- `tileterm.inifile` edits a single property of an INI file in place
  (`update_ini_file`). It keeps the file's UTF-8 BOM, its line endings, its
  comments and the original casing of names.

## Installation

```
pip install tileterm
```

Python 3.10 or newer is required. The only runtime dependency is Pillow, which
decodes PNG and JPEG data.

## Examples

Generate a box-drawing tile:

```python
from tileterm.geometry import Size
from tileterm.dynamic_tileset import generate_dynamic_tile, is_dynamic_tile

assert is_dynamic_tile(0x253C)
tile = generate_dynamic_tile(0x253C, Size(8, 16))   # ┼ on an 8x16 cell
```

Parse an option string:

```python
from tileterm.options import parse_options

groups = parse_options("window: size=80x25, title='My game'; font: tiles.png, size=8x8")
for group in groups:
    print(group.name, group.attributes)
```

Load and resize an image:

```python
from tileterm.imageload import load_bitmap
from tileterm.bitmap import ResizeFilter, ResizeMode
from tileterm.geometry import Size

with open("tiles.png", "rb") as f:
    image = load_bitmap(f.read())
scaled = image.resize(Size(32, 32), ResizeFilter.BICUBIC, ResizeMode.FIT)
```

Read and write settings:

```python
from tileterm.config import Config

config = Config("game.ini")
config.reload()
title = config.get("ini.window.title", "untitled")
config.set("ini.window.title", "My game")   # also rewrites game.ini
```

If `Config` is not given a file name, `reload` chooses one with
`guess_config_filename`. A file named by the `BEARLIB_INIFILE` environment
variable is preferred. After that, a file named after the application is
preferred over any other `.ini` file. Files in the current directory take
precedence over files in the application directory.

Messages from the package are sent through the standard `logging` module.

## What this package does not do

The package does not open a window and does not render cells to the screen. It
does not read keyboard or mouse input. It does not provide a logging facility
of its own. It supplies only the data types, decoders, tile generators and
configuration handling that such a terminal would be built on.

## Running the tests

```
pip install -e .[test]
pytest
```