"""Geometry, encodings, bitmaps, image loading, procedural tiles, option parsing and INI configuration for a tile-based pseudo-terminal."""

__version__ = "0.1.0"

__all__ = [
    "bitmap",
    "config",
    "dynamic_tileset",
    "encoding",
    "geometry",
    "imageload",
    "inifile",
    "options",
    "tiles",
]