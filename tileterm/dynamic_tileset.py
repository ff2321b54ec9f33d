"""Tiles generated on demand for box-drawing and block-element characters."""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Mapping, Optional, Tuple

from .bitmap import Bitmap
from .encoding import REPLACEMENT_CHARACTER
from .geometry import Color, Size
from .tiles import (
    make_box_lines,
    make_dash_lines,
    make_horizontal_split,
    make_not_a_character_tile,
    make_quadrant_tile,
    make_vertical_split,
)

CHAR_OFFSET_MASK = 0x00FFFFFF
"""Bits of a code that select the character."""

FONT_OFFSET_MASK = 0xFF000000
"""Bits of a code that select the font."""

# 5x5 segment patterns, row by row, for the box-drawing characters.
_BOX_LINES: Dict[int, str] = {
    0x2500: "00000" "00000" "11111" "00000" "00000",
    0x2501: "00000" "11111" "11111" "11111" "00000",
    0x2502: "00100" "00100" "00100" "00100" "00100",
    0x2503: "01110" "01110" "01110" "01110" "01110",
    0x250C: "00000" "00000" "00111" "00100" "00100",
    0x250D: "00000" "00111" "00111" "00111" "00100",
    0x250E: "00000" "00000" "00111" "01110" "01110",
    0x250F: "00000" "01111" "01111" "01111" "01110",
    0x2510: "00000" "00000" "11100" "00100" "00100",
    0x2511: "00000" "11100" "11100" "11100" "00100",
    0x2512: "00000" "00000" "11110" "01110" "01110",
    0x2513: "00000" "11110" "11110" "11110" "01110",
    0x2514: "00100" "00100" "00111" "00000" "00000",
    0x2515: "00100" "00111" "00111" "00111" "00000",
    0x2516: "01110" "01110" "01111" "00000" "00000",
    0x2517: "01110" "01111" "01111" "01111" "00000",
    0x2518: "00100" "00100" "11100" "00000" "00000",
    0x2519: "00100" "11100" "11100" "11100" "00000",
    0x251A: "01110" "01110" "11110" "00000" "00000",
    0x251B: "01110" "11110" "11110" "11110" "00000",
    0x251C: "00100" "00100" "00111" "00100" "00100",
    0x251D: "00100" "00111" "00111" "00111" "00100",
    0x251E: "01110" "01110" "01111" "00100" "00100",
    0x251F: "00100" "00100" "01111" "01110" "01110",
    0x2520: "01110" "01110" "01111" "01110" "01110",
    0x2521: "01110" "01111" "01111" "01111" "00100",
    0x2522: "00100" "01111" "01111" "01111" "01110",
    0x2523: "01110" "01111" "01111" "01111" "01110",
    0x2524: "00100" "00100" "11100" "00100" "00100",
    0x2525: "00100" "11100" "11100" "11100" "00100",
    0x2526: "01110" "01110" "11110" "00100" "00100",
    0x2527: "00100" "00100" "11110" "01110" "01110",
    0x2528: "01110" "01110" "11110" "01110" "01110",
    0x2529: "01110" "11110" "11110" "11110" "00100",
    0x252A: "00100" "11110" "11110" "11110" "01110",
    0x252B: "01110" "11110" "11110" "11110" "01110",
    0x252C: "00000" "00000" "11111" "00100" "00100",
    0x252D: "00000" "11100" "11111" "11100" "00100",
    0x252E: "00000" "00111" "11111" "00111" "00100",
    0x252F: "00000" "11111" "11111" "11111" "01110",
    0x2530: "00000" "00000" "11111" "01110" "01110",
    0x2531: "00000" "11110" "11111" "11110" "01110",
    0x2532: "00000" "01111" "11111" "01111" "01110",
    0x2533: "00000" "11111" "11111" "11111" "01110",
    0x2534: "00100" "00100" "11111" "00000" "00000",
    0x2535: "00100" "11100" "11111" "11100" "00000",
    0x2536: "00100" "00111" "11111" "00111" "00000",
    0x2537: "00100" "11111" "11111" "11111" "00000",
    0x2538: "01110" "01110" "11111" "00000" "00000",
    0x2539: "01110" "11110" "11111" "11110" "00000",
    0x253A: "01110" "01110" "01111" "01110" "01110",
    0x253B: "01110" "11110" "11110" "11110" "01110",
    0x253C: "00100" "00100" "11111" "00100" "00100",
    0x253D: "00100" "11100" "11111" "11100" "00100",
    0x253E: "00100" "00111" "11111" "00111" "00100",
    0x253F: "00100" "11111" "11111" "11111" "00100",
    0x2540: "01110" "01110" "11111" "00100" "00100",
    0x2541: "00100" "00100" "11111" "01110" "01110",
    0x2542: "01110" "01110" "11111" "01110" "01110",
    0x2543: "01110" "11110" "11111" "11110" "00100",
    0x2544: "01110" "01111" "11111" "01111" "00100",
    0x2545: "00100" "11110" "11111" "11110" "01110",
    0x2546: "00100" "00111" "11111" "01111" "01110",
    0x2547: "01110" "11111" "11111" "11111" "00100",
    0x2548: "00100" "11111" "11111" "11111" "01110",
    0x2549: "01110" "11110" "11111" "11110" "01110",
    0x254A: "01110" "01111" "11111" "01111" "01110",
    0x254B: "01110" "11111" "11111" "11111" "01110",
    0x2550: "00000" "11111" "00000" "11111" "00000",
    0x2551: "01010" "01010" "01010" "01010" "01010",
    0x2552: "00000" "00111" "00100" "00111" "00100",
    0x2553: "00000" "00000" "01111" "01010" "01010",
    0x2554: "00000" "01111" "01000" "01011" "01010",
    0x2555: "00000" "11100" "00100" "11100" "00100",
    0x2556: "00000" "00000" "11110" "01010" "01010",
    0x2557: "00000" "11110" "00010" "11010" "01010",
    0x2558: "00100" "00111" "00100" "00111" "00000",
    0x2559: "01010" "01010" "01111" "00000" "00000",
    0x255A: "01010" "01011" "01000" "01111" "00000",
    0x255B: "00100" "11100" "00100" "11100" "00000",
    0x255C: "01010" "01010" "11110" "00000" "00000",
    0x255D: "01010" "11010" "00010" "11110" "00000",
    0x255E: "00100" "00111" "00100" "00111" "00100",
    0x255F: "01010" "01010" "01011" "01010" "01010",
    0x2560: "01010" "01011" "01000" "01011" "01010",
    0x2561: "00100" "11100" "00100" "11100" "00100",
    0x2562: "01010" "01010" "11010" "01010" "01010",
    0x2563: "01010" "11010" "00010" "11010" "01010",
    0x2564: "00000" "11111" "00000" "11111" "00100",
    0x2565: "00000" "00000" "11111" "01010" "01010",
    0x2566: "00000" "11111" "00000" "11011" "01010",
    0x2567: "00100" "11111" "00000" "11111" "00000",
    0x2568: "01010" "01010" "11111" "00000" "00000",
    0x2569: "01010" "11011" "00000" "11111" "00000",
    0x256A: "00100" "11111" "00000" "11111" "00100",
    0x256B: "01010" "01010" "11011" "01010" "01010",
    0x256C: "01010" "11011" "00000" "11011" "01010",
    0x2574: "00000" "00000" "11100" "00000" "00000",
    0x2575: "00100" "00100" "00100" "00000" "00000",
    0x2576: "00000" "00000" "00111" "00000" "00000",
    0x2577: "00000" "00000" "00100" "00100" "00100",
    0x2578: "00000" "11100" "11100" "11100" "00000",
    0x2579: "01110" "01110" "01110" "00000" "00000",
    0x257A: "00000" "00111" "00111" "00111" "00000",
    0x257B: "00000" "00000" "01110" "01110" "01110",
    0x257C: "00000" "00111" "11111" "00111" "00000",
    0x257D: "00100" "00100" "01110" "01110" "01110",
    0x257E: "00000" "11100" "11111" "11100" "00000",
    0x257F: "01110" "01110" "01110" "00100" "00100",
}

# Block elements: (horizontal split?, start fraction, end fraction).
_SPLITS: Dict[int, Tuple[bool, float, float]] = {
    0x2580: (False, 0.0, 0.5),
    0x2581: (False, 1.0 - 0.125, 1.0),
    0x2582: (False, 0.75, 1.0),
    0x2583: (False, 1.0 - 3 * 0.125, 1.0),
    0x2584: (False, 0.5, 1.0),
    0x2585: (False, 1.0 - 5 * 0.125, 1.0),
    0x2586: (False, 0.25, 1.0),
    0x2587: (False, 0.125, 1.0),
    0x2588: (False, 0.0, 1.0),
    0x2589: (True, 0.0, 7 * 0.125),
    0x258A: (True, 0.0, 0.75),
    0x258B: (True, 0.0, 5 * 0.125),
    0x258C: (True, 0.0, 0.5),
    0x258D: (True, 0.0, 3 * 0.125),
    0x258E: (True, 0.0, 0.25),
    0x258F: (True, 0.0, 0.125),
    0x2590: (True, 0.5, 1.0),
    0x2594: (False, 0.0, 0.125),
    0x2595: (True, 1.0 - 0.125, 1.0),
}

# Quadrants: (top left, top right, bottom left, bottom right).
_QUADRANTS: Dict[int, Tuple[bool, bool, bool, bool]] = {
    0x2596: (False, False, True, False),
    0x2597: (False, False, False, True),
    0x2598: (True, False, False, False),
    0x2599: (True, False, True, True),
    0x259A: (True, False, False, True),
    0x259B: (True, True, True, False),
    0x259C: (True, True, False, True),
    0x259D: (False, True, False, False),
    0x259E: (False, True, True, False),
    0x259F: (False, True, True, True),
}

# Dashed lines: (vertical, thick, number of dashes).
_DASHES: Dict[int, Tuple[bool, bool, int]] = {
    0x2504: (False, False, 3),
    0x2505: (False, True, 3),
    0x2506: (True, False, 3),
    0x2507: (True, True, 3),
    0x2508: (False, False, 4),
    0x2509: (False, True, 4),
    0x250A: (True, False, 4),
    0x250B: (True, True, 4),
    0x254C: (False, False, 2),
    0x254D: (False, True, 2),
    0x254E: (True, False, 2),
    0x254F: (True, True, 2),
}

_SHADES: Dict[int, int] = {0x2591: 64, 0x2592: 128, 0x2593: 192}


def is_dynamic_tile(code: int) -> bool:
    """Whether the character part of ``code`` is generated by this tileset."""
    code &= CHAR_OFFSET_MASK
    return 0x2500 <= code <= 0x259F or code == REPLACEMENT_CHARACTER


def generate_dynamic_tile(code: int, size: Size) -> Bitmap:
    """Draw the glyph for ``code``; unknown codes get a placeholder frame."""
    code &= CHAR_OFFSET_MASK

    pattern = _BOX_LINES.get(code)
    if pattern is not None:
        return make_box_lines(size, [int(c) for c in pattern])

    split = _SPLITS.get(code)
    if split is not None:
        horizontal, start, end = split
        if horizontal:
            return make_horizontal_split(size, start, end)
        return make_vertical_split(size, start, end)

    quadrant = _QUADRANTS.get(code)
    if quadrant is not None:
        return make_quadrant_tile(size, *quadrant)

    dash = _DASHES.get(code)
    if dash is not None:
        vertical, thick, parts = dash
        return make_dash_lines(size, vertical, thick, parts)

    shade = _SHADES.get(code)
    if shade is not None:
        return Bitmap(size, Color(shade, 255, 255, 255))

    return make_not_a_character_tile(size)


_SIZE_PATTERN = re.compile(r"\s*(\d+)\s*x\s*(\d+)\s*")


def _parse_size(text: str) -> Size:
    match = _SIZE_PATTERN.fullmatch(text)
    if not match:
        raise ValueError(f"cannot parse size '{text}'")
    return Size(int(match.group(1)), int(match.group(2)))


@dataclass
class TileInfo:
    """A prepared tile: its bitmap and the cell spacing it occupies."""

    tileset: "DynamicTileset"
    bitmap: Bitmap
    spacing: Size


class DynamicTileset:
    """Generates and caches box-drawing and block-element tiles of one size."""

    def __init__(self, offset: int, tile_size: Size):
        self.offset = offset
        self.tile_size = tile_size
        self._cache: Dict[int, TileInfo] = {}

    @classmethod
    def from_attributes(cls, offset: int, attributes: Mapping[str, str]) -> DynamicTileset:
        """Build from option attributes; a ``size`` such as ``8x16`` is required."""
        if "size" not in attributes:
            raise ValueError("DynamicTileset: 'size' attribute is missing")
        try:
            size = _parse_size(attributes["size"])
        except ValueError:
            raise ValueError("DynamicTileset: failed to parse 'size' attribute") from None
        return cls(offset, size)

    @property
    def bounding_box_size(self) -> Size:
        return self.tile_size

    def provides(self, code: int) -> bool:
        return is_dynamic_tile(code)

    def get(self, code: int, spacing: Optional[Size] = None) -> TileInfo:
        """Return the tile for ``code``, generating it on first request.

        ``spacing`` is the cell span of the font the code belongs to; the
        tile is drawn over that many cells.
        """
        if not self.provides(code):
            raise ValueError(
                "DynamicTileset.get: request for a tile which is not provided by this tileset"
            )
        cached = self._cache.get(code)
        if cached is not None:
            return cached

        spacing = spacing or Size(1, 1)
        tile = TileInfo(self, generate_dynamic_tile(code, self.tile_size * spacing), spacing)
        self._cache[code] = tile
        return tile