"""Procedural drawing of box-drawing, block and placeholder glyph bitmaps."""

from __future__ import annotations

import math
from typing import Sequence

from .bitmap import Bitmap
from .geometry import Color, Size

_TRANSPARENT = Color(0, 0, 0, 0)


def _white(alpha: int) -> Color:
    return Color(int(alpha) & 0xFF, 255, 255, 255)


def _fill(bitmap: Bitmap, left: int, top: int, width: int, height: int, color: Color) -> None:
    """Paint a rectangle, silently clipping whatever falls outside the bitmap."""
    size = bitmap.size
    x_start, x_end = max(left, 0), min(left + width, size.width)
    y_start, y_end = max(top, 0), min(top + height, size.height)
    for x in range(x_start, x_end):
        for y in range(y_start, y_end):
            bitmap[x, y] = color


def _center(size: Size, thickness: int) -> tuple:
    cx = int(math.floor(size.width / 2.0 - thickness / 2.0))
    cy = int(math.floor(size.height / 2.0 - thickness / 2.0))
    return cx, cy


def make_box_lines(size: Size, pattern: Sequence[int]) -> Bitmap:
    """Draw a box-drawing glyph from a 5x5 pattern of line segments.

    The inner 3x3 cells of the pattern mark pixels around the centre, the
    outer ring marks lines running to the edges. A pattern shorter than 25
    entries yields a blank tile.
    """
    result = Bitmap(size, _TRANSPARENT)
    if len(pattern) < 25:
        return result

    thickness = 1
    cx, cy = _center(size, thickness)
    cl = cx - thickness
    ct = cy - thickness
    cr = cl + thickness * 3
    cb = ct + thickness * 3
    opaque = _white(255)

    for dy in range(-1, 2):
        for dx in range(-1, 2):
            if pattern[(dy + 2) * 5 + (dx + 2)]:
                _fill(result, cx + dx * thickness, cy + dy * thickness, thickness, thickness, opaque)

    for dy in range(-1, 2):
        row = cy + dy * thickness
        if pattern[(dy + 2) * 5]:
            _fill(result, 0, row, cl, thickness, opaque)
        if pattern[(dy + 2) * 5 + 4]:
            _fill(result, cr, row, size.width - cr, thickness, opaque)

    for dx in range(-1, 2):
        column = cx + dx * thickness
        if pattern[dx + 2]:
            _fill(result, column, 0, thickness, ct, opaque)
        if pattern[4 * 5 + dx + 2]:
            _fill(result, column, cb, thickness, size.height - cb, opaque)

    return result


def make_dash_lines(size: Size, vertical: bool, thick: bool, parts: int) -> Bitmap:
    """Draw a dashed line of at most ``parts`` dashes through the tile centre."""
    result = Bitmap(size, _TRANSPARENT)
    thickness = 1
    cx, cy = _center(size, thickness)

    length = size.height if vertical else size.width
    n = min(int(math.floor((length + 1) / 2.0)), parts)
    if n < 1:
        return result

    gap = max(int(math.floor(length / n / 2.0)), 1)
    dash = int(math.floor((length - gap * (n - 1)) / n))
    total = dash * n + gap * (n - 1)
    start_extra = end_extra = 0
    if total < length:
        extra = (length - total) / 2.0
        start_extra = int(math.floor(extra))
        end_extra = int(math.ceil(extra))

    t = 3 if thick else 1
    across = (cx if vertical else cy) - (t - 1) // 2 * thickness
    span = t * thickness
    opaque = _white(255)

    def segment(offset: int, extent: int) -> None:
        if vertical:
            _fill(result, across, offset, span, extent, opaque)
        else:
            _fill(result, offset, across, extent, span, opaque)

    segment(0, start_extra)
    for i in range(n):
        segment(start_extra + i * (dash + gap), dash)
    segment(length - end_extra, end_extra)
    return result


def make_vertical_split(size: Size, start: float, end: float) -> Bitmap:
    """Fill the band between fractions ``start`` and ``end`` of the height."""
    result = Bitmap(size, _TRANSPARENT)
    tt = int(math.floor(start * size.height))
    tb = int(math.ceil(start * size.height))
    bt = int(math.floor(end * size.height))
    bb = int(math.ceil(end * size.height))

    if bt > tb:
        _fill(result, 0, tb, size.width, bt - tb, _white(255))
    if tt < tb:
        _fill(result, 0, tt, size.width, 1, _white(int((tb - start) * 255)))
    if bt < bb:
        _fill(result, 0, bt, size.width, 1, _white(int((end - bt) * 255)))
    return result


def make_horizontal_split(size: Size, start: float, end: float) -> Bitmap:
    """Fill the band between fractions ``start`` and ``end`` of the width."""
    result = Bitmap(size, _TRANSPARENT)
    ll = int(math.floor(start * size.width))
    lr = int(math.ceil(start * size.width))
    rl = int(math.floor(end * size.width))
    rr = int(math.ceil(end * size.width))

    if rl > lr:
        _fill(result, lr, 0, rl - lr, size.height, _white(255))
    if ll < lr:
        _fill(result, ll, 0, 1, size.height, _white(int((lr - start) * 255)))
    if rl < rr:
        _fill(result, rr - 1, 0, 1, size.height, _white(int((end - rl) * 255)))
    return result


def make_quadrant_tile(
    size: Size,
    top_left: bool,
    top_right: bool,
    bottom_left: bool,
    bottom_right: bool,
) -> Bitmap:
    """Fill the selected quadrants; odd sizes round the centre to the top-left."""
    result = Bitmap(size, _TRANSPARENT)
    left = int(math.floor(size.width / 2.0))
    top = int(math.floor(size.height / 2.0))
    right, bottom = left, top
    opaque = _white(255)

    if top_left:
        _fill(result, 0, 0, left, top, opaque)
    if top_right:
        _fill(result, right, 0, size.width - right, top, opaque)
    if bottom_left:
        _fill(result, 0, bottom, left, size.height - bottom, opaque)
    if bottom_right:
        _fill(result, right, bottom, size.width - right, size.height - bottom, opaque)
    return result


def make_not_a_character_tile(size: Size) -> Bitmap:
    """Draw a hollow frame one pixel inside the tile border."""
    result = Bitmap(size, Color())
    opaque = _white(255)
    _fill(result, 1, 1, size.width - 2, 1, opaque)
    _fill(result, 1, size.height - 2, size.width - 2, 1, opaque)
    _fill(result, 1, 1, 1, size.height - 2, opaque)
    _fill(result, size.width - 2, 1, 1, size.height - 2, opaque)
    return result