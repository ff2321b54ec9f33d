"""In-memory ARGB bitmaps with blitting, resizing and transparency helpers."""

from __future__ import annotations

import math
from enum import Enum
from typing import Iterable, List, Optional, Tuple, Union

from .geometry import Color, Point, Rectangle, Size

PixelKey = Union[Point, Tuple[int, int]]


class ResizeFilter(Enum):
    """Interpolation used when resizing a bitmap."""

    NEAREST = "nearest"
    BILINEAR = "bilinear"
    BICUBIC = "bicubic"

    @classmethod
    def parse(cls, text: str) -> ResizeFilter:
        """Parse a filter name such as ``bilinear``."""
        try:
            return cls(text.strip())
        except ValueError:
            raise ValueError(f"unknown resize filter '{text}'") from None

    def __str__(self) -> str:
        return self.value


class ResizeMode(Enum):
    """How the aspect ratio is treated when resizing a bitmap."""

    STRETCH = "stretch"
    FIT = "fit"
    CROP = "crop"

    @classmethod
    def parse(cls, text: str) -> ResizeMode:
        """Parse a mode name such as ``fit``."""
        try:
            return cls(text.strip())
        except ValueError:
            raise ValueError(f"unknown resize mode '{text}'") from None

    def __str__(self) -> str:
        return self.value


def _round_half_away(value: float) -> int:
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class Bitmap:
    """A rectangular grid of colours stored row by row."""

    def __init__(self, size: Size = Size(), color: Color = Color()):
        self._size = Size(int(size.width), int(size.height))
        self._pixels: List[Color] = [color] * max(0, self._size.area())

    @classmethod
    def from_pixels(cls, size: Size, pixels: Iterable[Color]) -> Bitmap:
        """Build a bitmap from row-major pixels; their count must match the area."""
        data = list(pixels)
        bitmap = cls(size)
        if len(data) != len(bitmap._pixels):
            raise ValueError(
                f"expected {len(bitmap._pixels)} pixels for {size}, got {len(data)}"
            )
        bitmap._pixels = data
        return bitmap

    @property
    def size(self) -> Size:
        return self._size

    @property
    def pixels(self) -> List[Color]:
        """A copy of the pixels in row-major order."""
        return list(self._pixels)

    def copy(self) -> Bitmap:
        return Bitmap.from_pixels(self._size, self._pixels)

    def is_empty(self) -> bool:
        return self._size.area() == 0

    def _index(self, key: PixelKey) -> int:
        x, y = (key.x, key.y) if isinstance(key, Point) else key
        if not (0 <= x < self._size.width and 0 <= y < self._size.height):
            raise IndexError(f"pixel ({x}, {y}) is outside of {self._size}")
        return y * self._size.width + x

    def __getitem__(self, key: PixelKey) -> Color:
        return self._pixels[self._index(key)]

    def __setitem__(self, key: PixelKey, color: Color) -> None:
        self._pixels[self._index(key)] = color

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Bitmap):
            return NotImplemented
        return self._size == other._size and self._pixels == other._pixels

    def __repr__(self) -> str:
        return f"Bitmap({self._size.width}x{self._size.height})"

    def _row(self, y: int, left: int, width: int) -> List[Color]:
        start = y * self._size.width + left
        return self._pixels[start:start + width]

    def _put_row(self, y: int, left: int, row: List[Color]) -> None:
        start = y * self._size.width + left
        self._pixels[start:start + len(row)] = row

    def blit(
        self,
        src: Bitmap,
        location: Point = Point(),
        src_region: Optional[Rectangle] = None,
    ) -> None:
        """Copy a region of ``src`` (all of it by default) to ``location``.

        Raises IndexError if the destination does not fit inside this bitmap.
        """
        if src_region is None:
            src_region = Rectangle.from_size(src.size)
        src_size = src_region.size()
        if not Rectangle.from_size(self._size).contains(
            Rectangle.from_location(location, src_size)
        ):
            raise IndexError("Bitmap.blit: region is out of range")
        for dy in range(src_size.height):
            row = src._row(src_region.top + dy, src_region.left, src_size.width)
            self._put_row(location.y + dy, location.x, row)

    def blit_unchecked(self, src: Bitmap, location: Point) -> None:
        """Copy ``src`` to ``location``, clipping whatever falls outside."""
        left = max(-location.x, 0)
        right = min(src.size.width - 1, self._size.width - location.x - 1)
        top = max(-location.y, 0)
        bottom = min(src.size.height - 1, self._size.height - location.y - 1)
        if left > right or top > bottom:
            return
        width = right - left + 1
        for y in range(top, bottom + 1):
            self._put_row(location.y + y, location.x + left, src._row(y, left, width))

    def extract(self, region: Rectangle) -> Bitmap:
        """Return a copy of ``region``; raises IndexError if it is out of bounds."""
        if not Rectangle.from_size(self._size).contains(region):
            raise IndexError("Bitmap.extract: region is out of range")
        rows: List[Color] = []
        for y in range(region.top, region.top + region.height):
            rows.extend(self._row(y, region.left, region.width))
        return Bitmap.from_pixels(region.size(), rows)

    def has_alpha(self) -> bool:
        return any(pixel.a < 0xFF for pixel in self._pixels)

    def make_transparent(self, color: Color) -> None:
        """Make pixels of ``color`` transparent.

        When ``color`` is black (alpha ignored) and the image is grayscale, the
        brightness becomes alpha over white instead.
        """
        if color.r == 0 and color.g == 0 and color.b == 0:
            luma: List[int] = []
            for pixel in self._pixels:
                low = min(pixel.r, pixel.g, pixel.b)
                high = max(pixel.r, pixel.g, pixel.b)
                if high - low > 1:
                    break
                luma.append(high)
            else:
                self._pixels = [Color(value, 255, 255, 255) for value in luma]
                return

        self._pixels = [
            Color(0, p.r, p.g, p.b) if p == color else p for p in self._pixels
        ]

    def resize(
        self,
        size: Size,
        filter: Union[ResizeFilter, str] = ResizeFilter.BILINEAR,
        mode: Union[ResizeMode, str] = ResizeMode.STRETCH,
    ) -> Bitmap:
        """Return a resized copy using the given filter and aspect mode."""
        if isinstance(filter, str):
            filter = ResizeFilter.parse(filter)
        if isinstance(mode, str):
            mode = ResizeMode.parse(mode)

        width, height = self._size.width, self._size.height
        if mode is ResizeMode.FIT:
            factor = min(size.width / width, size.height / height)
            intermediate_size = Size(int(width * factor), int(height * factor))
        elif mode is ResizeMode.CROP:
            factor = max(size.width / width, size.height / height)
            intermediate_size = Size(int(width * factor), int(height * factor))
        elif mode is ResizeMode.STRETCH:
            intermediate_size = size
        else:
            raise ValueError("Bitmap.resize: unknown resize mode")

        if filter is ResizeFilter.NEAREST:
            intermediate = resize_nearest(self, intermediate_size)
        elif filter is ResizeFilter.BILINEAR:
            intermediate = resize_bilinear(self, intermediate_size)
        elif filter is ResizeFilter.BICUBIC:
            intermediate = resize_bicubic(self, intermediate_size)
        else:
            raise ValueError("Bitmap.resize: unknown resize filter")

        if intermediate_size == size:
            return intermediate
        if mode is ResizeMode.FIT:
            result = Bitmap(size, Color(255, 0, 0, 0))
            left = (size.width - intermediate_size.width) // 2
            top = (size.height - intermediate_size.height) // 2
            result.blit(intermediate, Point(left, top))
            return result
        if mode is ResizeMode.CROP:
            result = Bitmap(size, Color())
            left = (intermediate_size.width - size.width) // 2
            top = (intermediate_size.height - size.height) // 2
            result.blit(intermediate, Point(), Rectangle.from_location(Point(left, top), size))
            return result
        raise RuntimeError("Bitmap.resize: internal logic error")

    def center_of_mass(self) -> Point:
        """Visual centre estimated from the opaque extent of columns and rows."""
        width, height = self._size.width, self._size.height
        columns = [0] * width
        rows = [0] * height
        for y in range(height):
            for x in range(width):
                a = self._pixels[y * width + x].a
                columns[x] = max(columns[x], a)
                rows[y] = max(rows[y], a)

        def weight(values: Iterable[int]) -> int:
            total = 0
            for value in values:
                if value >= 224:
                    break
                total += 255 - value
            return total

        wf = width + (weight(columns) - weight(reversed(columns))) / 255.0
        hf = height + (weight(rows) - weight(reversed(rows))) / 255.0
        return Point(_round_half_away(wf / 2.0), _round_half_away(hf / 2.0))


def resize_nearest(original: Bitmap, size: Size) -> Bitmap:
    """Resize by picking the nearest source pixel."""
    result = Bitmap(size, Color())
    hfactor = size.width / original.size.width
    vfactor = size.height / original.size.height
    for y in range(size.height):
        oy = int(math.floor(y / vfactor))
        for x in range(size.width):
            ox = int(math.floor(x / hfactor))
            result[x, y] = original[ox, oy]
    return result


def resize_bilinear(original: Bitmap, size: Size) -> Bitmap:
    """Resize with bilinear interpolation of all four channels."""
    src_w, src_h = original.size.width, original.size.height
    result = Bitmap(size, Color())

    def sample(ox: float, oy: float) -> Color:
        x1 = int(math.floor(ox))
        y1 = int(math.floor(oy))
        dx1, dx2 = ox - x1, (x1 + 1) - ox
        dy1, dy2 = oy - y1, (y1 + 1) - oy
        w1, w2, w3, w4 = dx2 * dy2, dx1 * dy2, dx2 * dy1, dx1 * dy1

        q11 = original[x1, y1]
        q12 = original[x1, y1 + 1] if y1 + 1 < src_h else q11
        q21 = original[x1 + 1, y1] if x1 + 1 < src_w else q11
        q22 = original[x1 + 1, y1 + 1] if x1 + 1 < src_w and y1 + 1 < src_h else q11

        def mix(channel: str) -> int:
            return int(
                getattr(q11, channel) * w1
                + getattr(q21, channel) * w2
                + getattr(q12, channel) * w3
                + getattr(q22, channel) * w4
            )

        return Color(mix("a"), mix("r"), mix("g"), mix("b"))

    hfactor = size.width / src_w
    vfactor = size.height / src_h
    for y in range(size.height):
        oy = y / vfactor
        for x in range(size.width):
            result[x, y] = sample(x / hfactor, oy)
    return result


def _bicubic_kernel(x: float) -> float:
    if x > 2.0:
        return 0.0
    xm1, xp1, xp2 = x - 1.0, x + 1.0, x + 2.0
    a = 0.0 if xp2 <= 0.0 else xp2 ** 3
    b = 0.0 if xp1 <= 0.0 else xp1 ** 3
    c = 0.0 if x <= 0.0 else x ** 3
    d = 0.0 if xm1 <= 0.0 else xm1 ** 3
    return (a - 4.0 * b + 6.0 * c - 4.0 * d) / 6.0


def resize_bicubic(original: Bitmap, size: Size) -> Bitmap:
    """Resize with a cubic B-spline kernel over a 4x4 neighbourhood."""
    src_w, src_h = original.size.width, original.size.height
    result = Bitmap(size, Color())
    x_factor = src_w / size.width
    y_factor = src_h / size.height
    xmax, ymax = src_w - 1, src_h - 1

    for y in range(size.height):
        oy = y * y_factor - 0.5
        oy1 = int(oy)
        dy = oy - oy1
        for x in range(size.width):
            ox = x * x_factor - 0.5
            ox1 = int(ox)
            dx = ox - ox1
            acc = [0.0, 0.0, 0.0, 0.0]
            for n in range(-1, 3):
                k1 = _bicubic_kernel(dy - n)
                oy2 = min(max(oy1 + n, 0), ymax)
                for m in range(-1, 3):
                    k2 = k1 * _bicubic_kernel(m - dx)
                    ox2 = min(max(ox1 + m, 0), xmax)
                    p = original[ox2, oy2]
                    acc[0] += k2 * p.a
                    acc[1] += k2 * p.r
                    acc[2] += k2 * p.g
                    acc[3] += k2 * p.b
            a, r, g, b = (min(max(int(v), 0), 255) for v in acc)
            result[x, y] = Color(a, r, g, b)
    return result