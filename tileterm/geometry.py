"""Integer points, sizes, colours and rectangles."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

Number = Union[int, float]


def _div(a: Number, b: Number) -> Number:
    """Divide like the underlying typed arithmetic: truncating for integers."""
    if isinstance(a, int) and isinstance(b, int):
        return int(a / b)
    return a / b


@dataclass(frozen=True)
class Point:
    """A location on a plane."""

    x: Number = 0
    y: Number = 0

    def __add__(self, other: Point) -> Point:
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)


@dataclass(frozen=True)
class Size:
    """Width and height of an area."""

    width: Number = 0
    height: Number = 0

    def area(self) -> Number:
        return self.width * self.height

    def __mul__(self, other: Union[Size, Number]) -> Size:
        if isinstance(other, Size):
            return Size(self.width * other.width, self.height * other.height)
        return Size(self.width * other, self.height * other)

    def __add__(self, other: Size) -> Size:
        return Size(self.width + other.width, self.height + other.height)

    def __sub__(self, other: Size) -> Size:
        return Size(self.width - other.width, self.height - other.height)


@dataclass(frozen=True)
class Color:
    """An 8-bit-per-channel colour with alpha."""

    a: int = 0
    r: int = 0
    g: int = 0
    b: int = 0


@dataclass(frozen=True)
class Rectangle:
    """An axis-aligned rectangle given by its top-left corner and size."""

    left: Number = 0
    top: Number = 0
    width: Number = 0
    height: Number = 0

    @classmethod
    def from_size(cls, size: Size) -> Rectangle:
        return cls(0, 0, size.width, size.height)

    @classmethod
    def from_location(cls, location: Point, size: Size) -> Rectangle:
        return cls(location.x, location.y, size.width, size.height)

    def location(self) -> Point:
        return Point(self.left, self.top)

    def size(self) -> Size:
        return Size(self.width, self.height)

    def area(self) -> Number:
        return self.width * self.height

    def contains(self, other: Union[Point, Rectangle]) -> bool:
        """Whether a point lies inside, or a rectangle lies wholly inside."""
        if isinstance(other, Point):
            return (
                self.left <= other.x < self.left + self.width
                and self.top <= other.y < self.top + self.height
            )
        return (
            other.left >= self.left
            and other.top >= self.top
            and other.left + other.width <= self.left + self.width
            and other.top + other.height <= self.top + self.height
        )

    def intersection(self, other: Rectangle) -> Rectangle:
        right = self.left + self.width
        bottom = self.top + self.height
        other_right = other.left + other.width
        other_bottom = other.top + other.height

        if (
            other.left > right
            or other_right < self.left
            or other.top > bottom
            or other_bottom < self.top
        ):
            return Rectangle(self.left, self.top, 0, 0)

        left = max(self.left, other.left)
        top = max(self.top, other.top)
        return Rectangle(
            left,
            top,
            min(right, other_right) - left,
            min(bottom, other_bottom) - top,
        )

    def clamp(self, point: Point) -> Point:
        x, y = point.x, point.y
        if x < self.left:
            x = self.left
        if y < self.top:
            y = self.top
        if x >= self.left + self.width:
            x = self.left + self.width - 1
        if y >= self.top + self.height:
            y = self.top + self.height - 1
        return Point(x, y)

    def __add__(self, other: Union[Point, Size]) -> Rectangle:
        if isinstance(other, Point):
            return Rectangle(self.left + other.x, self.top + other.y, self.width, self.height)
        return Rectangle(self.left, self.top, self.width + other.width, self.height + other.height)

    def __sub__(self, other: Union[Point, Size]) -> Rectangle:
        if isinstance(other, Point):
            return Rectangle(self.left - other.x, self.top - other.y, self.width, self.height)
        return Rectangle(self.left, self.top, self.width - other.width, self.height - other.height)

    def __mul__(self, factor: Size) -> Rectangle:
        return Rectangle(
            self.left * factor.width,
            self.top * factor.height,
            self.width * factor.width,
            self.height * factor.height,
        )

    def __truediv__(self, factor: Size) -> Rectangle:
        return Rectangle(
            _div(self.left, factor.width),
            _div(self.top, factor.height),
            _div(self.width, factor.width),
            _div(self.height, factor.height),
        )