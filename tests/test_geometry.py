import pytest

from tileterm.geometry import Color, Point, Rectangle, Size


def test_size_area():
    assert Size(3, 4).area() == 3 * 4
    assert Size().area() == 0


def test_size_multiply_by_size():
    assert Size(8, 16) * Size(2, 1) == Size(16, 16)


def test_color_defaults_are_zero():
    assert Color() == Color(0, 0, 0, 0)


def test_rectangle_constructors():
    size = Size(5, 6)
    assert Rectangle.from_size(size) == Rectangle(0, 0, 5, 6)
    assert Rectangle.from_location(Point(1, 2), size) == Rectangle(1, 2, 5, 6)


def test_rectangle_location_size_area():
    rect = Rectangle(1, 2, 5, 6)
    assert rect.location() == Point(1, 2)
    assert rect.size() == Size(5, 6)
    assert rect.area() == rect.size().area()


@pytest.mark.parametrize(
    "point, inside",
    [
        (Point(0, 0), True),
        (Point(9, 9), True),
        (Point(10, 0), False),
        (Point(0, 10), False),
        (Point(-1, 5), False),
    ],
)
def test_contains_point(point, inside):
    assert Rectangle(0, 0, 10, 10).contains(point) is inside


def test_contains_rectangle():
    outer = Rectangle(0, 0, 10, 10)
    assert outer.contains(outer)
    assert outer.contains(Rectangle(2, 2, 8, 8))
    assert not outer.contains(Rectangle(2, 2, 9, 8))
    assert not outer.contains(Rectangle(-1, 0, 2, 2))


def test_intersection_overlap():
    a = Rectangle(0, 0, 10, 10)
    b = Rectangle(5, 5, 10, 10)
    result = a.intersection(b)
    assert result == b.intersection(a)
    assert a.contains(result) and b.contains(result)
    assert result.location() == Point(5, 5)


def test_intersection_disjoint_is_empty_at_own_corner():
    a = Rectangle(3, 4, 2, 2)
    result = a.intersection(Rectangle(100, 100, 1, 1))
    assert result == Rectangle(3, 4, 0, 0)


def test_clamp():
    rect = Rectangle(0, 0, 10, 10)
    assert rect.clamp(Point(-5, 20)) == Point(0, 9)
    assert rect.clamp(Point(4, 4)) == Point(4, 4)
    assert rect.contains(rect.clamp(Point(50, -50)))


def test_offset_operators_round_trip():
    rect = Rectangle(1, 2, 3, 4)
    assert (rect + Point(5, 6)) - Point(5, 6) == rect
    assert (rect + Size(5, 6)) - Size(5, 6) == rect


def test_scale_operators_round_trip():
    rect = Rectangle(1, 2, 3, 4)
    factor = Size(2, 3)
    assert (rect * factor) / factor == rect