import io
import struct

import pytest
from PIL import Image

from tileterm.geometry import Color, Size
from tileterm.imageload import (
    ImageFormatError,
    load_bitmap,
    load_bmp,
    load_jpeg,
    load_png,
)


def make_bmp(width, height, bpp, rows, palette=(), header_size=40, compression=0):
    """rows: list of per-row pixel byte strings in storage order (unpadded)."""
    offset = 14 + 40 + 4 * len(palette)
    body = b""
    for row in rows:
        body += row + b"\x00" * (-len(row) % 4)
    size = offset + len(body)
    file_header = struct.pack(
        "<7H", 0x4D42, size & 0xFFFF, size >> 16, 0, 0, offset & 0xFFFF, offset >> 16
    )
    info = struct.pack(
        "<IiiHHIIiiII",
        header_size,
        width,
        height,
        1,
        bpp,
        compression,
        len(body),
        0,
        0,
        len(palette),
        0,
    )
    pal = b"".join(bytes([b, g, r, 0]) for (r, g, b) in palette)
    return file_header + info + pal + body


def test_bmp_24bit_bottom_up_with_padding():
    # Stored bottom row first; each row has 3 bytes of padding for width 3.
    bottom = bytes([1, 2, 3, 4, 5, 6, 7, 8, 9])
    top = bytes([10, 11, 12, 13, 14, 15, 16, 17, 18])
    bitmap = load_bmp(make_bmp(3, 2, 24, [bottom, top]))
    assert bitmap.size == Size(3, 2)
    assert bitmap[0, 0] == Color(255, 12, 11, 10)
    assert bitmap[2, 1] == Color(255, 9, 8, 7)


def test_bmp_32bit_top_down_keeps_alpha():
    row0 = bytes([1, 2, 3, 40, 5, 6, 7, 80])
    row1 = bytes([9, 10, 11, 120, 13, 14, 15, 160])
    bitmap = load_bmp(make_bmp(2, -2, 32, [row0, row1]))
    assert bitmap[0, 0] == Color(40, 3, 2, 1)
    assert bitmap[1, 1] == Color(160, 15, 14, 13)


def test_bmp_8bit_palette_lookup_is_opaque():
    palette = [(200, 100, 50), (1, 2, 3)]
    bitmap = load_bmp(make_bmp(2, -1, 8, [bytes([1, 0])], palette=palette))
    assert bitmap.pixels == [Color(255, 1, 2, 3), Color(255, 200, 100, 50)]


def test_bmp_rejects_short_data():
    with pytest.raises(ImageFormatError):
        load_bmp(b"BM" + b"\x00" * 20)


def test_bmp_rejects_unknown_dib_header():
    data = make_bmp(1, 1, 24, [b"\x00\x00\x00"], header_size=108)
    with pytest.raises(ImageFormatError, match="unsupported DIB"):
        load_bmp(data)


def test_bmp_rejects_unsupported_depth():
    with pytest.raises(ImageFormatError, match="color depth"):
        load_bmp(make_bmp(1, 1, 16, [b"\x00\x00"]))


def test_bmp_rejects_compression():
    with pytest.raises(ImageFormatError, match="compression"):
        load_bmp(make_bmp(1, 1, 24, [b"\x00\x00\x00"], compression=1))


def test_bmp_rejects_truncated_pixels():
    data = make_bmp(2, 2, 24, [bytes(6), bytes(6)])
    with pytest.raises(ImageFormatError):
        load_bmp(data[:-4])


def _png_bytes(pixels, size):
    image = Image.new("RGBA", size)
    image.putdata(pixels)
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    return buffer.getvalue()


def test_png_round_trip_preserves_rgba():
    source = [(10, 20, 30, 40), (50, 60, 70, 255), (0, 0, 0, 0), (255, 128, 1, 99)]
    bitmap = load_png(_png_bytes(source, (2, 2)))
    assert bitmap.size == Size(2, 2)
    assert bitmap.pixels == [Color(a, r, g, b) for (r, g, b, a) in source]


def test_png_without_alpha_is_opaque():
    image = Image.new("RGB", (3, 1), (7, 8, 9))
    buffer = io.BytesIO()
    image.save(buffer, format="PNG")
    bitmap = load_png(buffer.getvalue())
    assert bitmap.pixels == [Color(255, 7, 8, 9)] * 3


def test_png_decode_failure():
    with pytest.raises(ImageFormatError):
        load_png(b"\x89PNG\r\n\x1a\n garbage")


def test_jpeg_solid_colour_is_close_and_opaque():
    image = Image.new("RGB", (8, 8), (200, 40, 90))
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG", quality=95)
    bitmap = load_jpeg(buffer.getvalue())
    assert bitmap.size == Size(8, 8)
    for pixel in bitmap.pixels:
        assert pixel.a == 255
        assert abs(pixel.r - 200) <= 6
        assert abs(pixel.g - 40) <= 6
        assert abs(pixel.b - 90) <= 6


def test_jpeg_grayscale_has_equal_channels():
    image = Image.new("L", (4, 4), 120)
    buffer = io.BytesIO()
    image.save(buffer, format="JPEG")
    bitmap = load_jpeg(buffer.getvalue())
    assert all(p.r == p.g == p.b and p.a == 255 for p in bitmap.pixels)


def test_load_bitmap_dispatches_by_magic():
    png = _png_bytes([(1, 2, 3, 4)], (1, 1))
    assert load_bitmap(png).pixels == [Color(4, 1, 2, 3)]
    bmp = make_bmp(1, 1, 24, [bytes([3, 2, 1])])
    assert load_bitmap(bmp).pixels == [Color(255, 1, 2, 3)]


def test_load_bitmap_rejects_short_data():
    with pytest.raises(ImageFormatError, match="invalid data size"):
        load_bitmap(b"BM")


def test_load_bitmap_rejects_unknown_format():
    with pytest.raises(ImageFormatError, match="unsupported image format"):
        load_bitmap(b"GIF89a")