"""Decoding of BMP, PNG and JPEG images into bitmaps."""

from __future__ import annotations

import io
import struct
from typing import List

from PIL import Image, UnidentifiedImageError

from .bitmap import Bitmap
from .geometry import Color, Size


class ImageFormatError(ValueError):
    """Raised when image data cannot be decoded."""


_FILE_HEADER = struct.Struct("<7H")
_INFO_HEADER = struct.Struct("<IiiHHIIiiII")


def load_bmp(data: bytes) -> Bitmap:
    """Decode an uncompressed 8, 24 or 32 bits-per-pixel BMP image."""
    data = bytes(data)
    headers_size = _FILE_HEADER.size + _INFO_HEADER.size
    if len(data) < headers_size:
        raise ImageFormatError("invalid bitmap image")

    file_header = _FILE_HEADER.unpack_from(data, 0)
    (
        header_size,
        width,
        height,
        _planes,
        bpp,
        compression,
        _image_size,
        _xppm,
        _yppm,
        colors_used,
        _colors_important,
    ) = _INFO_HEADER.unpack_from(data, _FILE_HEADER.size)

    if header_size != 40:
        raise ImageFormatError("unsupported DIB image format")
    if bpp not in (8, 24, 32):
        raise ImageFormatError("unsupported color depth")
    if compression != 0:
        raise ImageFormatError("unsupported compression level")
    if width < 0:
        raise ImageFormatError("invalid bitmap image")

    position = headers_size
    palette: List[Color] = []
    if bpp < 24:
        entries = colors_used or (1 << bpp)
        end = position + 4 * entries
        if end > len(data):
            raise ImageFormatError("invalid bitmap image")
        for offset in range(position, end, 4):
            b, g, r = data[offset], data[offset + 1], data[offset + 2]
            palette.append(Color(0xFF, r, g, b))
        position = end

    pixel_offset = (file_header[6] << 16) + file_header[5]
    if pixel_offset < position or pixel_offset > len(data):
        raise ImageFormatError("invalid bitmap image")

    rows = abs(height)
    bytes_per_pixel = bpp // 8
    line_size = bytes_per_pixel * width
    line_stride = line_size + (-line_size % 4)

    if pixel_offset + line_stride * (rows - 1) + line_size > len(data) and rows > 0:
        raise ImageFormatError("invalid bitmap image: pixel data is truncated")

    def decode_row(start: int) -> List[Color]:
        row = data[start:start + line_size]
        if bpp == 32:
            return [
                Color(row[i + 3], row[i + 2], row[i + 1], row[i])
                for i in range(0, line_size, 4)
            ]
        if bpp == 24:
            return [
                Color(0xFF, row[i + 2], row[i + 1], row[i])
                for i in range(0, line_size, 3)
            ]
        try:
            return [palette[index] for index in row]
        except IndexError:
            raise ImageFormatError("invalid bitmap image: palette index out of range") from None

    stored = [decode_row(pixel_offset + line_stride * i) for i in range(rows)]
    if height > 0:
        # Positive height means rows are stored bottom to top.
        stored.reverse()

    pixels = [pixel for row in stored for pixel in row]
    return Bitmap.from_pixels(Size(width, rows), pixels)


def _open_with_pillow(data: bytes, message: str) -> Image.Image:
    try:
        image = Image.open(io.BytesIO(bytes(data)))
        image.load()
    except (UnidentifiedImageError, OSError, ValueError, SyntaxError) as error:
        raise ImageFormatError(f"{message}: {error}") from error
    return image


def load_png(data: bytes) -> Bitmap:
    """Decode a PNG image; every pixel gets its alpha, opaque when absent."""
    image = _open_with_pillow(data, "PNG decode failed")
    if image.format != "PNG":
        raise ImageFormatError("PNG decode failed: not a PNG image")
    rgba = image.convert("RGBA")
    width, height = rgba.size
    raw = rgba.tobytes()
    pixels = [
        Color(raw[i + 3], raw[i], raw[i + 1], raw[i + 2])
        for i in range(0, len(raw), 4)
    ]
    return Bitmap.from_pixels(Size(width, height), pixels)


def load_jpeg(data: bytes) -> Bitmap:
    """Decode a JPEG image into opaque pixels."""
    image = _open_with_pillow(data, "Failed to load JPEG resource")
    if image.format != "JPEG":
        raise ImageFormatError("Failed to load JPEG resource: not a JPEG")
    width, height = image.size
    if width <= 0 or height <= 0:
        raise ImageFormatError("Failed to load JPEG resource: internal loader error")
    raw = image.convert("RGB").tobytes()
    pixels = [
        Color(0xFF, raw[i], raw[i + 1], raw[i + 2]) for i in range(0, len(raw), 3)
    ]
    return Bitmap.from_pixels(Size(width, height), pixels)


def load_bitmap(data: bytes) -> Bitmap:
    """Decode image data, choosing the format from its leading bytes."""
    data = bytes(data)
    if len(data) < 4:
        raise ImageFormatError("LoadBitmap: invalid data size")
    if data.startswith(b"\x89PNG"):
        return load_png(data)
    if data.startswith(b"BM"):
        return load_bmp(data)
    if data.startswith(b"\xff\xd8"):
        return load_jpeg(data)
    raise ImageFormatError("unsupported image format")