"""Text encodings: UTF-8, UCS-2, UCS-4 and custom single-byte codepages."""

from __future__ import annotations

import logging
import re
from typing import Dict, Iterable, List, Optional, Tuple, Union

logger = logging.getLogger(__name__)

REPLACEMENT_CHARACTER = 0xFFFD
"""Code point returned for bytes a codepage does not map."""

_ASCII_SUBSTITUTE = 0x1A
_SURROGATE_HIGH_START = 0xD800
_SURROGATE_HIGH_END = 0xDBFF
_MAX_BMP = 0xFFFF

_OFFSETS_FROM_UTF8 = (
    0x00000000,
    0x00003080,
    0x000E2080,
    0x03C82080,
    0xFA082080,
    0x82082080,
)


def _trailing_bytes(lead: int) -> int:
    if lead < 0xC0:
        return 0
    if lead < 0xE0:
        return 1
    if lead < 0xF0:
        return 2
    if lead < 0xF8:
        return 3
    if lead < 0xFC:
        return 4
    return 5


class _Encoding:
    """Common behaviour: encodings compare equal by name."""

    name = ""

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, _Encoding):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.name!r})"


class UTF8Encoding(_Encoding):
    """UTF-8 limited to the Basic Multilingual Plane."""

    name = "utf-8"

    def code_to_char(self, value: int) -> str:
        return chr(value)

    def char_to_code(self, char: str) -> int:
        return ord(char)

    def decode(self, data: bytes) -> str:
        """Decode bytes; a truncated final sequence ends the result early."""
        result = []
        index = 0
        length = len(data)
        while index < length:
            extra = _trailing_bytes(data[index])
            if index + extra >= length:
                break
            ch = 0
            for remaining in range(extra, -1, -1):
                ch = (ch + data[index]) & 0xFFFFFFFF
                index += 1
                if remaining > 0:
                    ch = (ch << 6) & 0xFFFFFFFF
            ch = (ch - _OFFSETS_FROM_UTF8[extra]) & 0xFFFFFFFF

            if ch > _MAX_BMP or _SURROGATE_HIGH_START <= ch <= _SURROGATE_HIGH_END:
                result.append(chr(_ASCII_SUBSTITUTE))
            else:
                result.append(chr(ch))
        return "".join(result)

    def encode(self, text: str) -> bytes:
        """Encode text; characters beyond the BMP are dropped."""
        out = bytearray()
        for char in text:
            c = ord(char)
            if c < 0x80:
                out.append(c)
            elif c < 0x800:
                out.append(((c >> 6) & 0x1F) | 0xC0)
                out.append((c & 0x3F) | 0x80)
            elif c < 0x10000:
                out.append(((c >> 12) & 0x0F) | 0xE0)
                out.append(((c >> 6) & 0x3F) | 0x80)
                out.append((c & 0x3F) | 0x80)
        return bytes(out)


class UCS2Encoding(_Encoding):
    """Fixed 16-bit code units."""

    name = "ucs-2"

    def decode(self, units: Iterable[int]) -> str:
        return "".join(chr(unit & 0xFFFF) for unit in units)

    def encode(self, text: str) -> List[int]:
        return [ord(char) & 0xFFFF for char in text]


class UCS4Encoding(_Encoding):
    """Fixed 32-bit code units."""

    name = "ucs-4"

    def decode(self, units: Iterable[int]) -> str:
        return "".join(chr(unit) for unit in units)

    def encode(self, text: str) -> List[int]:
        return [ord(char) for char in text]


_QUOTES = {"'": "'", '"': '"', "[": "]", "{": "}"}
_BLANKS = " \t\v\f"


def _read_until(text: str, pos: int, until: str) -> Tuple[str, int]:
    """Read a possibly quoted value up to one of the stop characters."""
    value: List[str] = []
    space: List[str] = []
    closing = ""
    length = len(text)

    while pos < length and (closing or text[pos] not in until):
        c = text[pos]
        if c in "\r\n":
            pass
        elif c in _BLANKS and not closing:
            space.append(c)
        elif closing and c == closing:
            if pos + 1 < length and text[pos + 1] == closing:
                value.append(c)
                pos += 1
            else:
                closing = ""
        elif c in _QUOTES and not closing and not value:
            closing = _QUOTES[c]
            space.clear()
        else:
            if value:
                value.extend(space)
            space.clear()
            value.append(c)
        pos += 1

    return "".join(value), pos


_HEX_PREFIX = re.compile(r"\s*([+-]?[0-9a-fA-F]+)")
_DEC_PREFIX = re.compile(r"\s*([+-]?[0-9]+)")
_INT_MAX = 2**31 - 1


def _parse_point(text: str) -> int:
    """Parse U+XXXX, 0xXXXX or decimal; returns -2 when unparsable."""
    if len(text) > 2 and (
        (text[0] in "uU" and text[1] == "+") or (text[0] == "0" and text[1] == "x")
    ):
        match = _HEX_PREFIX.match(text[2:])
        base = 16
    else:
        match = _DEC_PREFIX.match(text)
        base = 10
    if not match:
        return -2
    value = int(match.group(1), base)
    if value > _INT_MAX or value < -_INT_MAX - 1:
        return -2
    return value


def _strip_bom(data: bytes) -> bytes:
    if data.startswith(b"\xef\xbb\xbf"):
        return data[3:]
    for bom, label in (
        (b"\x00\x00\xfe\xff", "UTF-32BE"),
        (b"\xff\xfe\x00\x00", "UTF-32LE"),
        (b"\xfe\xff", "UTF-16BE"),
        (b"\xff\xfe", "UTF-16LE"),
    ):
        if data.startswith(bom):
            raise ValueError(f"Unsupported custom codepage file encoding {label}")
    return data


class CustomCodepage(_Encoding):
    """A single-byte codepage defined by a list of code points and ranges.

    Each entry is a single point (``U+0041``, ``0x41`` or ``65``) or a range
    (``0x41-0x5A``); entries are separated by commas or new lines and take
    consecutive byte values starting at zero.
    """

    def __init__(self, name: str, data: Union[bytes, str]):
        self.name = name
        self._forward: Dict[int, int] = {}
        self._backward: Dict[int, int] = {}

        raw = data.encode("utf-8") if isinstance(data, str) else bytes(data)
        raw = _strip_bom(raw)

        lines = raw.split(b"\n")
        if lines and lines[-1] == b"":
            lines.pop()

        utf8 = UTF8Encoding()
        self._base = 0
        for raw_line in lines:
            self._parse_line(utf8.decode(raw_line))
        del self._base

    def _add(self, code: int) -> None:
        self._forward[self._base] = code
        self._backward[code] = self._base
        self._base += 1

    def _save_single(self, point: str) -> None:
        code = _parse_point(point)
        if code < 0 or code > 0x10FFFF:
            logger.warning('CustomCodepage: invalid codepoint "%s"', point)
            return
        self._add(code)

    def _save_range(self, left: str, right: str) -> None:
        left_code = _parse_point(left)
        right_code = _parse_point(right)
        if left_code < 0 or right_code <= left_code or right_code > 0x10FFFF:
            logger.warning('CustomCodepage: invalid range "%s" - "%s"', left, right)
            return
        for code in range(left_code, right_code + 1):
            self._add(code)

    def _parse_line(self, line: str) -> None:
        pos = 0
        length = len(line)
        while True:
            left, pos = _read_until(line, pos, "-,")
            if pos < length and line[pos] == "-":
                right, pos = _read_until(line, pos + 1, ",")
                self._save_range(left, right)
            else:
                self._save_single(left)
            if pos >= length:
                break
            pos += 1

    def code_to_char(self, value: int) -> str:
        if value < 0:
            value &= 0xFF
        return chr(self._forward.get(value, REPLACEMENT_CHARACTER))

    def char_to_code(self, char: str) -> int:
        return self._backward.get(ord(char), -1)

    def decode(self, data: bytes) -> str:
        return "".join(chr(self._forward.get(b, REPLACEMENT_CHARACTER)) for b in data)

    def encode(self, text: str) -> bytes:
        return bytes(
            self._backward.get(ord(char), _ASCII_SUBSTITUTE) & 0xFF for char in text
        )


def get_unibyte_encoding(
    name: str, codepage_data: Optional[Union[bytes, str]] = None
) -> Union[UTF8Encoding, CustomCodepage]:
    """Return UTF-8 for its names, otherwise a codepage built from the data."""
    if name in ("utf8", "utf-8"):
        return UTF8Encoding()
    if codepage_data is None:
        raise LookupError(f"codepage '{name}' is not available")
    return CustomCodepage(name, codepage_data)