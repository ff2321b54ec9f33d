"""Parsing of option strings such as ``font: tiles.png, size=8x8; window.title='x'``."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Tuple

_QUOTES = {"'": "'", '"': '"', "[": "]", "{": "}"}
_BLANKS = " \t\v\f"


@dataclass
class OptionGroup:
    """A named group of option attributes; ``_`` holds the nameless value."""

    name: str = ""
    attributes: Dict[str, str] = field(default_factory=dict)


def read_until(text: str, pos: int, until: str) -> Tuple[str, int]:
    """Read a value starting at ``pos`` up to one of the ``until`` characters.

    Surrounding whitespace is dropped; a value may be quoted with ``'``, ``"``,
    ``[...]`` or ``{...}``, and a doubled closing quote stands for itself.
    Returns the value and the position of the stop character (or the end).
    """
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


def parse_options(text: str, semicolon_comments: bool = False) -> List[OptionGroup]:
    """Split an option string into groups, in order of first appearance.

    ``a=v`` goes to group ``a`` as ``_``; ``a.b=v`` to group ``a`` as ``b``;
    ``a.b.c.d=v`` to group ``a.b`` as ``c.d``. ``name: v, k=w`` is a grouped
    form. With ``semicolon_comments`` parsing stops at the first bare ``;``.
    """
    result: List[OptionGroup] = []
    lookup: Dict[str, OptionGroup] = {}

    def keep(name: str, value: str) -> None:
        first = name.find(".")
        if first == -1:
            section, key = name, "_"
        else:
            second = name.find(".", first + 1)
            end = first if second == -1 else second
            if end == 0 or end == len(name) - 1:
                return
            section, key = name[:end], name[end + 1:]

        group = lookup.get(section)
        if group is None:
            group = OptionGroup(section)
            lookup[section] = group
            result.append(group)
        group.attributes[key] = value

    pos = 0
    length = len(text)
    while pos < length:
        name, pos = read_until(text, pos, ":=;")
        current = text[pos] if pos < length else ""

        if current == "=":
            value, pos = read_until(text, pos + 1, ";")
            keep(name, value)
        elif current == ":":
            while pos < length and text[pos] != ";":
                pos += 1
                subname, pos = read_until(text, pos, "=,;")
                if pos < length and text[pos] == "=":
                    value, pos = read_until(text, pos + 1, ",;")
                    keep(f"{name}.{subname}", value)
                else:
                    keep(name, subname)
        elif current == ";":
            if semicolon_comments:
                break
            pos += 1
        else:
            break

    return result