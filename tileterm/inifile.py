"""In-place editing of single properties in an INI configuration file."""

from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional, Union

from .options import parse_options

_UTF8_BOM = b"\xef\xbb\xbf"
_UNSUPPORTED_BOMS = (
    (b"\x00\x00\xfe\xff", "UTF-32BE"),
    (b"\xff\xfe\x00\x00", "UTF-32LE"),
    (b"\xfe\xff", "UTF-16BE"),
    (b"\xff\xfe", "UTF-16LE"),
)


def _escape(value: str) -> str:
    if "'" in value or (value and (value[0].isspace() or value[-1].isspace())):
        return "'" + value.replace("'", "''") + "'"
    return value


def _construct_line(name: str, pieces: Dict[str, str]) -> str:
    items = sorted(pieces.items())
    if len(items) == 1 and items[0][0] == "_":
        return f"{name}={_escape(items[0][1])}"
    parts = [
        _escape(value) if key == "_" else f"{key}={_escape(value)}" for key, value in items
    ]
    return f"{name}: " + ", ".join(parts)


def _read_lines(path: Path) -> tuple:
    if not path.exists():
        return False, []
    raw = path.read_bytes()
    has_bom = raw.startswith(_UTF8_BOM)
    if has_bom:
        raw = raw[len(_UTF8_BOM):]
    else:
        for bom, label in _UNSUPPORTED_BOMS:
            if raw.startswith(bom):
                raise ValueError(f"Unsupported configuration file encoding {label}")
    lines = raw.decode("utf-8", "surrogateescape").split("\n")
    if lines and lines[-1] == "":
        lines.pop()
    return has_bom, lines


def update_ini_file(
    path: Union[str, Path], section: str, prop: str, value: str
) -> None:
    """Set ``prop`` in ``section`` of the file, creating what is missing.

    ``prop`` may name a sub-value as ``name.sub``, merged into a grouped line
    such as ``name: main, sub=value``. An empty value removes the entry, and
    the whole line once nothing is left. Section and property names match
    case-insensitively and their original casing, BOM and line endings are
    kept. Raises ValueError for files in a UTF-16 or UTF-32 encoding.
    """
    path = Path(path)
    property_name = prop
    piece_name = "_"
    period = property_name.find(".")
    if period != -1:
        piece_name = property_name[period + 1:]
        property_name = property_name[:period]

    has_bom, infile_lines = _read_lines(path)

    pieces: Dict[str, str] = {}
    lines: List[str] = []
    section_pos: Optional[int] = None
    property_pos: Optional[int] = None
    in_target = False

    for line in infile_lines:
        lines.append(line)
        if not line or line[0].isspace() or line[0] in ";#":
            continue
        if line[0] == "[":
            rbracket = line.find("]")
            if rbracket != -1:
                in_target = line[1:rbracket].lower() == section.lower()
                if in_target and section_pos is None:
                    section_pos = len(lines) - 1
            continue
        if not in_target:
            continue

        section_pos = len(lines) - 1
        positions = [p for p in (line.find(c) for c in "=.:") if p != -1]
        pos = min(positions) if positions else -1
        if pos <= 0:
            continue
        name = line[:pos].strip()
        if name.lower() != property_name.lower():
            continue

        if property_pos is None:
            property_pos = len(lines) - 1
            property_name = name
        else:
            lines.pop()

        for group in parse_options(line, True):
            pieces.update(group.attributes)

    pieces[piece_name] = value
    pieces = {key: val for key, val in pieces.items() if val}

    if not pieces:
        if property_pos is not None:
            del lines[property_pos]
    elif property_pos is not None:
        lines[property_pos] = _construct_line(property_name, pieces)
    elif section_pos is not None:
        lines.insert(section_pos + 1, _construct_line(property_name, pieces))
    else:
        if lines and lines[-1].strip():
            lines.append("")
        lines.append(f"[{section}]")
        lines.append(_construct_line(property_name, pieces))

    uses_crlf = bool(lines) and lines[0].endswith("\r")

    out: List[str] = []
    for line in lines:
        out.append(line)
        if uses_crlf and not line.endswith("\r"):
            out.append("\r")
        out.append("\n")

    data = "".join(out).encode("utf-8", "surrogateescape")
    path.write_bytes((_UTF8_BOM if has_bom else b"") + data)