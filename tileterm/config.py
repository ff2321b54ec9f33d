"""Configuration from an INI file plus in-memory system properties."""

from __future__ import annotations

import logging
import os
import sys
from typing import Callable, Dict, List, Mapping, Optional, Tuple

from .encoding import UTF8Encoding
from .inifile import update_ini_file
from .options import parse_options

logger = logging.getLogger(__name__)

_UTF8_BOM = b"\xef\xbb\xbf"
_UNSUPPORTED_BOMS = (
    (b"\x00\x00\xfe\xff", "UTF-32BE"),
    (b"\xff\xfe\x00\x00", "UTF-32LE"),
    (b"\xfe\xff", "UTF-16BE"),
    (b"\xff\xfe", "UTF-16LE"),
)
_DOMAIN_LENGTH = 4


def _list_files(path: Optional[str]) -> List[str]:
    if not path:
        return []
    try:
        return sorted(entry.name for entry in os.scandir(path) if entry.is_file())
    except OSError:
        return []


def guess_config_filename(
    preferred_name: str,
    app_name: str,
    current_dir: Optional[str],
    app_dir: Optional[str],
) -> str:
    """Pick the configuration file to use.

    ``.ini`` files in the current directory outrank those in the application
    directory, and one named after the application outranks any other.
    Without a candidate the preferred name, or else ``<app_name>.ini``, is used.
    """
    appconfig_name = app_name + ".ini"
    best_priority = 0
    best_filename = ""

    for directory, factor in ((current_dir, 2), (app_dir, 1)):
        for file in _list_files(directory):
            priority = 0
            if file.lower() == preferred_name.lower():
                priority = 3
            if file.lower() == appconfig_name.lower():
                priority = 2
            elif file.lower().endswith(".ini"):
                priority = 1
            else:
                continue
            priority *= factor
            if priority > best_priority:
                best_filename = os.path.join(directory, file)
                best_priority = priority

    if not best_filename:
        best_filename = preferred_name or appconfig_name
    return best_filename


def _split_name(name: str, include_domain: bool) -> Tuple[str, str]:
    end = name.find(".", _DOMAIN_LENGTH + 1)
    if end == -1:
        return name[_DOMAIN_LENGTH:], ""
    start = 0 if include_domain else _DOMAIN_LENGTH
    return name[start:end], name[end + 1:]


class Config:
    """Properties in ``ini.<section>.<name>`` and ``sys.<section>.<name>`` form.

    Section and property names are case-insensitive. Unprefixed names belong
    to the ``sys`` domain; ``ini`` properties set here are written back to
    the configuration file.
    """

    def __init__(
        self,
        filename: Optional[str] = None,
        *,
        app_name: Optional[str] = None,
        current_dir: Optional[str] = None,
        app_dir: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
        version: str = "",
        clipboard: Optional[Callable[[], str]] = None,
    ):
        argv0 = sys.argv[0] if sys.argv and sys.argv[0] else ""
        self._fixed_filename = filename
        self._app_name = app_name if app_name is not None else os.path.splitext(
            os.path.basename(argv0))[0]
        self._current_dir = current_dir
        self._app_dir = app_dir if app_dir is not None else os.path.dirname(
            os.path.abspath(argv0)) if argv0 else None
        self._environ = os.environ if environ is None else environ
        self._version = version
        self._clipboard = clipboard or (lambda: "")
        self.filename = filename or ""
        # lower-case section -> lower-case property -> (original name, value)
        self._sections: Dict[str, Dict[str, Tuple[str, str]]] = {}

    def _section(self, name: str) -> Dict[str, Tuple[str, str]]:
        return self._sections.setdefault(name.lower(), {})

    def _store(self, section: str, prop: str, value: str) -> None:
        properties = self._section(section)
        key = prop.lower()
        original = properties[key][0] if key in properties else prop
        properties[key] = (original, value)

    def reload(self) -> None:
        """Forget everything and read the configuration file again."""
        self._sections.clear()
        if self._fixed_filename:
            self.filename = self._fixed_filename
        else:
            self.filename = guess_config_filename(
                self._environ.get("BEARLIB_INIFILE", ""),
                self._app_name,
                self._current_dir if self._current_dir is not None else os.getcwd(),
                self._app_dir,
            )
        logger.info("Using configuration file '%s'", self.filename)
        if not os.path.isfile(self.filename):
            logger.info("Configuration file '%s' does not exist, assuming empty config",
                        self.filename)
            return

        try:
            with open(self.filename, "rb") as handle:
                raw = handle.read()
        except OSError:
            logger.error("Cannot open configuration file '%s'", self.filename)
            return

        for bom, label in _UNSUPPORTED_BOMS:
            if raw.startswith(bom):
                logger.error("Unsupported configuration file encoding %s", label)
                return
        if raw.startswith(_UTF8_BOM):
            raw = raw[len(_UTF8_BOM):]

        raw_lines = raw.split(b"\n")
        if raw_lines and raw_lines[-1] == b"":
            raw_lines.pop()
        utf8 = UTF8Encoding()

        current_section = ""
        for line in (utf8.decode(item) for item in raw_lines):
            if not line or line[0].isspace() or line[0] in ";#":
                continue
            if line[0] == "[":
                rbracket = line.find("]")
                if rbracket != -1:
                    current_section = "ini." + line[1:rbracket]
                    self._section(current_section)
                else:
                    current_section = ""
            elif current_section:
                positions = [p for p in (line.find(c) for c in "=.:") if p != -1]
                if not positions or min(positions) == 0:
                    continue
                for group in parse_options(line, True):
                    for sub, value in group.attributes.items():
                        key = group.name if sub == "_" else f"{group.name}.{sub}"
                        self._store(current_section, key, value)

    def try_get(self, name: str) -> Optional[str]:
        """Return the value of a property, or None if it is not set."""
        if not name:
            return None
        if name in ("version", "terminal.version"):
            return self._version
        if name == "clipboard":
            return self._clipboard()
        if not name.startswith("sys.") and not name.startswith("ini."):
            name = "sys." + name

        section_name, property_name = _split_name(name, include_domain=True)
        if not section_name:
            return None
        section = self._sections.get(section_name.lower())
        if section is None:
            return None
        entry = section.get(property_name.lower())
        return None if entry is None else entry[1]

    def get(self, name: str, default: str = "") -> str:
        """Return the value of a property, or ``default`` if it is not set."""
        value = self.try_get(name)
        return default if value is None else value

    def list(self, section: str) -> Dict[str, str]:
        """All properties of a section such as ``ini.game``, ordered by name."""
        properties = self._sections.get(section.lower(), {})
        return {
            original: value
            for _, (original, value) in sorted(properties.items())
        }

    def set(self, name: str, value: str) -> None:
        """Set a property; ``ini`` properties are also written to the file."""
        if not name:
            return
        ini_domain = name.startswith("ini.")
        if not ini_domain and not name.startswith("sys."):
            name = "sys." + name

        section_name, property_name = _split_name(name, include_domain=False)
        if not section_name:
            return

        self._store(name[:_DOMAIN_LENGTH] + section_name, property_name, value)

        if ini_domain:
            if not self.filename:
                logger.error("No configuration file to write to")
                return
            try:
                update_ini_file(self.filename, section_name, property_name, value)
            except (OSError, ValueError) as error:
                logger.error("Cannot update configuration file '%s': %s", self.filename, error)