"""Reading and writing entries of the main APT configuration file."""

from __future__ import annotations

import re
from pathlib import Path

__all__ = ["Config", "update_buffer_entry", "APT_CONFIG_PATH"]

APT_CONFIG_PATH = "/etc/apt/apt.conf"

_TRUE_WORDS = frozenset({"yes", "true", "with", "on", "enable"})
_FALSE_WORDS = frozenset({"no", "false", "without", "off", "disable"})
_INT_RE = re.compile(r"\s*([+-]?)(0[xX][0-9a-fA-F]+|0[0-7]*|[1-9][0-9]*)")


def update_buffer_entry(buffer, key, value):
    """Return ``buffer`` with the line for ``key`` set to ``key value``.

    Every existing line whose first word is ``key`` is replaced; if there is
    none, the entry is appended at the end.
    """
    lines = buffer.split("\n")
    if lines and lines[-1] == "":
        lines.pop()

    changed = False
    for index, line in enumerate(lines):
        if not line or line.startswith("#"):
            continue
        space = line.find(" ")
        if space < 0:
            continue
        if line[:space] == key:
            lines[index] = f"{key} {value}"
            changed = True

    if changed:
        return "".join(f"{line}\n" for line in lines)
    return f"{buffer}{key} {value}\n"


def _to_bool(text, default):
    try:
        number = int(text, 0)
    except ValueError:
        number = None
    if number in (0, 1):
        return bool(number)
    word = text.lower()
    if word in _FALSE_WORDS:
        return False
    if word in _TRUE_WORDS:
        return True
    return default


def _to_int(text, default):
    match = _INT_RE.match(text)
    if not match:
        return default
    sign, digits = match.groups()
    if digits.lower().startswith("0x"):
        number = int(digits, 16)
    elif len(digits) > 1 and digits.startswith("0"):
        number = int(digits, 8)
    else:
        number = int(digits)
    return -number if sign == "-" else number


def _parse_entries(buffer):
    entries = {}
    for raw in buffer.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or line.startswith("//"):
            continue
        parts = line.split(None, 1)
        if len(parts) != 2:
            continue
        key, value = parts
        value = value.strip().rstrip(";").strip()
        if len(value) >= 2 and value.startswith('"') and value.endswith('"'):
            value = value[1:-1]
        entries[key.casefold()] = value
    return entries


class Config:
    """Typed access to APT configuration entries backed by an apt.conf file."""

    def __init__(self, path=APT_CONFIG_PATH):
        self.path = Path(path)
        try:
            self._buffer = self.path.read_text(encoding="latin-1")
            self._new_file = False
        except FileNotFoundError:
            self._buffer = ""
            self._new_file = True
        self._values = _parse_entries(self._buffer)

    @property
    def buffer(self):
        """The file contents as they will be written."""
        return self._buffer

    def read_entry(self, key, default):
        """Return the value of ``key`` converted to the type of ``default``.

        ``default`` is returned when the key is missing, empty or cannot be
        converted.
        """
        value = self._values.get(key.casefold())
        if isinstance(default, bool):
            if not value:
                return default
            return _to_bool(value, default)
        if isinstance(default, int):
            if value is None:
                return default
            return _to_int(value, default)
        if not value:
            return default
        return value

    def write_entry(self, key, value):
        """Set ``key`` to a bool, int or str ``value`` and write the file."""
        if isinstance(value, bool):
            encoded = '"true";' if value else '"false";'
            stored = "true" if value else "false"
        elif isinstance(value, int):
            encoded = f'"{value}";'
            stored = str(value)
        elif isinstance(value, str):
            encoded = f'"{value}";'
            stored = value
        else:
            raise TypeError(f"unsupported configuration value type: {type(value).__name__}")

        if self._new_file:
            self._buffer += f"{key} {encoded}"
            self._new_file = False
        else:
            self._buffer = update_buffer_entry(self._buffer, key, encoded)

        self._values[key.casefold()] = stored
        self.save()

    def save(self):
        """Write the buffer to the configuration file."""
        with open(self.path, "w", encoding="latin-1", errors="replace", newline="") as handle:
            handle.write(self._buffer)