"""Reading the APT history logs."""

from __future__ import annotations

import gzip
import re
import zlib
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

__all__ = ["HistoryItem", "History", "parse_history", "DEFAULT_HISTORY_FILE"]

DEFAULT_HISTORY_FILE = "/var/log/apt/history.log"

_DATE_FORMAT = "%Y-%m-%d  %H:%M:%S"
_ARCH_RE = re.compile(r":\w+")
_ACTIONS = {
    "Install": "installed_packages",
    "Upgrade": "upgraded_packages",
    "Downgrade": "downgraded_packages",
    "Remove": "removed_packages",
    "Purge": "purged_packages",
}


def _parse_date(text):
    try:
        return datetime.strptime(text, _DATE_FORMAT)
    except ValueError:
        return None


@dataclass
class HistoryItem:
    """One transaction recorded in the APT history log."""

    start_date: datetime | None = None
    installed_packages: list = field(default_factory=list)
    upgraded_packages: list = field(default_factory=list)
    downgraded_packages: list = field(default_factory=list)
    removed_packages: list = field(default_factory=list)
    purged_packages: list = field(default_factory=list)
    error: str = ""
    is_valid: bool = True

    @classmethod
    def parse(cls, data):
        """Parse the raw text of one history stanza.

        Lines that are not ``Key: value`` pairs mark the item invalid; the
        rest of the stanza is still read.
        """
        item = cls()
        for line in data.split("\n"):
            if not line or line.startswith("#"):
                continue
            key_value = line.split(": ")
            if len(key_value) < 2:
                item.is_valid = False
                continue
            key, value = key_value[0], key_value[1]

            if key == "Start-Date":
                item.start_date = _parse_date(value)
            elif key in _ACTIONS:
                target = getattr(item, _ACTIONS[key])
                packages = _ARCH_RE.sub("", value)
                for package in packages.split("), "):
                    if not package.endswith(")"):
                        package += ")"
                    target.append(package)
            elif key == "Error":
                item.error = value
        return item


def parse_history(data):
    """Split history log text into stanzas and return the valid items."""
    items = []
    for stanza in data.strip().split("\n\n"):
        item = HistoryItem.parse(stanza)
        if item.is_valid:
            items.append(item)
    return items


def _read_log(path):
    if path.name.endswith(".gz"):
        try:
            with gzip.open(path, "rb") as handle:
                raw = handle.read()
        except (OSError, EOFError, zlib.error):
            return ""
        return raw.decode("utf-8", errors="replace")
    try:
        return path.read_text(encoding="utf-8", errors="replace")
    except OSError:
        return ""


class History:
    """All transactions found in the history logs beside ``history_file``.

    Every file in the log directory whose path mentions "history" is read in
    name order; compressed rotations are read transparently.
    """

    def __init__(self, history_file=DEFAULT_HISTORY_FILE):
        self.history_file = Path(history_file)
        self._items = []
        self.reload()

    def reload(self):
        """Re-read the history logs from disk."""
        directory = self.history_file.absolute().parent
        try:
            names = sorted(entry.name for entry in directory.iterdir() if entry.is_file())
        except OSError:
            names = []

        data = "".join(
            _read_log(directory / name)
            for name in names
            if "history" in f"{directory}/{name}"
        )
        self._items = parse_history(data)

    def items(self):
        """Return every valid history item, oldest log file first."""
        return list(self._items)