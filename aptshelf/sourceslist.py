"""The set of APT sources list files and the entries they hold."""

from __future__ import annotations

import logging
from pathlib import Path

from aptshelf.sourceentry import DEFAULT_SOURCE_LIST, SourceEntry

__all__ = ["SourcesList", "DEFAULT_SOURCE_PARTS"]

DEFAULT_SOURCE_PARTS = "/etc/apt/sources.list.d"

_EMPTY_FILE_HEADER = (
    "## See sources.list(5) for more information, especially\n"
    "# Remember that you can only use http, ftp or file URIs.\n"
    "# CDROMs are managed through the apt-cdrom tool.\n"
)

_log = logging.getLogger(__name__)


def _default_source_files():
    files = [DEFAULT_SOURCE_LIST]
    parts = Path(DEFAULT_SOURCE_PARTS)
    if parts.is_dir():
        files.extend(
            str(path) for path in sorted(parts.glob("*.list")) if path.is_file()
        )
    return files


class SourcesList:
    """Entries of one or more sources list files, editable and savable."""

    def __init__(self, source_files=None):
        self._source_files = []
        for path in source_files or _default_source_files():
            path = str(path)
            if path not in self._source_files:
                self._source_files.append(path)
        self._entries = {}
        self.reload()

    def reload(self):
        """Re-read every source file from disk."""
        self._entries.clear()
        for path in self._source_files:
            if path:
                self._load(path)

    def _load(self, path):
        try:
            with open(path, encoding="utf-8", errors="replace") as handle:
                for line in handle:
                    self._entries.setdefault(path, []).append(SourceEntry.parse(line, path))
        except OSError as error:
            _log.warning("Unable to open %s as read-only text: %s", path, error)

    def entries(self, source_file=None):
        """Return the entries of ``source_file``, or of all files if it is None."""
        if source_file is None:
            return [entry for entries in self._entries.values() for entry in entries]
        return list(self._entries.get(source_file, []))

    def add_entry(self, entry):
        """Add ``entry`` to its file (the first source file if it names none)."""
        target = entry.file or self._source_files[0]
        if entry in self.entries(target):
            return
        self._entries.setdefault(target, []).append(entry)

    def remove_entry(self, entry):
        """Remove every entry equal to ``entry`` from its file, or from all files."""
        targets = [entry.file] if entry.file else self._source_files
        for target in targets:
            if target in self._entries:
                self._entries[target] = [item for item in self._entries[target] if item != entry]

    def contains_entry(self, entry, source_file=None):
        """Return whether ``entry`` is present in ``source_file`` or in any file."""
        return entry in self.entries(source_file or None)

    def source_files(self):
        """Return the paths of the managed source files."""
        return list(self._source_files)

    def data_for_source_file(self, source_file):
        """Return the text that ``source_file`` is written with."""
        text = "".join(entry.to_string() + "\n" for entry in self.entries(source_file))
        return text or _EMPTY_FILE_HEADER

    def to_string(self):
        """Return every file name followed by its entries, one per line."""
        parts = []
        for path in self._source_files:
            parts.append(path + "\n")
            parts.extend(entry.to_string() + "\n" for entry in self.entries(path))
        return "".join(parts)

    def __str__(self):
        return self.to_string()

    def save(self):
        """Write every source file to disk."""
        for path in self._source_files:
            data = self.data_for_source_file(path)
            _log.debug("Writing file %s", path)
            try:
                with open(path, "w", encoding="utf-8") as handle:
                    handle.write(data)
            except OSError as error:
                _log.warning("Failed to write %s: %s", path, error)