"""A single line of an APT sources list."""

from __future__ import annotations

import re
from dataclasses import dataclass, field

__all__ = ["SourceEntry", "DEFAULT_SOURCE_LIST"]

DEFAULT_SOURCE_LIST = "/etc/apt/sources.list"

_TYPE_RE = re.compile(r"^([a-z\-]+) *")
_SOURCE_TYPES = frozenset({"rpm", "rpm-src", "deb", "deb-src"})


@dataclass(eq=False)
class SourceEntry:
    """A software source: type, URI, distribution, components and options.

    Entries built from fields have their ``line`` composed from those fields;
    entries read from a file keep the original line, which is what an invalid
    entry is written back as.
    """

    type: str = ""
    uri: str = ""
    dist: str = ""
    components: list = field(default_factory=list)
    comment: str = ""
    architectures: list = field(default_factory=list)
    file: str = ""
    is_enabled: bool = True
    is_valid: bool = True
    line: str | None = None

    def __post_init__(self):
        if not self.file:
            self.file = DEFAULT_SOURCE_LIST
        if self.line is None:
            self.line = self.to_string()

    @classmethod
    def parse(cls, line, file=""):
        """Parse one line of a sources list that belongs to ``file``."""
        entry = cls(file=file or "", line=line)
        entry._parse_line(line)
        return entry

    def _invalidate(self):
        self.is_valid = False

    def _parse_line(self, data):
        if not data:
            return

        text = " ".join(data.split())
        if not text or text == "#":
            self._invalidate()
            return

        if text.startswith("#"):
            self.is_enabled = False
        # Lines may carry several leading comment characters.
        while text.startswith("#"):
            text = text[1:].strip()

        comment_at = text.find("#")
        if comment_at > 0:
            self.comment = text[comment_at + 1:]
            text = text[:comment_at]

        match = _TYPE_RE.match(text)
        self.type = match.group(1) if match else ""
        if not match or self.type not in _SOURCE_TYPES:
            self._invalidate()
            return

        start = match.end()
        end = len(text)
        if start < end and text[start] == "[":
            close = text.find("]")
            metadata = text[start + 1:close] if close >= 0 else text[start + 1:]
            for option in metadata.split(";"):
                parts = option.split("=")
                if len(parts) != 2 or parts[0] != "arch":
                    self._invalidate()
                    return
                self.architectures = parts[1].split(",")
            start += len(metadata) + 2
            while start < end and text[start] == " ":
                start += 1

        in_brackets = False
        done = False
        for position, char in enumerate(text[start:], start):
            if char == " " and not in_brackets:
                self.uri = text[start:position]
                start = position + 1
                done = True
                break
            if char == "[":
                in_brackets = True
            elif char == "]":
                in_brackets = False

        if not self.uri or not done:
            self._invalidate()
            return

        pieces = text[start:].split()
        if not pieces:
            self._invalidate()
            return

        self.dist = pieces[0]
        self.components = pieces[1:]

    def __eq__(self, other):
        if not isinstance(other, SourceEntry):
            return NotImplemented
        return (
            self.is_enabled == other.is_enabled
            and self.type == other.type
            and self.uri == other.uri
            and self.dist == other.dist
            and list(self.components) == list(other.components)
        )

    __hash__ = None

    def to_string(self):
        """Return the entry formatted as a sources list line."""
        if not self.is_valid:
            return (self.line or "").strip()

        text = "" if self.is_enabled else "# "
        text += self.type
        if self.architectures:
            text += " [arch={}]".format(",".join(self.architectures))
        text += f" {self.uri} {self.dist}"
        if self.components:
            text += " " + " ".join(self.components)
        if self.comment:
            text += " #" + self.comment
        return text

    def __str__(self):
        return self.to_string()

    def set_enabled(self, enabled):
        """Enable or disable the entry, commenting its raw line in or out."""
        if enabled == self.is_enabled:
            return
        self.is_enabled = enabled
        line = self.line or ""
        self.line = line[1:] if enabled else "#" + line