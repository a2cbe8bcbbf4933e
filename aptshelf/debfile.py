"""Reading metadata and contents of Debian binary package archives."""

from __future__ import annotations

import bz2
import gzip
import hashlib
import io
import lzma
import os
import re
import tarfile
import zlib

import zstandard

from aptshelf.dependencyinfo import DependencyType, parse_depends

__all__ = ["DebFile", "DebFileError"]

_AR_MAGIC = b"!<arch>\n"
_AR_HEADER_SIZE = 60
_NEWLINES_RE = re.compile(r"[\r\n]+")


class DebFileError(ValueError):
    """Raised when a file is not a readable Debian package archive."""


def _read_ar(data):
    """Return the members of an ar archive as a name -> bytes mapping."""
    if not data.startswith(_AR_MAGIC):
        raise DebFileError("not an ar archive")
    members = {}
    pos = len(_AR_MAGIC)
    while pos < len(data):
        if data[pos:pos + 1] == b"\n":
            pos += 1
            continue
        header = data[pos:pos + _AR_HEADER_SIZE]
        if len(header) < _AR_HEADER_SIZE or header[58:60] != b"`\n":
            raise DebFileError("corrupt ar member header")
        name = header[:16].decode("ascii", "replace").strip().rstrip("/")
        try:
            size = int(header[48:58].strip() or b"0")
        except ValueError as error:
            raise DebFileError("corrupt ar member size") from error
        start = pos + _AR_HEADER_SIZE
        end = start + size
        if end > len(data):
            raise DebFileError("truncated ar member")
        members[name] = data[start:end]
        pos = end + size % 2
    return members


def _decompress(name, payload):
    if name.endswith(".gz"):
        return gzip.decompress(payload)
    if name.endswith(".bz2"):
        return bz2.decompress(payload)
    if name.endswith((".xz", ".lzma")):
        return lzma.decompress(payload)
    if name.endswith(".zst"):
        out = io.BytesIO()
        zstandard.ZstdDecompressor().copy_stream(io.BytesIO(payload), out)
        return out.getvalue()
    if name.endswith(".tar"):
        return payload
    raise DebFileError(f"unsupported member compression: {name}")


def _open_member_tar(members, prefix):
    for name, payload in members.items():
        if name.startswith(prefix):
            try:
                raw = _decompress(name, payload)
            except (OSError, EOFError, lzma.LZMAError, zlib.error, zstandard.ZstdError) as error:
                raise DebFileError(f"cannot decompress {name}") from error
            return tarfile.open(fileobj=io.BytesIO(raw), mode="r:")
    raise DebFileError(f"archive has no {prefix} member")


def _normalize(name):
    while name.startswith("./"):
        name = name[2:]
    return name.strip("/")


def _parse_control(text):
    """Parse the first stanza of a control file into lower-cased field names."""
    fields = {}
    current = None
    for line in text.split("\n"):
        if not line.strip():
            if fields:
                break
            continue
        if line[0] in " \t":
            if current is not None:
                fields[current].append(line)
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        current = key.strip().lower()
        fields[current] = [value.lstrip(" \t")]
    return {key: "\n".join(parts).rstrip() for key, parts in fields.items()}


def _extract(tar, path, members=None):
    kwargs = {}
    if hasattr(tarfile, "tar_filter"):
        kwargs["filter"] = "tar"
    tar.extractall(path, members=members, **kwargs)


class DebFile:
    """Metadata and contents of a Debian package archive (.deb)."""

    def __init__(self, file_path):
        self.file_path = str(file_path)
        self.is_valid = False
        self._control = {}
        try:
            members = self._members()
            with _open_member_tar(members, "control.tar") as tar:
                member = next(
                    (item for item in tar.getmembers()
                     if item.isfile() and _normalize(item.name) == "control"),
                    None,
                )
                if member is None:
                    return
                handle = tar.extractfile(member)
                text = handle.read().decode("utf-8", errors="replace")
        except (OSError, DebFileError, tarfile.TarError):
            return
        self._control = _parse_control(text)
        self.is_valid = True

    def _members(self):
        with open(self.file_path, "rb") as handle:
            return _read_ar(handle.read())

    def _data_tar(self):
        return _open_member_tar(self._members(), "data.tar")

    def control_field(self, name):
        """Return the value of a control field, or "" if it is absent."""
        return self._control.get(name.lower(), "")

    @property
    def package_name(self):
        """The name of the package in this archive."""
        return self.control_field("Package")

    @property
    def source_package(self):
        """The source package named by the archive, if any."""
        return self.control_field("Source")

    @property
    def version(self):
        """The version the archive provides."""
        return self.control_field("Version")

    @property
    def architecture(self):
        """The CPU architecture the archive installs on."""
        return self.control_field("Architecture")

    @property
    def maintainer(self):
        """The maintainer's name and address."""
        return self.control_field("Maintainer")

    @property
    def section(self):
        """The archive section of the package."""
        return self.control_field("Section")

    @property
    def priority(self):
        """The priority of the package."""
        return self.control_field("Priority")

    @property
    def homepage(self):
        """The homepage of the package."""
        return self.control_field("Homepage")

    def short_description(self):
        """Return the first line of the description."""
        return self.control_field("Description").split("\n", 1)[0]

    def long_description(self):
        """Return the extended description, or the short one if there is none."""
        sections = self.control_field("Description").split("\n ")
        parsed = _NEWLINES_RE.sub("\n", "".join(sections[1:]))
        return parsed or self.short_description()

    def installed_size(self):
        """Return the Installed-Size field as an integer, 0 if it is unusable."""
        try:
            return int(self.control_field("Installed-Size").strip())
        except ValueError:
            return 0

    def md5_sum(self):
        """Return the hexadecimal MD5 digest of the whole archive file."""
        digest = hashlib.md5()
        with open(self.file_path, "rb") as handle:
            for chunk in iter(lambda: handle.read(1 << 16), b""):
                digest.update(chunk)
        return digest.hexdigest()

    def _tar_listing(self):
        try:
            with self._data_tar() as tar:
                return [
                    item.name + "/" if item.isdir() else item.name
                    for item in tar.getmembers()
                ]
        except (OSError, DebFileError, tarfile.TarError):
            return []

    def file_list(self):
        """Return the paths the archive installs, leaving out parent directories."""
        files = self._tar_listing()
        if files:
            files.pop(0)  # the "./" entry
        files = [name for name in files if name]
        index = 0
        while index < len(files) - 1:
            if files[index] in files[index + 1]:
                files[index] = " "
            files = [name for name in files if name != " "]
            index += 1
        return files

    def icon_list(self):
        """Return icon paths, falling back to pixmaps when there are no icons."""
        files = self.file_list()
        icons = [name for name in files if name.startswith("./usr/share/icons")]
        if not icons:
            icons = [name for name in files if name.startswith("./usr/share/pixmaps")]
        return icons

    def depends(self):
        """Return the Depends field as or-groups."""
        return parse_depends(self.control_field("Depends"), DependencyType.DEPENDS)

    def pre_depends(self):
        """Return the Pre-Depends field as or-groups."""
        return parse_depends(self.control_field("Pre-Depends"), DependencyType.PRE_DEPENDS)

    def suggests(self):
        """Return the Suggests field as or-groups."""
        return parse_depends(self.control_field("Suggests"), DependencyType.SUGGESTS)

    def recommends(self):
        """Return the Recommends field as or-groups."""
        return parse_depends(self.control_field("Recommends"), DependencyType.RECOMMENDS)

    def conflicts(self):
        """Return the Conflicts field as or-groups."""
        return parse_depends(self.control_field("Conflicts"), DependencyType.CONFLICTS)

    def replaces(self):
        """Return the Replaces field as or-groups."""
        return parse_depends(self.control_field("Replaces"), DependencyType.REPLACES)

    def obsoletes(self):
        """Return the Obsoletes field as or-groups."""
        return parse_depends(self.control_field("Obsoletes"), DependencyType.OBSOLETES)

    def breaks(self):
        """Return the Breaks field as or-groups."""
        return parse_depends(self.control_field("Breaks"), DependencyType.BREAKS)

    def enhances(self):
        """Return the Enhance field as or-groups."""
        return parse_depends(self.control_field("Enhance"), DependencyType.ENHANCES)

    def extract_archive(self, directory=None):
        """Extract the data files into ``directory`` (the working directory if None)."""
        target = directory or os.getcwd()
        try:
            with self._data_tar() as tar:
                _extract(tar, target)
        except (OSError, DebFileError, tarfile.TarError):
            return False
        return True

    def extract_file_from_archive(self, file_name, destination):
        """Extract one file or directory of the data files below ``destination``."""
        wanted = _normalize(file_name)
        try:
            with self._data_tar() as tar:
                members = [
                    item for item in tar.getmembers()
                    if wanted and (
                        _normalize(item.name) == wanted
                        or _normalize(item.name).startswith(wanted + "/")
                    )
                ]
                if not members:
                    return False
                _extract(tar, destination, members)
        except (OSError, DebFileError, tarfile.TarError):
            return False
        return True