"""Package relationship descriptions and a parser for Debian dependency fields."""

from __future__ import annotations

import os
import platform
from dataclasses import dataclass
from enum import IntEnum

__all__ = [
    "RelationType",
    "DependencyType",
    "DependencyInfo",
    "DependencyItem",
    "parse_depends",
    "type_name",
]


class RelationType(IntEnum):
    """Version relation of a dependency, numbered as in the package cache."""

    NO_OPERAND = 0x0
    LESS_OR_EQUAL = 0x1
    GREATER_OR_EQUAL = 0x2
    LESS_THAN = 0x3
    GREATER_THAN = 0x4
    EQUALS = 0x5
    NOT_EQUAL = 0x6


class DependencyType(IntEnum):
    """Kind of relationship a dependency expresses."""

    INVALID = 0
    DEPENDS = 1
    PRE_DEPENDS = 2
    SUGGESTS = 3
    RECOMMENDS = 4
    CONFLICTS = 5
    REPLACES = 6
    OBSOLETES = 7
    BREAKS = 8
    ENHANCES = 9


_TYPE_NAMES = (
    "",
    "Depends",
    "PreDepends",
    "Suggests",
    "Recommends",
    "Conflicts",
    "Replaces",
    "Obsoletes",
    "Breaks",
    "Enhances",
)

_OR_FLAG = 0x10
_SPACE = " \t\n\v\f\r"
_NAME_STOP = frozenset(_SPACE + "()|,[]<>")

_MACHINE_TO_ARCH = {
    "x86_64": "amd64",
    "amd64": "amd64",
    "i386": "i386",
    "i486": "i386",
    "i586": "i386",
    "i686": "i386",
    "aarch64": "arm64",
    "arm64": "arm64",
    "armv7l": "armhf",
    "armv6l": "armel",
    "ppc64le": "ppc64el",
    "ppc64": "ppc64",
    "s390x": "s390x",
    "riscv64": "riscv64",
    "mips64": "mips64el",
}


@dataclass(frozen=True)
class DependencyInfo:
    """A single dependency on a package, optionally bound to a version."""

    package_name: str = ""
    package_version: str = ""
    relation_type: RelationType = RelationType.NO_OPERAND
    dependency_type: DependencyType = DependencyType.INVALID
    multi_arch_annotation: str = ""

    @classmethod
    def create(cls, package, version, relation_type, dependency_type):
        """Build an info, splitting a ``name:annotation`` multi-arch suffix off the name."""
        parts = package.split(":")
        name = package
        annotation = ""
        if len(parts) >= 2:
            name, annotation = parts[0], parts[1]
        return cls(
            package_name=name,
            package_version=version,
            relation_type=RelationType(relation_type),
            dependency_type=DependencyType(dependency_type),
            multi_arch_annotation=annotation,
        )


DependencyItem = list  # a list of interchangeable ("or") DependencyInfo objects


def type_name(dependency_type):
    """Return the display name of a dependency type, or "" if it is unknown."""
    index = int(dependency_type)
    if 0 <= index < len(_TYPE_NAMES):
        return _TYPE_NAMES[index]
    return ""


def _native_architecture():
    arch = os.environ.get("DEB_HOST_ARCH", "").strip()
    if arch:
        return arch
    machine = platform.machine().lower()
    return _MACHINE_TO_ARCH.get(machine, machine)


def _build_profiles():
    return os.environ.get("DEB_BUILD_PROFILES", "").split()


def _arch_tuple(arch):
    if "-" in arch:
        os_name, cpu = arch.split("-", 1)
        return os_name, cpu
    return "linux", arch


def _arch_matches(spec, arch):
    if spec == "any" or spec == arch:
        return True
    if "-" not in spec:
        return False
    spec_os, spec_cpu = spec.split("-", 1)
    arch_os, arch_cpu = _arch_tuple(arch)
    return spec_os in ("any", arch_os) and spec_cpu in ("any", arch_cpu)


def _skip_space(text, index):
    while index < len(text) and text[index] in _SPACE:
        index += 1
    return index


def _convert_relation(text, index):
    char = text[index]
    if char == "<":
        index += 1
        if text[index] == "=":
            return RelationType.LESS_OR_EQUAL, index + 1
        if text[index] == "<":
            return RelationType.LESS_THAN, index + 1
        return RelationType.LESS_OR_EQUAL, index
    if char == ">":
        index += 1
        if text[index] == "=":
            return RelationType.GREATER_OR_EQUAL, index + 1
        if text[index] == ">":
            return RelationType.GREATER_THAN, index + 1
        return RelationType.GREATER_OR_EQUAL, index
    if char == "=":
        return RelationType.EQUALS, index + 1
    return RelationType.EQUALS, index


def _parse_arch_list(text, index, arch):
    """Parse ``[...]`` starting after the bracket; return (found, index) or None."""
    n = len(text)
    if index == n:
        return None
    end = index
    found = False
    negated = False
    while index < n:
        while end < n and text[end] not in _SPACE and text[end] != "]":
            end += 1
        if end >= n:
            return None
        if text[index] == "!":
            negated = True
            index += 1
        name = text[index:end]
        if name and _arch_matches(name, arch):
            found = True
            if text[index - 1] != "!":
                negated = False
            while end < n and text[end] != "]":
                end += 1
            if end >= n:
                return None
        closing = text[end] == "]"
        end += 1
        index = end
        if closing:
            break
        index = _skip_space(text, index)
    if negated:
        found = not found
    return found, index


def _parse_restrictions(text, index, profiles):
    """Parse ``<...>`` lists; return (applies, index) or None."""
    n = len(text)
    applies = not (index < n and text[index] == "<")
    while index < n and text[index] == "<":
        index += 1
        if index == n:
            return None
        end = index
        if applies:
            while end < n and text[end] != ">":
                end += 1
            index = _skip_space(text, min(end + 1, n))
            continue
        list_applies = True
        while index < n:
            while end < n and text[end] not in _SPACE and text[end] != ">":
                end += 1
            if end >= n:
                return None
            negated = False
            if text[index] == "!":
                negated = True
                index += 1
            restriction = text[index:end]
            if restriction and restriction in profiles:
                matched_term = not negated
            else:
                matched_term = negated
            if not matched_term:
                list_applies = False
                while end < n and text[end] != ">":
                    end += 1
                if end >= n:
                    return None
            closing = text[end] == ">"
            end += 1
            index = _skip_space(text, end)
            if closing:
                break
        if list_applies:
            applies = True
    return applies, index


def _parse_one(text, index, arch, profiles):
    """Parse one dependency term; return (package, version, op, next_index) or None."""
    n = len(text)
    index = _skip_space(text, index)
    start = index
    while index < n and text[index] not in _NAME_STOP:
        index += 1
    if index < n and text[index] == ")":
        return None
    if index == start:
        return None
    package = text[start:index]
    index = _skip_space(text, index)

    op = int(RelationType.NO_OPERAND)
    version = ""
    if index < n and text[index] == "(":
        index = _skip_space(text, index + 1)
        if index + 3 >= n:
            return None
        relation, index = _convert_relation(text, index)
        op = int(relation)
        index = _skip_space(text, index)
        start = index
        close = text.find(")", index)
        if close == -1 or close == start:
            return None
        end = close
        while end > start and text[end - 1] in _SPACE:
            end -= 1
        version = text[start:end]
        index = close + 1
    index = _skip_space(text, index)

    if index < n and text[index] == "[":
        parsed = _parse_arch_list(text, index + 1, arch)
        if parsed is None:
            return None
        found, index = parsed
        if not found:
            package = ""
    index = _skip_space(text, index)

    parsed = _parse_restrictions(text, index, profiles)
    if parsed is None:
        return None
    applies, index = parsed
    if not applies:
        package = ""

    if index < n and text[index] == "|":
        op |= _OR_FLAG
    if index == n or text[index] in ",|":
        if index < n:
            index = _skip_space(text, index + 1)
        return package, version, op, index
    return None


def parse_depends(field, dependency_type):
    """Parse a dependency field into a list of or-groups of DependencyInfo.

    Parsing stops at the first malformed term; the groups parsed until then
    are returned. Architecture qualifiers are checked against the host
    architecture, restriction lists against DEB_BUILD_PROFILES; a term that
    does not apply keeps its place with an empty package name.
    """
    arch = _native_architecture()
    profiles = _build_profiles()
    depends = []
    had_or = False
    index = 0
    while index != len(field):
        parsed = _parse_one(field, index, arch, profiles)
        if parsed is None:
            return depends
        package, version, op, index = parsed
        item = depends.pop() if had_or else []
        had_or = bool(op & _OR_FLAG)
        op &= ~_OR_FLAG
        item.append(DependencyInfo.create(package, version, op, dependency_type))
        depends.append(item)
    return depends