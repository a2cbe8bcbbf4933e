"""Reasons why marking a package for a change left it broken."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum

from aptshelf.dependencyinfo import DependencyInfo

__all__ = ["BrokenReason", "MarkingErrorInfo"]


class BrokenReason(IntEnum):
    """Why a package marking is broken."""

    UNKNOWN_REASON = 0
    PARENT_NOT_INSTALLABLE = 1
    WRONG_CANDIDATE_VERSION = 2
    DEP_NOT_INSTALLABLE = 3
    VIRTUAL_PACKAGE = 4


@dataclass(frozen=True)
class MarkingErrorInfo:
    """A broken-marking reason with the dependency it concerns, if any."""

    error_type: BrokenReason = BrokenReason.UNKNOWN_REASON
    error_info: DependencyInfo = field(default_factory=DependencyInfo)