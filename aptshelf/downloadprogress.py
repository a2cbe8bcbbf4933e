"""Progress information for a single file being downloaded."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

__all__ = ["DownloadStatus", "DownloadProgress"]


class DownloadStatus(IntEnum):
    """State of a single download."""

    IDLE = 0
    DONE = 1
    HIT = 2
    IGNORED = 3
    ERROR = 4
    FETCHING = 5


@dataclass
class DownloadProgress:
    """Progress of one file fetched during a transaction."""

    uri: str = ""
    status: DownloadStatus = DownloadStatus.IDLE
    short_description: str = ""
    file_size: int = 0
    fetched_size: int = 0
    status_message: str = ""

    def progress(self):
        """Return the completed share of the download as a whole percentage.

        A download of unknown (zero) size counts as complete.
        """
        if not self.file_size:
            return 100
        ratio = self.fetched_size * 100.0 / self.file_size
        # Round half away from zero.
        return int(ratio + 0.5) if ratio >= 0 else -int(-ratio + 0.5)

    def to_tuple(self):
        """Return the fields in wire order, with the status as a plain integer."""
        return (
            self.uri,
            int(self.status),
            self.short_description,
            self.file_size,
            self.fetched_size,
            self.status_message,
        )

    @classmethod
    def from_tuple(cls, values):
        """Build a progress record from fields in wire order."""
        uri, status, short_description, file_size, fetched_size, status_message = values
        return cls(
            uri=uri,
            status=DownloadStatus(status),
            short_description=short_description,
            file_size=file_size,
            fetched_size=fetched_size,
            status_message=status_message,
        )