"""Typed models for the duplicate-detection engine."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Entry:
    """One non-empty regular file seen during a scan.

    Entries live in an allocator arena and are addressed by ``handle``; ``next``
    is the handle of the following entry in a bucket chain.
    """

    handle: int
    path: str | None = None
    size: int = 0
    digest: str | None = None
    device: int = 0
    inode: int = 0
    link_count: int = 0
    next: int | None = None

    def reset(self, path: str | None = None) -> None:
        """Zero every field except the handle."""
        self.path = path
        self.size = 0
        self.digest = None
        self.device = 0
        self.inode = 0
        self.link_count = 0
        self.next = None


@dataclass(slots=True, frozen=True)
class DuplicateReport:
    """A duplicate file and the retained original it matched."""

    duplicate_path: str
    original_path: str
    size: int
    digest: str

    def format_line(self) -> str:
        """Render the report line printed for every detected duplicate."""
        return f">>> DUP file: {self.duplicate_path}. Original: {self.original_path}."
