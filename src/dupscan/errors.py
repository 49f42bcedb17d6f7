"""Error types raised while scanning for duplicates."""

from __future__ import annotations


class ScanError(Exception):
    """Base class for failures that abort a scan."""

    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"{path}: {reason}")
        self.path = path
        self.reason = reason


class AllocationError(ScanError):
    """Raised when the entry arena cannot grow."""


class ScanIOError(ScanError):
    """Raised when a directory or file cannot be opened, read or stat'ed."""


class DigestError(ScanIOError):
    """Raised when a content digest cannot be computed."""


class UnsupportedFileTypeError(ScanError):
    """Raised for device nodes, FIFOs, sockets and other special files."""

    def __init__(self, path: str, kind: str) -> None:
        super().__init__(path, f"Can't handle file type '{kind}'.")
        self.kind = kind


class ConfigError(ValueError):
    """Raised when configuration input is invalid."""
