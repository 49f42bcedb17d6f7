"""Typed results of a scan."""

from __future__ import annotations

from dataclasses import dataclass

from dupscan.engine.models import DuplicateReport


@dataclass(slots=True, frozen=True)
class ScanProfile:
    """Deterministic counters for one scan, plus wall time."""

    directories: int
    regular_files: int
    empty_files: int
    symlinks_skipped: int
    duplicates: int
    duplicate_bytes: int
    digests_computed: int
    retained_entries: int
    entry_slots: int
    total_seconds: float


@dataclass(slots=True, frozen=True)
class ScanResult:
    """Duplicate reports in detection order and the scan profile."""

    root: str
    reports: tuple[DuplicateReport, ...]
    profile: ScanProfile
