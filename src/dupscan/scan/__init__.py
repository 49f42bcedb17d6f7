"""Traversal and scan orchestration package."""

from .discovery import DiscoveredFile, classify_mode, describe, walk_tree
from .models import ScanProfile, ScanResult
from .orchestrator import Scanner
from .reporting import ScanReporter

__all__ = [
    "DiscoveredFile",
    "ScanProfile",
    "ScanReporter",
    "ScanResult",
    "Scanner",
    "classify_mode",
    "describe",
    "walk_tree",
]
