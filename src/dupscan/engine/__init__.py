"""Duplicate-detection engine package."""

from .allocator import EntryAllocator
from .core import DuplicateEngine
from .digest import (
    CommandDigestProvider,
    DigestProvider,
    HashlibDigestProvider,
    build_digest_provider,
    default_digest_command,
)
from .index import DuplicateIndex, IndexObserver
from .models import DuplicateReport, Entry

__all__ = [
    "CommandDigestProvider",
    "DigestProvider",
    "DuplicateEngine",
    "DuplicateIndex",
    "DuplicateReport",
    "Entry",
    "EntryAllocator",
    "HashlibDigestProvider",
    "IndexObserver",
    "build_digest_provider",
    "default_digest_command",
]
