"""Per-scan duplicate-detection engine."""

from __future__ import annotations

from dupscan.config import DEFAULT_BUCKET_COUNT
from dupscan.engine.allocator import EntryAllocator
from dupscan.engine.digest import DigestProvider
from dupscan.engine.index import DuplicateIndex, IndexObserver
from dupscan.engine.models import DuplicateReport, Entry


class DuplicateEngine:
    """Owns one allocator and one index for the lifetime of a scan."""

    def __init__(
        self,
        digest_provider: DigestProvider,
        bucket_count: int = DEFAULT_BUCKET_COUNT,
        observer: IndexObserver | None = None,
    ) -> None:
        self.allocator = EntryAllocator()
        self.index = DuplicateIndex(
            allocator=self.allocator,
            digest_provider=digest_provider,
            bucket_count=bucket_count,
            observer=observer,
        )

    def new_entry(
        self,
        path: str,
        size: int,
        device: int = 0,
        inode: int = 0,
        link_count: int = 0,
    ) -> Entry:
        """Allocate an entry for a regular file and fill in its metadata."""
        entry = self.allocator.allocate(path)
        entry.size = size
        entry.device = device
        entry.inode = inode
        entry.link_count = link_count
        return entry

    def submit(self, entry: Entry) -> DuplicateReport | None:
        """Match ``entry`` against the index.

        A duplicate is reported and its entry released; otherwise the index
        keeps the entry.
        """
        original = self.index.lookup_or_insert(entry)
        if original is None:
            return None
        report = DuplicateReport(
            duplicate_path=entry.path or "",
            original_path=original.path or "",
            size=entry.size,
            digest=original.digest or "",
        )
        self.allocator.release(entry)
        return report
