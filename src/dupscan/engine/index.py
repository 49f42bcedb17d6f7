"""Size-bucketed index of retained entries with lazy digest comparison."""

from __future__ import annotations

from collections.abc import Iterator
from typing import Protocol

from dupscan.config import DEFAULT_BUCKET_COUNT
from dupscan.engine.allocator import EntryAllocator
from dupscan.engine.digest import DigestProvider
from dupscan.engine.models import Entry


class IndexObserver(Protocol):
    """Receives lookup diagnostics from the index."""

    def lookup(self, entry: Entry, bucket: int) -> None:
        """Called before a candidate is matched against its bucket."""

    def size_match(self, candidate: Entry, node: Entry) -> None:
        """Called when a retained entry has the candidate's size."""

    def digest_match(self, candidate: Entry, node: Entry) -> None:
        """Called when the candidate duplicates a retained entry."""


class DuplicateIndex:
    """Fixed table of buckets keyed by ``size % bucket_count``.

    Each bucket is a singly linked chain of entry handles kept in
    non-decreasing size order. Two entries of equal size in one chain never
    share a digest. Digests are computed only when a candidate meets an
    entry of the same size, and each entry is hashed at most once.
    """

    def __init__(
        self,
        allocator: EntryAllocator,
        digest_provider: DigestProvider,
        bucket_count: int = DEFAULT_BUCKET_COUNT,
        observer: IndexObserver | None = None,
    ) -> None:
        if bucket_count < 1:
            raise ValueError("bucket_count must be a positive integer.")
        self._allocator = allocator
        self._digest_provider = digest_provider
        self._bucket_count = bucket_count
        self._heads: list[int | None] = [None] * bucket_count
        self._observer = observer
        self._retained = 0
        self._digests_computed = 0

    @property
    def bucket_count(self) -> int:
        return self._bucket_count

    @property
    def retained_count(self) -> int:
        """Return the number of entries linked into bucket chains."""
        return self._retained

    @property
    def digests_computed(self) -> int:
        """Return how many times the digest provider has been called."""
        return self._digests_computed

    def __len__(self) -> int:
        return self._retained

    def bucket_index(self, size: int) -> int:
        """Return the bucket that holds entries of ``size`` bytes."""
        return size % self._bucket_count

    def iter_bucket(self, bucket: int) -> Iterator[Entry]:
        """Walk one bucket chain from head to tail."""
        handle = self._heads[bucket]
        while handle is not None:
            entry = self._allocator.get(handle)
            yield entry
            handle = entry.next

    def lookup_or_insert(self, entry: Entry) -> Entry | None:
        """Return the retained original that ``entry`` duplicates, else insert it.

        A returned original means ``entry`` was not linked in and still belongs
        to the caller. ``None`` means ownership of ``entry`` passed to the index.
        """
        bucket = self.bucket_index(entry.size)
        if self._observer is not None:
            self._observer.lookup(entry, bucket)
        head = self._heads[bucket]
        if head is None or self._allocator.get(head).size > entry.size:
            entry.next = head
            self._heads[bucket] = entry.handle
            self._retained += 1
            return None

        last: Entry | None = None
        handle: int | None = head
        while handle is not None:
            node = self._allocator.get(handle)
            if node.size > entry.size:
                break
            if node.size == entry.size:
                if self._observer is not None:
                    self._observer.size_match(entry, node)
                if self._content_digest(entry) == self._content_digest(node):
                    if self._observer is not None:
                        self._observer.digest_match(entry, node)
                    return node
            last = node
            handle = node.next

        if last is None:
            raise RuntimeError(f"Bucket {bucket} chain is out of size order.")
        entry.next = last.next
        last.next = entry.handle
        self._retained += 1
        return None

    def _content_digest(self, entry: Entry) -> str:
        if entry.digest is None:
            if entry.path is None:
                raise ValueError(f"Entry handle {entry.handle} has no path to hash.")
            entry.digest = self._digest_provider.digest(entry.path)
            self._digests_computed += 1
        return entry.digest
