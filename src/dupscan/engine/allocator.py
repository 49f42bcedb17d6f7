"""Arena allocator for entries with a LIFO reuse pool."""

from __future__ import annotations

from dupscan.engine.models import Entry
from dupscan.errors import AllocationError


class EntryAllocator:
    """Hands out Entry slots, recycling released ones before growing the arena."""

    def __init__(self) -> None:
        self._arena: list[Entry] = []
        self._free: list[int] = []
        self._released: set[int] = set()

    @property
    def capacity(self) -> int:
        """Return the number of slots ever created."""
        return len(self._arena)

    @property
    def free_count(self) -> int:
        """Return the number of slots waiting in the reuse pool."""
        return len(self._free)

    @property
    def live_count(self) -> int:
        """Return the number of slots currently handed out."""
        return len(self._arena) - len(self._free)

    def allocate(self, path: str) -> Entry:
        """Return a zero-initialized entry that owns ``path``."""
        if self._free:
            handle = self._free.pop()
            self._released.discard(handle)
            entry = self._arena[handle]
            entry.reset(path)
            return entry
        handle = len(self._arena)
        try:
            entry = Entry(handle=handle, path=path)
            self._arena.append(entry)
        except MemoryError as exc:
            raise AllocationError(path, "Out of memory allocating entry.") from exc
        return entry

    def release(self, entry: Entry) -> None:
        """Clear the entry's owned data and return its slot to the pool."""
        handle = entry.handle
        if handle < 0 or handle >= len(self._arena) or self._arena[handle] is not entry:
            raise ValueError(f"Entry handle {handle} does not belong to this allocator.")
        if handle in self._released:
            raise ValueError(f"Entry handle {handle} was already released.")
        entry.reset()
        self._released.add(handle)
        self._free.append(handle)

    def get(self, handle: int) -> Entry:
        """Resolve a handle to its entry."""
        if handle in self._released:
            raise ValueError(f"Entry handle {handle} refers to a released slot.")
        return self._arena[handle]
