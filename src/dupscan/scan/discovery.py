"""Depth-first directory traversal with file-type classification."""

from __future__ import annotations

import os
import stat
from collections.abc import Iterator
from dataclasses import dataclass

from dupscan.errors import ScanIOError, UnsupportedFileTypeError

KIND_FILE = "file"
KIND_DIRECTORY = "directory"
KIND_SYMLINK = "symlink"


@dataclass(slots=True, frozen=True)
class DiscoveredFile:
    """Metadata for one filesystem entry met during traversal."""

    path: str
    name: str
    kind: str
    size: int
    device: int
    inode: int
    link_count: int


def walk_tree(root: str) -> Iterator[DiscoveredFile]:
    """Yield ``root`` and everything below it, depth-first, in name order.

    A subdirectory's contents are yielded right after the subdirectory itself,
    before its later siblings. Symlinks are yielded but never followed.
    """
    try:
        root_stat = os.stat(root)
    except OSError as exc:
        raise ScanIOError(root, _os_reason(exc)) from exc
    if not stat.S_ISDIR(root_stat.st_mode):
        raise ScanIOError(root, "Not a directory.")
    yield _from_stat(root, os.path.basename(os.path.normpath(root)), root_stat)

    stack: list[tuple[str, Iterator[str]]] = [(root, iter(_list_names(root)))]
    while stack:
        parent, names = stack[-1]
        name = next(names, None)
        if name is None:
            stack.pop()
            continue
        item = describe(os.path.join(parent, name), name)
        yield item
        if item.kind == KIND_DIRECTORY:
            stack.append((item.path, iter(_list_names(item.path))))


def describe(path: str, name: str) -> DiscoveredFile:
    """lstat one entry and classify it, rejecting special files."""
    try:
        st = os.lstat(path)
    except OSError as exc:
        raise ScanIOError(path, _os_reason(exc)) from exc
    return _from_stat(path, name, st)


def _from_stat(path: str, name: str, st: os.stat_result) -> DiscoveredFile:
    kind = classify_mode(st.st_mode)
    if kind not in (KIND_FILE, KIND_DIRECTORY, KIND_SYMLINK):
        raise UnsupportedFileTypeError(path, kind)
    return DiscoveredFile(
        path=path,
        name=name,
        kind=kind,
        size=st.st_size if kind == KIND_FILE else 0,
        device=st.st_dev,
        inode=st.st_ino,
        link_count=st.st_nlink,
    )


def classify_mode(mode: int) -> str:
    """Map an ``st_mode`` value to a file kind name."""
    if stat.S_ISREG(mode):
        return KIND_FILE
    if stat.S_ISDIR(mode):
        return KIND_DIRECTORY
    if stat.S_ISLNK(mode):
        return KIND_SYMLINK
    if stat.S_ISBLK(mode):
        return "block device"
    if stat.S_ISCHR(mode):
        return "character device"
    if stat.S_ISFIFO(mode):
        return "fifo"
    if stat.S_ISSOCK(mode):
        return "socket"
    return "unknown"


def _list_names(directory: str) -> list[str]:
    """Return directory entry names in sorted order; ``.`` and ``..`` never appear."""
    try:
        with os.scandir(directory) as entries:
            return sorted(entry.name for entry in entries)
    except OSError as exc:
        raise ScanIOError(directory, _os_reason(exc)) from exc


def _os_reason(exc: OSError) -> str:
    return exc.strerror or str(exc)
