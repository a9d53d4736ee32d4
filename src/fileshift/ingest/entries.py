"""Drop entries: files and directories that can be walked without knowing
where they come from.

Two families are provided:

* ``Local*`` — backed by the filesystem; directory listings are drawn from
  ``os.scandir`` in fixed-size batches and file reads run in a worker thread.
* ``Memory*`` — backed by in-process data, with a configurable batch size so
  multi-batch directory reads can be exercised deterministically.

Every directory hands out a fresh ``DirectoryReader`` per call to
``reader()``; a reader yields batches until an empty one and cannot be
rewound.
"""

from __future__ import annotations

import asyncio
import os
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path

_DEFAULT_BATCH = 100


# ------------------------------------------------------------------
# Interfaces
# ------------------------------------------------------------------


class FileHandle(ABC):
    """A readable file: name, size, modification time and its bytes."""

    name: str
    size: int
    mtime_ms: int

    @abstractmethod
    async def read(self) -> bytes:
        """Return the file's raw bytes."""


class Entry(ABC):
    """A node of a dropped tree."""

    name: str
    full_path: str  # "/"-separated, rooted at the drop ("/src/a.ts")

    is_file: bool = False
    is_directory: bool = False


class FileEntry(Entry):
    is_file = True

    @abstractmethod
    async def file(self) -> FileHandle:
        """Resolve the entry to a readable handle."""


class DirectoryReader(ABC):
    @abstractmethod
    async def read_entries(self) -> list[Entry]:
        """Return the next batch of children; an empty list means done."""


class DirectoryEntry(Entry):
    is_directory = True

    @abstractmethod
    def reader(self) -> DirectoryReader:
        """Return a new reader positioned at the first child."""


@dataclass
class Drop:
    """What the user handed over.

    ``entries`` is ``None`` when hierarchical entries are unavailable; the
    walker then falls back to ``files``.
    """

    entries: list[Entry] | None = None
    files: list[FileHandle] = field(default_factory=list)


# ------------------------------------------------------------------
# Filesystem
# ------------------------------------------------------------------


class LocalFileHandle(FileHandle):
    def __init__(self, path: Path) -> None:
        self.path = path
        st = path.stat()
        self.name = path.name
        self.size = st.st_size
        self.mtime_ms = int(st.st_mtime * 1000)

    async def read(self) -> bytes:
        return await asyncio.to_thread(self.path.read_bytes)


class LocalFileEntry(FileEntry):
    def __init__(self, path: Path, full_path: str) -> None:
        self.path = path
        self.name = path.name
        self.full_path = full_path

    async def file(self) -> FileHandle:
        return await asyncio.to_thread(LocalFileHandle, self.path)


class _LocalDirectoryReader(DirectoryReader):
    def __init__(self, entry: LocalDirectoryEntry, batch_size: int) -> None:
        self._entry = entry
        self._batch_size = batch_size
        self._iter: os.ScandirIterator | None = None
        self._done = False

    def _next_batch(self) -> list[Entry]:
        if self._done:
            return []
        if self._iter is None:
            self._iter = os.scandir(self._entry.path)
        batch: list[Entry] = []
        for item in self._iter:
            batch.append(self._entry.child(item))
            if len(batch) >= self._batch_size:
                return batch
        self._iter.close()
        self._done = True
        return batch

    async def read_entries(self) -> list[Entry]:
        return await asyncio.to_thread(self._next_batch)


class LocalDirectoryEntry(DirectoryEntry):
    def __init__(self, path: Path, full_path: str, batch_size: int = _DEFAULT_BATCH) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.path = path
        self.name = path.name
        self.full_path = full_path
        self.batch_size = batch_size

    def child(self, item: os.DirEntry) -> Entry:
        path = Path(item.path)
        full = f"{self.full_path}/{item.name}"
        if item.is_dir():
            return LocalDirectoryEntry(path, full, self.batch_size)
        return LocalFileEntry(path, full)

    def reader(self) -> DirectoryReader:
        return _LocalDirectoryReader(self, self.batch_size)


def entry_for_path(path: Path, batch_size: int = _DEFAULT_BATCH) -> Entry:
    """Wrap a dropped filesystem path; its name becomes the drop-root segment."""
    path = path.resolve()
    full = f"/{path.name}"
    if path.is_dir():
        return LocalDirectoryEntry(path, full, batch_size)
    return LocalFileEntry(path, full)


def drop_from_paths(paths: list[Path], *, flat: bool = False) -> Drop:
    """Build a ``Drop`` from command-line paths.

    With *flat*, hierarchical entries are withheld and only plain files are
    offered, mirroring a source that cannot expose directories.
    """
    if flat:
        return Drop(entries=None, files=[LocalFileHandle(p) for p in paths if p.is_file()])
    return Drop(entries=[entry_for_path(p) for p in paths])


# ------------------------------------------------------------------
# In-memory
# ------------------------------------------------------------------


class MemoryFileHandle(FileHandle):
    def __init__(self, name: str, data: bytes, mtime_ms: int = 0, error: Exception | None = None) -> None:
        self.name = name
        self.size = len(data)
        self.mtime_ms = mtime_ms
        self._data = data
        self._error = error

    async def read(self) -> bytes:
        await asyncio.sleep(0)
        if self._error is not None:
            raise self._error
        return self._data


class MemoryFile(FileEntry):
    def __init__(
        self,
        name: str,
        data: bytes,
        *,
        mtime_ms: int = 0,
        error: Exception | None = None,
    ) -> None:
        self.name = name
        self.full_path = f"/{name}"
        self._handle = MemoryFileHandle(name, data, mtime_ms, error)

    async def file(self) -> FileHandle:
        await asyncio.sleep(0)
        return self._handle


class _MemoryDirectoryReader(DirectoryReader):
    def __init__(self, children: list[Entry], batch_size: int) -> None:
        self._pending = list(children)
        self._batch_size = batch_size

    async def read_entries(self) -> list[Entry]:
        await asyncio.sleep(0)
        batch = self._pending[: self._batch_size]
        del self._pending[: self._batch_size]
        return batch


class MemoryDirectory(DirectoryEntry):
    """In-memory directory; children are re-rooted under this directory."""

    def __init__(self, name: str, children: list[Entry], batch_size: int = _DEFAULT_BATCH) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self.name = name
        self.children = children
        self.batch_size = batch_size
        self.full_path = ""
        self._reroot(f"/{name}")

    def _reroot(self, full_path: str) -> None:
        self.full_path = full_path
        for child in self.children:
            if isinstance(child, MemoryDirectory):
                child._reroot(f"{full_path}/{child.name}")
            else:
                child.full_path = f"{full_path}/{child.name}"

    def reader(self) -> DirectoryReader:
        return _MemoryDirectoryReader(self.children, self.batch_size)
