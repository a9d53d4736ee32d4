"""Drop traversal: turn a ``Drop`` into a flat, ordered list of files.

Directory readers may return their children over several batches; each
reader is drained until it returns an empty batch before its children are
visited depth-first. Hidden entries (leaf starting with ``.``, including
hidden directories) and zero-byte files are dropped from both the
hierarchical and the flat source.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from fileshift.ingest.entries import DirectoryEntry, DirectoryReader, Drop, Entry, FileEntry, FileHandle
from fileshift.ingest.rename import leaf_name

logger = logging.getLogger(__name__)


class IngestError(RuntimeError):
    """Raised when an entry or file cannot be read; the batch is aborted."""

    def __init__(self, path: str, cause: BaseException | None = None) -> None:
        detail = f": {cause}" if cause is not None else ""
        super().__init__(f"Could not read '{path}'{detail}")
        self.path = path
        self.cause = cause


@dataclass(frozen=True)
class WalkedFile:
    handle: FileHandle
    path: str  # relative to the drop root, "/"-separated


def is_hidden(path: str) -> bool:
    return leaf_name(path).startswith(".")


async def read_all_entries(reader: DirectoryReader) -> list[Entry]:
    """Drain *reader* until it signals completion with an empty batch."""
    entries: list[Entry] = []
    while True:
        batch = await reader.read_entries()
        if not batch:
            return entries
        entries.extend(batch)


async def files_from_entry(entry: Entry) -> list[WalkedFile]:
    """Flatten *entry* (file or directory tree) into ``WalkedFile`` pairs."""
    if entry.is_file and isinstance(entry, FileEntry):
        if entry.name.startswith("."):
            return []
        try:
            handle = await entry.file()
        except Exception as exc:
            raise IngestError(entry.full_path.lstrip("/"), exc) from exc
        return [WalkedFile(handle=handle, path=entry.full_path.lstrip("/"))]

    if entry.is_directory and isinstance(entry, DirectoryEntry):
        if entry.name.startswith("."):
            return []
        try:
            children = await read_all_entries(entry.reader())
        except Exception as exc:
            raise IngestError(entry.full_path.lstrip("/"), exc) from exc
        walked: list[WalkedFile] = []
        for child in children:
            walked.extend(await files_from_entry(child))
        return walked

    return []


def _keep(item: WalkedFile) -> bool:
    return not is_hidden(item.path) and item.handle.size > 0


async def walk_drop(drop: Drop) -> list[WalkedFile]:
    """Return every visible, non-empty file of *drop* in drop order.

    Raises:
        IngestError: If any directory listing or file lookup fails.
    """
    if drop.entries is not None:
        walked: list[WalkedFile] = []
        for entry in drop.entries:
            walked.extend(await files_from_entry(entry))
    else:
        logger.debug("Hierarchical entries unavailable; using flat file list")
        walked = [WalkedFile(handle=f, path=f.name) for f in drop.files]

    kept = [w for w in walked if _keep(w)]
    if len(kept) != len(walked):
        logger.debug("Skipped %d hidden or empty file(s)", len(walked) - len(kept))
    return kept
