"""Ingestion pipeline: walk → concurrent reads → rename → WorkingSet.

Pipeline:
  1. Walk the drop into ordered ``WalkedFile`` pairs.
  2. Issue one read per file concurrently and join them; results keep the
     walk order regardless of which read finishes first.
  3. Rename each path to the target extension and build ``FileRecord``s.
  4. Commit the new WorkingSet unless a newer ingestion has started.

A single failed read aborts the whole batch; the previous WorkingSet stays
in place.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from fileshift.ingest.entries import Drop
from fileshift.ingest.rename import file_type, normalize_extension, rename_path
from fileshift.ingest.walker import IngestError, WalkedFile, walk_drop
from fileshift.models import FileRecord, WorkingSet

logger = logging.getLogger(__name__)


def record_id(path: str, mtime_ms: int, size: int) -> str:
    return f"{path}-{mtime_ms}-{size}"


async def _read_one(item: WalkedFile, extension: str) -> FileRecord:
    try:
        content = await item.handle.read()
    except Exception as exc:
        raise IngestError(item.path, exc) from exc
    return FileRecord(
        id=record_id(item.path, item.handle.mtime_ms, item.handle.size),
        original_path=item.path,
        new_path=rename_path(item.path, extension),
        content=content,
        original_type=file_type(item.path),
        new_type=extension,
    )


async def read_records(walked: list[WalkedFile], extension: str) -> WorkingSet:
    """Read every file concurrently and return records in *walked* order.

    Raises:
        IngestError: If any read fails (no partial results).
    """
    ext = normalize_extension(extension)
    results = await asyncio.gather(*(_read_one(item, ext) for item in walked))
    return tuple(results)


class Ingestor:
    """Owns the current WorkingSet and serialises its updates.

    Each call to ``ingest()`` takes a generation token; when it finishes, its
    result is committed only if no later ``ingest()`` or ``clear()`` happened
    in the meantime. ``on_change`` is invoked with the new WorkingSet after
    every commit (the persistence hook).
    """

    def __init__(
        self,
        working_set: WorkingSet = (),
        on_change: Callable[[WorkingSet], None] | None = None,
    ) -> None:
        self._working_set: WorkingSet = tuple(working_set)
        self._generation = 0
        self._on_change = on_change

    @property
    def working_set(self) -> WorkingSet:
        return self._working_set

    def _commit(self, working_set: WorkingSet) -> None:
        self._working_set = working_set
        if self._on_change is not None:
            self._on_change(working_set)

    async def ingest(self, drop: Drop, extension: str) -> WorkingSet | None:
        """Walk and read *drop*; replace the WorkingSet with the result.

        Returns:
            The committed WorkingSet, or ``None`` when nothing was committed
            (empty drop, or superseded by a newer operation).

        Raises:
            IngestError: On any read failure; the current set is left as-is.
        """
        self._generation += 1
        token = self._generation

        walked = await walk_drop(drop)
        if not walked:
            logger.info("Drop contained no readable files")
            return None

        records = await read_records(walked, extension)

        if token != self._generation:
            logger.info("Discarding stale ingestion of %d file(s)", len(records))
            return None

        self._commit(records)
        return records

    def clear(self) -> None:
        self._generation += 1
        self._commit(())
