"""Tests for drop traversal."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from fileshift.ingest.entries import (
    DirectoryReader,
    Drop,
    Entry,
    MemoryDirectory,
    MemoryFile,
    MemoryFileHandle,
    drop_from_paths,
)
from fileshift.ingest.walker import IngestError, read_all_entries, walk_drop


def _paths(walked) -> list[str]:
    return [w.path for w in walked]


class _ScriptedReader(DirectoryReader):
    """Returns pre-scripted batches, then empty batches forever."""

    def __init__(self, batches: list[list[Entry]]) -> None:
        self.batches = list(batches)
        self.calls = 0

    async def read_entries(self) -> list[Entry]:
        self.calls += 1
        return self.batches.pop(0) if self.batches else []


# ------------------------------------------------------------------
# Directory batches
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_read_all_entries_concatenates_batches_until_empty():
    a, b, c = MemoryFile("a.js", b"1"), MemoryFile("b.js", b"2"), MemoryFile("c.js", b"3")
    reader = _ScriptedReader([[a, b], [c]])

    entries = await read_all_entries(reader)

    assert entries == [a, b, c]
    assert reader.calls == 3  # two batches + the terminating empty one


@pytest.mark.asyncio
async def test_walk_multi_batch_directory_returns_all_files():
    files = [MemoryFile(f"f{i}.js", b"x") for i in range(5)]
    root = MemoryDirectory("src", files, batch_size=2)

    walked = await walk_drop(Drop(entries=[root]))

    assert _paths(walked) == [f"src/f{i}.js" for i in range(5)]


@pytest.mark.asyncio
async def test_walk_preserves_relative_paths_depth_first():
    root = MemoryDirectory(
        "proj",
        [
            MemoryFile("a.js", b"a"),
            MemoryDirectory("lib", [MemoryFile("b.js", b"b"), MemoryDirectory("x", [MemoryFile("c.js", b"c")])]),
            MemoryFile("d.js", b"d"),
        ],
    )

    walked = await walk_drop(Drop(entries=[root, MemoryFile("top.txt", b"t")]))

    assert _paths(walked) == ["proj/a.js", "proj/lib/b.js", "proj/lib/x/c.js", "proj/d.js", "top.txt"]


# ------------------------------------------------------------------
# Filtering
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_hidden_entries_excluded_from_hierarchical_source():
    root = MemoryDirectory(
        "src",
        [
            MemoryFile(".env", b"SECRET=1"),
            MemoryFile("app.js", b"x"),
            MemoryDirectory(".git", [MemoryFile("HEAD", b"ref")]),
        ],
    )

    walked = await walk_drop(Drop(entries=[root, MemoryFile(".DS_Store", b"x")]))

    assert _paths(walked) == ["src/app.js"]


@pytest.mark.asyncio
async def test_hidden_entries_excluded_from_flat_source():
    files = [MemoryFileHandle(".hidden", b"x"), MemoryFileHandle("shown.js", b"x")]

    walked = await walk_drop(Drop(entries=None, files=files))

    assert _paths(walked) == ["shown.js"]


@pytest.mark.asyncio
async def test_zero_byte_files_excluded():
    root = MemoryDirectory("src", [MemoryFile("empty.js", b""), MemoryFile("full.js", b"x")])

    hier = await walk_drop(Drop(entries=[root]))
    flat = await walk_drop(Drop(files=[MemoryFileHandle("empty.js", b""), MemoryFileHandle("full.js", b"x")]))

    assert _paths(hier) == ["src/full.js"]
    assert _paths(flat) == ["full.js"]


@pytest.mark.asyncio
async def test_flat_fallback_uses_file_name_as_path():
    walked = await walk_drop(Drop(entries=None, files=[MemoryFileHandle("a.ts", b"1")]))
    assert _paths(walked) == ["a.ts"]


# ------------------------------------------------------------------
# Failures
# ------------------------------------------------------------------


class _BrokenDirectory(MemoryDirectory):
    def reader(self) -> DirectoryReader:
        class _Failing(DirectoryReader):
            async def read_entries(self) -> list[Entry]:
                raise PermissionError("denied")

        return _Failing()


@pytest.mark.asyncio
async def test_directory_read_failure_aborts():
    root = MemoryDirectory("ok", [MemoryFile("a.js", b"1"), _BrokenDirectory("locked", [])])

    with pytest.raises(IngestError) as exc_info:
        await walk_drop(Drop(entries=[root]))

    assert exc_info.value.path == "ok/locked"


@pytest.mark.asyncio
async def test_non_os_error_from_reader_becomes_ingest_error():
    class _Garbled(MemoryDirectory):
        def reader(self) -> DirectoryReader:
            class _Failing(DirectoryReader):
                async def read_entries(self) -> list[Entry]:
                    raise ValueError("bad listing")

            return _Failing()

    with pytest.raises(IngestError) as exc_info:
        await walk_drop(Drop(entries=[_Garbled("odd", [])]))

    assert exc_info.value.path == "odd"
    assert isinstance(exc_info.value.cause, ValueError)


@pytest.mark.asyncio
async def test_hidden_file_entry_never_resolved():
    class _Unresolvable(MemoryFile):
        async def file(self):
            raise FileNotFoundError("dangling")

    root = MemoryDirectory("src", [_Unresolvable(".#a.js", b""), MemoryFile("a.js", b"1")])

    walked = await walk_drop(Drop(entries=[root]))

    assert _paths(walked) == ["src/a.js"]


# ------------------------------------------------------------------
# Filesystem entries
# ------------------------------------------------------------------


@pytest.mark.asyncio
async def test_local_directory_walk(tmp_path: Path):
    root = tmp_path / "proj"
    (root / "src" / "nested").mkdir(parents=True)
    (root / "src" / "a.js").write_text("a")
    (root / "src" / "nested" / "b.jsx").write_text("b")
    (root / ".gitignore").write_text("x")
    (root / "empty.txt").write_text("")

    walked = await walk_drop(drop_from_paths([root]))

    assert sorted(_paths(walked)) == ["proj/src/a.js", "proj/src/nested/b.jsx"]


@pytest.mark.asyncio
async def test_local_flat_drop_ignores_directories(tmp_path: Path):
    (tmp_path / "d").mkdir()
    f = tmp_path / "one.js"
    f.write_text("1")

    walked = await walk_drop(drop_from_paths([tmp_path / "d", f], flat=True))

    assert _paths(walked) == ["one.js"]


@pytest.mark.asyncio
@pytest.mark.skipif(not hasattr(os, "symlink"), reason="symlinks unavailable")
async def test_local_dangling_hidden_symlink_is_skipped(tmp_path: Path):
    src = tmp_path / "src"
    src.mkdir()
    (src / "a.js").write_text("a")
    os.symlink("user@host.1234", src / ".#a.js")

    walked = await walk_drop(drop_from_paths([src]))

    assert _paths(walked) == ["src/a.js"]
