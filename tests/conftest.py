"""Shared pytest fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest

from fileshift.ingest.rename import file_type, rename_path
from fileshift.models import FileRecord
from fileshift.store import JsonFileStore, MemoryStore, StatePersistence


def _make_record(path: str = "src/a.js", content: bytes = b"A", ext: str = "ts") -> FileRecord:
    return FileRecord(
        id=f"{path}-0-{len(content)}",
        original_path=path,
        new_path=rename_path(path, ext),
        content=content,
        original_type=file_type(path),
        new_type=ext,
    )


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep FILESHIFT_* overrides and ~/.fileshift/config.yaml out of tests."""
    for var in ("FILESHIFT_ENDPOINT", "FILESHIFT_MODEL", "FILESHIFT_STATE"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setattr("fileshift.config._GLOBAL_CONFIG_PATH", tmp_path / "no-global" / "config.yaml")


@pytest.fixture
def make_record():
    """Factory for FileRecords renamed the same way ingestion does."""
    return _make_record


@pytest.fixture
def memory_persistence() -> StatePersistence:
    return StatePersistence(MemoryStore())


@pytest.fixture
def state_path(tmp_path: Path) -> Path:
    """Path to a not-yet-created state file in tmp_path."""
    return tmp_path / "state.json"


@pytest.fixture
def file_persistence(state_path: Path) -> StatePersistence:
    return StatePersistence(JsonFileStore(state_path))
