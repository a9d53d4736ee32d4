"""Tests for the JSON-file state store."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from fileshift.store import JsonFileStore, StatePersistence, StoreError
from fileshift.store.persistence import WORKING_SET_KEY


def test_missing_file_loads_none(state_path: Path):
    assert JsonFileStore(state_path).load("anything") is None


def test_save_creates_parent_dirs(tmp_path: Path):
    path = tmp_path / "nested" / "dir" / "state.json"
    store = JsonFileStore(path)

    store.save("k", "v")

    assert json.loads(path.read_text(encoding="utf-8")) == {"k": "v"}


def test_save_keeps_other_keys(state_path: Path):
    store = JsonFileStore(state_path)
    store.save("a", "1")
    store.save("b", "2")

    assert store.load("a") == "1"
    assert store.load("b") == "2"


def test_clear_removes_key_only(state_path: Path):
    store = JsonFileStore(state_path)
    store.save("a", "1")
    store.save("b", "2")

    store.clear("a")

    assert json.loads(state_path.read_text(encoding="utf-8")) == {"b": "2"}


def test_clear_missing_key_is_noop(state_path: Path):
    store = JsonFileStore(state_path)
    store.clear("nope")
    assert not state_path.exists()


def test_no_temp_files_left_behind(state_path: Path):
    store = JsonFileStore(state_path)
    store.save("a", "1")
    assert list(state_path.parent.glob("*.tmp")) == []


def test_corrupt_file_raises_store_error(state_path: Path):
    state_path.write_text("not json", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonFileStore(state_path).load("a")


def test_non_object_file_raises_store_error(state_path: Path):
    state_path.write_text("[1, 2]", encoding="utf-8")
    with pytest.raises(StoreError):
        JsonFileStore(state_path).load("a")


def test_persistence_on_corrupt_file_falls_back(state_path: Path, make_record):
    state_path.write_text("{{{", encoding="utf-8")
    p = StatePersistence(JsonFileStore(state_path))

    assert p.load_working_set() == ()
    p.save_working_set([make_record()])  # logged, not raised
    assert state_path.read_text(encoding="utf-8") == "{{{"


def test_clearing_working_set_removes_key_on_disk(file_persistence, state_path: Path, make_record):
    file_persistence.save_working_set([make_record()])
    assert WORKING_SET_KEY in json.loads(state_path.read_text(encoding="utf-8"))

    file_persistence.save_working_set([])

    assert WORKING_SET_KEY not in json.loads(state_path.read_text(encoding="utf-8"))
