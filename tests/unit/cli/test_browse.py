"""Tests for the interactive browse loop."""

from __future__ import annotations

from pathlib import Path
from unittest.mock import patch

from fileshift.cli.browse import browse_loop
from fileshift.config import FileshiftConfig


def _keys(*keys: str):
    it = iter(keys)
    return lambda: next(it)


def test_quit_immediately(memory_persistence, tmp_path: Path) -> None:
    browse_loop(FileshiftConfig(), memory_persistence, tmp_path, _keys("q"), lambda label: "")


def test_r_downloads_single_file(memory_persistence, tmp_path: Path, make_record) -> None:
    memory_persistence.save_working_set([make_record("src/app.jsx", b"<App/>")])

    browse_loop(FileshiftConfig(), memory_persistence, tmp_path, _keys("r", "q"), lambda label: "")

    assert (tmp_path / "app.ts").read_bytes() == b"<App/>"


def test_r_without_files_does_nothing(memory_persistence, tmp_path: Path) -> None:
    browse_loop(FileshiftConfig(), memory_persistence, tmp_path, _keys("r", "q"), lambda label: "")
    assert list(tmp_path.iterdir()) == []


def test_x_clears_working_set(memory_persistence, tmp_path: Path, make_record) -> None:
    memory_persistence.save_working_set([make_record()])

    browse_loop(FileshiftConfig(), memory_persistence, tmp_path, _keys("x", "q"), lambda label: "")

    assert memory_persistence.load_working_set() == ()


def test_c_asks_question_typed_in_prompt(memory_persistence, tmp_path: Path) -> None:
    with patch("fileshift.cli.browse.ask") as ask:
        browse_loop(
            FileshiftConfig(), memory_persistence, tmp_path, _keys("c", "q"), lambda label: "rq typed"
        )

    ask.assert_called_once()
    assert ask.call_args.args[0] == "rq typed"


def test_c_with_blank_question_skips_chat(memory_persistence, tmp_path: Path) -> None:
    with patch("fileshift.cli.browse.ask") as ask:
        browse_loop(FileshiftConfig(), memory_persistence, tmp_path, _keys("c", "q"), lambda label: "  ")
    ask.assert_not_called()
