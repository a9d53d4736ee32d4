"""Tests for the output writer and download-all."""

from __future__ import annotations

import io
import zipfile
from pathlib import Path
from unittest.mock import patch

import pytest

from fileshift.export.archive import ARCHIVE_NAME
from fileshift.export.writer import (
    check_overwrite,
    download_all,
    download_target,
    validate_output_path,
    write_output,
)


# ------------------------------------------------------------------
# validate_output_path
# ------------------------------------------------------------------


def test_validate_relative_path_inside_base(tmp_path: Path):
    assert validate_output_path("out/files.zip", tmp_path) == (tmp_path / "out" / "files.zip").resolve()


def test_validate_traversal_rejected(tmp_path: Path):
    with pytest.raises(ValueError, match="traversal"):
        validate_output_path("../escape.zip", tmp_path)


def test_validate_absolute_path_accepted(tmp_path: Path):
    target = tmp_path / "abs.zip"
    assert validate_output_path(str(target)) == target.resolve()


# ------------------------------------------------------------------
# check_overwrite / write_output
# ------------------------------------------------------------------


def test_check_overwrite_missing_file(tmp_path: Path):
    assert check_overwrite(tmp_path / "new.zip", yes=False) is True


def test_check_overwrite_yes_skips_prompt(tmp_path: Path):
    existing = tmp_path / "x.zip"
    existing.write_bytes(b"")
    with patch("fileshift.export.writer.typer.confirm") as confirm:
        assert check_overwrite(existing, yes=True) is True
    confirm.assert_not_called()


def test_check_overwrite_prompts_when_exists(tmp_path: Path):
    existing = tmp_path / "x.zip"
    existing.write_bytes(b"")
    with patch("fileshift.export.writer.typer.confirm", return_value=False):
        assert check_overwrite(existing, yes=False) is False


def test_write_output_creates_parents(tmp_path: Path):
    target = tmp_path / "a" / "b" / "out.bin"
    write_output(target, b"\x00data")
    assert target.read_bytes() == b"\x00data"
    assert list(target.parent.glob("*.tmp")) == []


# ------------------------------------------------------------------
# download_all
# ------------------------------------------------------------------


def test_download_empty_set_writes_nothing(tmp_path: Path):
    assert download_all([], tmp_path) is None
    assert list(tmp_path.iterdir()) == []


def test_download_single_record_uses_new_leaf_name(tmp_path: Path, make_record):
    written = download_all([make_record("src/deep/app.jsx", b"<App/>")], tmp_path)

    assert written == tmp_path / "app.ts"
    assert written.read_bytes() == b"<App/>"


def test_download_many_records_writes_zip(tmp_path: Path, make_record):
    records = [make_record("src/a.js", b"A"), make_record("b.js", b"B")]

    written = download_all(records, tmp_path)

    assert written == tmp_path / ARCHIVE_NAME
    with zipfile.ZipFile(io.BytesIO(written.read_bytes())) as zf:
        assert sorted(zf.namelist()) == ["b.ts", "src/a.ts"]


def test_download_many_records_flattened(tmp_path: Path, make_record):
    records = [make_record("src/a.js", b"A"), make_record("lib/b.js", b"B")]

    written = download_all(records, tmp_path, preserve_folders=False)

    with zipfile.ZipFile(io.BytesIO(written.read_bytes())) as zf:
        assert sorted(zf.namelist()) == ["a.ts", "b.ts"]


def test_download_target_matches_download_all(tmp_path: Path, make_record):
    one = [make_record("x.js")]
    assert download_target(one, tmp_path) == tmp_path / "x.ts"
    assert download_target(one * 2, tmp_path) == tmp_path / ARCHIVE_NAME
    assert download_target([], tmp_path) is None


def test_write_output_failure_keeps_existing_file(tmp_path: Path):
    target = tmp_path / "out.zip"
    target.write_bytes(b"old")

    with patch("fileshift.export.writer.os.fdopen", side_effect=OSError("disk full")):
        with pytest.raises(OSError):
            write_output(target, b"new")

    assert target.read_bytes() == b"old"
    assert [p.name for p in tmp_path.iterdir()] == ["out.zip"]
