"""Tests for zip and combined-text exports."""

from __future__ import annotations

import io
import zipfile

from fileshift.export.archive import COMBINED_HEADER, build_archive, combined_text


def _entries(data: bytes) -> dict[str, bytes]:
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        return {name: zf.read(name) for name in zf.namelist()}


# ------------------------------------------------------------------
# build_archive
# ------------------------------------------------------------------


def test_archive_preserves_folders_and_bytes(make_record):
    records = [make_record("src/a.js", b"\x00\x01binary"), make_record("src/ui/b.jsx", b"B")]

    entries = _entries(build_archive(records))

    assert entries == {"src/a.ts": b"\x00\x01binary", "src/ui/b.ts": b"B"}


def test_archive_flattened_uses_leaf_names(make_record):
    records = [make_record("src/a.js", b"A"), make_record("lib/deep/b.js", b"B")]

    entries = _entries(build_archive(records, preserve_folders=False))

    assert entries == {"a.ts": b"A", "b.ts": b"B"}


def test_flattened_collision_later_record_wins(make_record):
    records = [make_record("one/index.js", b"first"), make_record("two/index.js", b"second")]

    entries = _entries(build_archive(records, preserve_folders=False))

    assert entries == {"index.ts": b"second"}


def test_archive_is_deflated(make_record):
    data = build_archive([make_record("a.js", b"x" * 1000)])
    with zipfile.ZipFile(io.BytesIO(data)) as zf:
        assert zf.infolist()[0].compress_type == zipfile.ZIP_DEFLATED


def test_empty_archive_is_valid():
    assert _entries(build_archive([])) == {}


# ------------------------------------------------------------------
# combined_text
# ------------------------------------------------------------------


def test_combined_text_sections_use_original_paths(make_record):
    records = [make_record("src/a.js", b"alpha"), make_record("b.css", b"beta")]

    text = combined_text(records)

    assert text.startswith(COMBINED_HEADER)
    assert (
        "--- START OF FILE: src/a.js ---\n\nalpha\n\n--- END OF FILE: src/a.js ---\n\n"
        "--- START OF FILE: b.css ---\n\nbeta\n\n--- END OF FILE: b.css ---\n\n"
    ) in text
    assert "a.ts" not in text


def test_combined_text_replaces_invalid_utf8(make_record):
    text = combined_text([make_record("x.bin", b"ok\xffok")])
    assert "ok�ok" in text


def test_combined_text_empty_is_header_only():
    assert combined_text([]) == COMBINED_HEADER
