"""Zip archive and combined-text exports of the working set.

Bytes are written exactly as ingested; only their paths change.
"""

from __future__ import annotations

import io
import zipfile
from collections.abc import Sequence

from fileshift.ingest.rename import leaf_name
from fileshift.models import FileRecord

ARCHIVE_NAME = "converted-files.zip"
COMBINED_NAME = "combined-files.txt"
COMBINED_HEADER = "Generated by fileshift\n\n"


class ExportError(RuntimeError):
    """Raised when an export cannot be produced."""


def archive_path(record: FileRecord, preserve_folders: bool) -> str:
    return record.new_path if preserve_folders else leaf_name(record.new_path)


def build_archive(records: Sequence[FileRecord], preserve_folders: bool = True) -> bytes:
    """Return a zip containing every record at its renamed path.

    With *preserve_folders* off, entries are stored under their leaf name;
    when two records collide the later one wins.

    Raises:
        ExportError: If the archive cannot be written.
    """
    entries: dict[str, bytes] = {}
    for record in records:
        entries[archive_path(record, preserve_folders)] = record.content

    buf = io.BytesIO()
    try:
        with zipfile.ZipFile(buf, "w", compression=zipfile.ZIP_DEFLATED) as zf:
            for name, content in entries.items():
                zf.writestr(name, content)
    except (zipfile.BadZipFile, ValueError, OSError) as exc:
        raise ExportError(f"Error creating zip file: {exc}") from exc
    return buf.getvalue()


def combined_text(records: Sequence[FileRecord]) -> str:
    """One UTF-8 document with a marker-framed section per record."""
    sections = [COMBINED_HEADER]
    for record in records:
        content = record.content.decode("utf-8", errors="replace")
        sections.append(
            f"--- START OF FILE: {record.original_path} ---\n\n"
            f"{content}\n\n"
            f"--- END OF FILE: {record.original_path} ---\n\n"
        )
    return "".join(sections)
