"""Writing exports to disk.

Relative targets must stay under the working directory; absolute targets
are taken as given. Existing files are only replaced after confirmation,
and every write lands through a sibling temp file so a crash never leaves a
truncated archive behind.
"""

from __future__ import annotations

import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

import typer

from fileshift.export.archive import ARCHIVE_NAME, build_archive
from fileshift.ingest.rename import leaf_name
from fileshift.models import FileRecord


# ------------------------------------------------------------------
# Target paths
# ------------------------------------------------------------------


def validate_output_path(output: str, allowed_base: Path | None = None) -> Path:
    """Resolve *output*, refusing relative paths that climb out of *allowed_base*.

    Raises:
        ValueError: On path traversal (e.g. ``../archive.zip``).
    """
    target = Path(output)
    if target.is_absolute():
        return target.resolve()

    base = (allowed_base or Path.cwd()).resolve()
    resolved = (base / target).resolve()
    if not resolved.is_relative_to(base):
        raise ValueError(
            f"'{output}' points outside '{base}'; path traversal is not permitted."
        )
    return resolved


def check_overwrite(path: Path, yes: bool) -> bool:
    """False only when *path* exists and the user declines to replace it."""
    if not path.exists() or yes:
        return True
    return typer.confirm(f"  {path.name} already exists. Replace it?", default=False)


def write_output(path: Path, content: bytes) -> None:
    """Atomically replace *path* with *content*, creating parent dirs."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    tmp = Path(tmp_name)
    try:
        with os.fdopen(fd, "wb") as fh:
            fh.write(content)
        tmp.replace(path)
    except BaseException:
        tmp.unlink(missing_ok=True)
        raise


# ------------------------------------------------------------------
# Download all
# ------------------------------------------------------------------


def download_target(records: Sequence[FileRecord], out_dir: Path) -> Path | None:
    """Where ``download_all`` would write, or None for an empty set."""
    if not records:
        return None
    if len(records) == 1:
        return out_dir / (leaf_name(records[0].new_path) or "downloaded-file")
    return out_dir / ARCHIVE_NAME


def download_all(
    records: Sequence[FileRecord],
    out_dir: Path,
    preserve_folders: bool = True,
) -> Path | None:
    """Write the working set to *out_dir* and return the written path.

    Raises:
        ExportError: If the archive cannot be built.
    """
    target = download_target(records, out_dir)
    if target is None:
        return None
    if len(records) == 1:
        write_output(target, records[0].content)
    else:
        write_output(target, build_archive(records, preserve_folders))
    return target
