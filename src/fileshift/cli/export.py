"""fileshift export / download — write the working set to disk.

Commands:
  fileshift export zip   — every file at its renamed path inside one zip
  fileshift export txt   — one text document with a framed section per file
  fileshift download     — one file as-is, or a zip when there are several
"""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from fileshift.cli.errors import err_export_failed, err_no_files, err_output_path_unsafe
from fileshift.cli.state import load_cli_config, open_state
from fileshift.export import ExportError, build_archive, combined_text, download_all
from fileshift.export.archive import ARCHIVE_NAME, COMBINED_NAME
from fileshift.export.writer import check_overwrite, download_target, validate_output_path, write_output
from fileshift.models import WorkingSet
from fileshift.store import StatePersistence

console = Console()

export_app = typer.Typer(
    name="export",
    help="Export the working set (zip, txt).",
    add_completion=False,
)

_StateOpt = Annotated[
    Path | None,
    typer.Option("--state", help="Path to the state file (default from config)."),
]
_YesOpt = Annotated[
    bool,
    typer.Option("--yes", "-y", help="Overwrite existing files without asking."),
]


def _resolve_output(output: str) -> Path:
    try:
        return validate_output_path(output)
    except ValueError:
        console.print(err_output_path_unsafe(output))
        raise typer.Exit(1)


def _load_records(persistence: StatePersistence) -> WorkingSet:
    records = persistence.load_working_set()
    if not records:
        console.print(err_no_files())
        raise typer.Exit(0)
    return records


@export_app.command("zip")
def export_zip_cmd(
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Archive path."),
    ] = ARCHIVE_NAME,
    flatten: Annotated[
        bool,
        typer.Option("--flatten", help="Store files by name only, dropping their folders."),
    ] = False,
    state: _StateOpt = None,
    yes: _YesOpt = False,
) -> None:
    """Write every file, renamed, into a zip archive."""
    cfg = load_cli_config()
    persistence = open_state(cfg, state)
    records = _load_records(persistence)

    preserve = not flatten and persistence.load_preserve_folders(cfg.convert.preserve_folders)
    target = _resolve_output(output)
    if not check_overwrite(target, yes):
        console.print("[dim]Skipped.[/]")
        raise typer.Exit(0)

    try:
        write_output(target, build_archive(records, preserve_folders=preserve))
    except ExportError as exc:
        console.print(err_export_failed(str(exc)))
        raise typer.Exit(1)

    layout = "with folders" if preserve else "flattened"
    console.print(f"[green]✓[/] {len(records)} file(s) → {target} ({layout})")


@export_app.command("txt")
def export_txt_cmd(
    output: Annotated[
        str,
        typer.Option("--output", "-o", help="Text file path."),
    ] = COMBINED_NAME,
    state: _StateOpt = None,
    yes: _YesOpt = False,
) -> None:
    """Write every file into one combined UTF-8 text document."""
    persistence = open_state(load_cli_config(), state)
    records = _load_records(persistence)

    target = _resolve_output(output)
    if not check_overwrite(target, yes):
        console.print("[dim]Skipped.[/]")
        raise typer.Exit(0)

    write_output(target, combined_text(records).encode("utf-8"))
    console.print(f"[green]✓[/] {len(records)} file(s) → {target}")


def download_cmd(
    out_dir: Annotated[
        Path,
        typer.Option("--out-dir", "-d", help="Directory to write into."),
    ] = Path("."),
    state: _StateOpt = None,
    yes: _YesOpt = False,
) -> None:
    """Download everything: the file itself if there is one, else a zip."""
    cfg = load_cli_config()
    persistence = open_state(cfg, state)
    records = _load_records(persistence)

    run_download(records, out_dir, persistence.load_preserve_folders(cfg.convert.preserve_folders), yes)


def run_download(records: WorkingSet, out_dir: Path, preserve: bool, yes: bool) -> Path | None:
    """Shared by ``download`` and the browse screen's shortcut."""
    directory = _resolve_output(str(out_dir))
    target = download_target(records, directory)
    if target is None:
        console.print(err_no_files())
        return None
    if not check_overwrite(target, yes):
        console.print("[dim]Skipped.[/]")
        return None
    try:
        written = download_all(records, directory, preserve_folders=preserve)
    except ExportError as exc:
        console.print(err_export_failed(str(exc)))
        raise typer.Exit(1)
    console.print(f"[green]✓[/] Downloaded → {written}")
    return written
