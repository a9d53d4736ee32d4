"""fileshift list / clear — inspect or drop the working set."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.table import Table

from fileshift.cli.errors import err_no_files
from fileshift.cli.state import load_cli_config, open_state
from fileshift.models import FileRecord

console = Console()

_TYPE_STYLES = {
    "tsx": "blue",
    "jsx": "blue",
    "ts": "cyan",
    "js": "cyan",
    "json": "yellow",
    "html": "dark_orange",
    "css": "medium_purple",
}


def _styled(path: str, file_type: str) -> str:
    style = _TYPE_STYLES.get(file_type, "white")
    return f"[{style}]{path}[/]"


def files_table(records: tuple[FileRecord, ...] | list[FileRecord]) -> Table:
    table = Table(title="Working Set", show_header=True, header_style="bold")
    table.add_column("Original")
    table.add_column("→", justify="center", style="dim")
    table.add_column("Renamed", style="bold")
    table.add_column("Size", justify="right")
    for r in records:
        table.add_row(
            _styled(r.original_path, r.original_type),
            "→",
            _styled(r.new_path, r.new_type),
            f"{len(r.content):,} B",
        )
    return table


def list_cmd(
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
) -> None:
    """Show the files currently loaded and their renamed paths."""
    persistence = open_state(load_cli_config(), state)
    records = persistence.load_working_set()

    if not records:
        console.print(err_no_files())
        raise typer.Exit(0)

    console.print(files_table(records))
    console.print(f"\n  {len(records)} file(s)")


def clear_cmd(
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Skip confirmation prompt."),
    ] = False,
) -> None:
    """Remove every file from the working set."""
    persistence = open_state(load_cli_config(), state)
    records = persistence.load_working_set()

    if not records:
        console.print("[dim]Working set is already empty.[/]")
        raise typer.Exit(0)

    if not yes:
        if not typer.confirm(f"Clear {len(records)} file(s)?", default=False):
            console.print("[dim]Cancelled.[/]")
            raise typer.Exit(0)

    persistence.save_working_set(())
    console.print(f"[green]✓[/] Cleared {len(records)} file(s)")
