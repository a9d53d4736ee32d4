"""fileshift convert — load files/folders and rename their extensions.

Every path may be a file or a directory; directories are walked recursively.
Hidden entries and empty files are skipped. If any file cannot be read the
whole batch is aborted and the previous working set is kept.

Usage:
  fileshift convert src/ README.md --to txt
  fileshift convert a.js b.js --flat
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn

from fileshift.cli.errors import err_bad_extension, err_path_not_found, err_read_failed
from fileshift.cli.files import files_table
from fileshift.cli.state import load_cli_config, open_state
from fileshift.ingest import IngestError, Ingestor, drop_from_paths, normalize_extension

console = Console()


def convert_cmd(
    paths: Annotated[
        list[Path],
        typer.Argument(help="Files or folders to load."),
    ],
    to: Annotated[
        str | None,
        typer.Option("--to", "-t", help="Target extension (e.g. ts, md). Defaults to the saved setting."),
    ] = None,
    flat: Annotated[
        bool,
        typer.Option("--flat", help="Ignore folder structure; load only the given files by name."),
    ] = False,
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
) -> None:
    """Load files or folders and rename every extension to the target."""
    cfg = load_cli_config()
    persistence = open_state(cfg, state)

    for p in paths:
        if not p.exists():
            console.print(err_path_not_found(str(p)))
            raise typer.Exit(1)

    token = to if to is not None else persistence.load_target_extension(cfg.convert.target_extension)
    try:
        extension = normalize_extension(token)
    except ValueError:
        console.print(err_bad_extension(token))
        raise typer.Exit(1)
    if to is not None:
        persistence.save_target_extension(extension)

    ingestor = Ingestor(
        persistence.load_working_set(),
        on_change=persistence.save_working_set,
    )

    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        transient=True,
        console=console,
    ) as prog:
        prog.add_task("Processing files…", total=None)
        try:
            records = asyncio.run(ingestor.ingest(drop_from_paths(paths, flat=flat), extension))
        except IngestError as exc:
            detail = str(exc.cause) if exc.cause is not None else str(exc)
            console.print(err_read_failed(exc.path, detail))
            raise typer.Exit(1)

    if not records:
        console.print("[yellow]No files found to convert.[/] Hidden and empty files are skipped.")
        raise typer.Exit(0)

    console.print(files_table(records))
    console.print(f"\n[green]✓[/] {len(records)} file(s) renamed to .{extension}")
