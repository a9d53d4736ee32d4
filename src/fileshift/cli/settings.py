"""fileshift settings — remembered target extension and zip layout."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console

from fileshift.cli.errors import err_bad_extension, err_bad_folder_mode
from fileshift.cli.state import load_cli_config, open_state
from fileshift.ingest import CONVERSION_OPTIONS, normalize_extension

console = Console()

_FOLDER_MODES = {"keep": True, "flatten": False}


def settings_cmd(
    to: Annotated[
        str | None,
        typer.Option("--to", "-t", help="Default target extension."),
    ] = None,
    folders: Annotated[
        str | None,
        typer.Option("--folders", help="Zip layout: 'keep' folder structure or 'flatten'."),
    ] = None,
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
) -> None:
    """Show or change the remembered settings."""
    cfg = load_cli_config()
    persistence = open_state(cfg, state)

    if to is not None:
        try:
            persistence.save_target_extension(normalize_extension(to))
        except ValueError:
            console.print(err_bad_extension(to))
            raise typer.Exit(1)

    if folders is not None:
        if folders not in _FOLDER_MODES:
            console.print(err_bad_folder_mode(folders))
            raise typer.Exit(1)
        persistence.save_preserve_folders(_FOLDER_MODES[folders])

    ext = persistence.load_target_extension(cfg.convert.target_extension)
    preserve = persistence.load_preserve_folders(cfg.convert.preserve_folders)
    console.print(f"  Target extension:  [bold].{ext}[/]")
    console.print(f"  Zip layout:        [bold]{'keep folders' if preserve else 'flatten'}[/]")
    console.print(f"  [dim]Common targets: {' '.join('.' + o for o in CONVERSION_OPTIONS)}[/]")
