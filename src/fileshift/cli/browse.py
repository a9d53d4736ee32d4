"""fileshift browse — interactive screen over the working set.

Keys:
  r  download all (single file as-is, several as a zip)
  c  ask a question about the files
  x  clear the working set
  q  quit
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Annotated

import click
import typer
from rich.console import Console

from fileshift.cli.chat import ask
from fileshift.cli.export import run_download
from fileshift.cli.files import files_table
from fileshift.cli.shortcuts import CHAT, CLEAR, DOWNLOAD_ALL, QUIT, resolve_shortcut
from fileshift.cli.state import load_cli_config, open_state
from fileshift.config import FileshiftConfig
from fileshift.store import StatePersistence

console = Console()

_HELP = "[dim]\\[r] download all   \\[c] chat   \\[x] clear   \\[q] quit[/]"


def browse_loop(
    cfg: FileshiftConfig,
    persistence: StatePersistence,
    out_dir: Path,
    read_key: Callable[[], str],
    read_line: Callable[[str], str],
) -> None:
    """Run the key loop until ``q``; input callables are injected for tests."""
    while True:
        records = persistence.load_working_set()
        if records:
            console.print(files_table(records))
        else:
            console.print("[dim]No files loaded.[/]  Run:  fileshift convert <path>...")
        console.print(_HELP)

        action = resolve_shortcut(read_key(), focus=None, file_count=len(records))
        if action == QUIT:
            return
        if action == DOWNLOAD_ALL:
            run_download(
                records,
                out_dir,
                persistence.load_preserve_folders(cfg.convert.preserve_folders),
                yes=False,
            )
        elif action == CLEAR:
            persistence.save_working_set(())
            console.print("[green]✓[/] Cleared")
        elif action == CHAT:
            # Focus moves to a text input: keystrokes are text until Enter.
            question = read_line("Ask about your files")
            if question.strip():
                ask(question, cfg, persistence)


def browse_cmd(
    out_dir: Annotated[
        Path,
        typer.Option("--out-dir", "-d", help="Where downloads are written."),
    ] = Path("."),
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
) -> None:
    """Interactive view with single-key shortcuts (press r to download all)."""
    cfg = load_cli_config()
    persistence = open_state(cfg, state)
    browse_loop(
        cfg,
        persistence,
        out_dir,
        read_key=click.getchar,
        read_line=lambda label: typer.prompt(label, default="", show_default=False),
    )
