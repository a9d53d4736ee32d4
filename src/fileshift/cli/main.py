"""fileshift CLI entry point."""

from __future__ import annotations

import importlib.metadata
import logging
from typing import Annotated

import typer
from rich.logging import RichHandler

from fileshift.cli.browse import browse_cmd
from fileshift.cli.chat import chat_cmd, history_cmd
from fileshift.cli.convert import convert_cmd
from fileshift.cli.export import download_cmd, export_app
from fileshift.cli.files import clear_cmd, list_cmd
from fileshift.cli.serve import serve_cmd
from fileshift.cli.settings import settings_cmd


def _version() -> str:
    try:
        return importlib.metadata.version("fileshift")
    except importlib.metadata.PackageNotFoundError:
        return "dev"


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(f"fileshift {_version()}")
        raise typer.Exit()


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(show_path=False, rich_tracebacks=False)],
        force=True,
    )


app = typer.Typer(
    name="fileshift",
    help=(
        "fileshift — bulk-rename file extensions and ask an LLM about them.\n\n"
        "  fileshift convert  Load files/folders and rename their extensions.\n"
        "  fileshift chat     Ask a question with the loaded files as context."
    ),
    add_completion=False,
)


@app.callback()
def main_callback(
    version: Annotated[
        bool,
        typer.Option(
            "--version",
            callback=_version_callback,
            is_eager=True,
            help="Show version and exit.",
        ),
    ] = False,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Show debug logging."),
    ] = False,
) -> None:
    """fileshift — bulk-rename file extensions and ask an LLM about them."""
    _configure_logging(verbose)


app.command("convert")(convert_cmd)
app.command("list")(list_cmd)
app.command("clear")(clear_cmd)
app.command("download")(download_cmd)
app.command("chat")(chat_cmd)
app.command("history")(history_cmd)
app.command("settings")(settings_cmd)
app.command("serve")(serve_cmd)
app.command("browse")(browse_cmd)
app.add_typer(export_app, name="export")


@app.command("version")
def version_cmd() -> None:
    """Show the installed fileshift version."""
    typer.echo(f"fileshift {_version()}")


if __name__ == "__main__":
    app()
