"""Shared CLI plumbing: config loading and the persistent state store."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from fileshift.cli.errors import err_config
from fileshift.config import ConfigError, FileshiftConfig, load_config
from fileshift.store import JsonFileStore, StatePersistence

console = Console()


def load_cli_config() -> FileshiftConfig:
    try:
        return load_config()
    except ConfigError as exc:
        console.print(err_config(str(exc)))
        raise typer.Exit(1)


def open_state(cfg: FileshiftConfig, state: Path | None = None) -> StatePersistence:
    path = state if state is not None else Path(cfg.state.path)
    return StatePersistence(JsonFileStore(path))
