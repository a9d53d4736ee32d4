"""fileshift chat / history — ask the model about the loaded files.

The answer streams to the terminal as it arrives and is saved with the rest
of the conversation. Transport or server errors become a single apologetic
model message; the conversation remains usable.

Usage:
  fileshift chat "What does Button.tsx export?"
  fileshift chat "What is in this screenshot?" --image shot.png
  fileshift history --clear
"""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markdown import Markdown
from rich.panel import Panel

from fileshift.chat import Conversation, ImageAttachment, RemoteModelClient, send_message
from fileshift.chat.stream import ERROR_PREFIX
from fileshift.cli.errors import err_empty_question, err_image
from fileshift.cli.state import load_cli_config, open_state
from fileshift.config import FileshiftConfig
from fileshift.models import ChatMessage
from fileshift.store import StatePersistence

console = Console()


def ask(
    question: str,
    cfg: FileshiftConfig,
    persistence: StatePersistence,
    image: ImageAttachment | None = None,
    endpoint: str | None = None,
) -> ChatMessage | None:
    """One chat round against the configured endpoint; persists the history."""
    conversation = Conversation(persistence.load_chat())
    records = persistence.load_working_set()
    client = RemoteModelClient(endpoint or cfg.chat.endpoint, timeout=cfg.chat.timeout)

    if records:
        console.print(f"[dim]Context: {len(records)} file(s)[/]")

    def _echo(text: str) -> None:
        console.out(text, end="", highlight=False)

    try:
        reply = asyncio.run(
            send_message(conversation, question, records, client, image=image, on_update=_echo)
        )
    finally:
        persistence.save_chat(conversation.messages)

    console.out("")
    if reply is not None and reply.text.startswith(ERROR_PREFIX):
        console.print(reply.text, style="red", markup=False)
    return reply


def chat_cmd(
    question: Annotated[
        str,
        typer.Argument(help="Question about the loaded files."),
    ] = "",
    image: Annotated[
        Path | None,
        typer.Option("--image", "-i", help="Attach an image to the question."),
    ] = None,
    endpoint: Annotated[
        str | None,
        typer.Option("--endpoint", help="Override the chat endpoint URL."),
    ] = None,
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
) -> None:
    """Ask a question; the loaded files are sent along as context."""
    cfg = load_cli_config()
    persistence = open_state(cfg, state)

    attachment = None
    if image is not None:
        try:
            attachment = ImageAttachment.from_path(image)
        except (OSError, ValueError) as exc:
            console.print(err_image(str(image), str(exc)))
            raise typer.Exit(1)

    if not question.strip() and attachment is None:
        console.print(err_empty_question())
        raise typer.Exit(1)

    ask(question, cfg, persistence, image=attachment, endpoint=endpoint)


def history_cmd(
    clear: Annotated[
        bool,
        typer.Option("--clear", help="Delete the saved conversation."),
    ] = False,
    state: Annotated[
        Path | None,
        typer.Option("--state", help="Path to the state file (default from config)."),
    ] = None,
) -> None:
    """Show (or clear) the saved conversation."""
    persistence = open_state(load_cli_config(), state)

    if clear:
        persistence.save_chat([])
        console.print("[green]✓[/] Chat history cleared")
        return

    messages = persistence.load_chat()
    if not messages:
        console.print("[dim]No messages yet.[/]  Run:  fileshift chat \"<question>\"")
        return

    for msg in messages:
        title = "[bold blue]You[/]" if msg.role == "user" else "[bold cyan]Model[/]"
        body = Markdown(msg.text) if msg.text else "[dim](image only)[/]"
        subtitle = "[dim]image attached[/]" if msg.image else None
        console.print(Panel(body, title=title, subtitle=subtitle, title_align="left", expand=False))
