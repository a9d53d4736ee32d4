"""fileshift serve — run the streaming chat relay.

Starts a FastAPI app on uvicorn exposing ``POST /api/chat``. The model's API
key is read from the environment (e.g. GEMINI_API_KEY, OPENAI_API_KEY).
"""

from __future__ import annotations

from typing import Annotated

import typer
from rich.console import Console

from fileshift.cli.errors import err_no_api_key
from fileshift.cli.state import load_cli_config

console = Console()


def serve_cmd(
    host: Annotated[
        str | None,
        typer.Option("--host", help="Interface to bind (default from config)."),
    ] = None,
    port: Annotated[
        int | None,
        typer.Option("--port", help="Port to listen on (default from config)."),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="LiteLLM model string, e.g. openai/gpt-4o-mini."),
    ] = None,
) -> None:
    """Serve the chat relay endpoint."""
    import uvicorn

    from fileshift.chat import llm_client
    from fileshift.chat.relay import create_app

    cfg = load_cli_config()
    model_name = model or cfg.server.model

    try:
        llm_client.validate_api_key(model_name)
    except EnvironmentError:
        provider = model_name.split("/")[0] if "/" in model_name else "openai"
        console.print(err_no_api_key(provider))
        raise typer.Exit(1)

    bind_host = host or cfg.server.host
    bind_port = port or cfg.server.port
    console.print(f"[bold]fileshift relay[/] → http://{bind_host}:{bind_port}/api/chat  ({model_name})")
    uvicorn.run(create_app(model_name), host=bind_host, port=bind_port, log_level="info")
