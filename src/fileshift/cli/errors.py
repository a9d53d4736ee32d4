"""fileshift rich error messages — actionable feedback.

Every error shown to the user must contain:
  1. What went wrong (clear cause)
  2. The exact action the user should take to fix it

Usage:
    from fileshift.cli.errors import err_no_files
    console.print(err_no_files())
    raise typer.Exit(1)
"""

from __future__ import annotations


def err_no_files() -> str:
    """Working set is empty."""
    return (
        "[yellow]No files loaded.[/]\n"
        "  Run:  fileshift convert <path>..."
    )


def err_path_not_found(path: str) -> str:
    return (
        f"[red]Error:[/] Path not found: '{path}'\n"
        "  Check the path and try again."
    )


def err_read_failed(path: str, detail: str) -> str:
    """A file or directory could not be read; the whole batch was aborted."""
    return (
        f"[red]Error:[/] An error occurred while reading file: '{path}'.\n"
        f"  {detail}\n"
        "  Nothing was converted. Fix permissions or remove the file, then retry."
    )


def err_bad_extension(token: str) -> str:
    return (
        f"[red]Error:[/] Invalid target extension: '{token}'\n"
        "  Use a single token without dots, e.g.  --to ts"
    )


def err_bad_folder_mode(mode: str) -> str:
    return (
        f"[red]Error:[/] Unknown folder mode: '{mode}'\n"
        "  Use:  --folders keep  or  --folders flatten"
    )


def err_config(detail: str) -> str:
    return (
        f"[red]Error:[/] Invalid configuration.\n"
        f"  {detail}"
    )


def err_output_path_unsafe(path: str) -> str:
    """--output path fails security validation."""
    return (
        f"[red]Error:[/] Output path is not allowed: '{path}'\n"
        "  Use a path within the current working directory."
    )


def err_export_failed(detail: str) -> str:
    return (
        f"[red]Error:[/] Error creating export.\n"
        f"  {detail}"
    )


def err_image(path: str, detail: str) -> str:
    return (
        f"[red]Error:[/] Cannot attach image '{path}'.\n"
        f"  {detail}\n"
        "  Attach a readable .png, .jpg, .gif or .webp file."
    )


def err_empty_question() -> str:
    return (
        "[red]Error:[/] Nothing to send.\n"
        "  Provide a question, or attach an image with --image."
    )


def err_no_api_key(provider: str) -> str:
    """No API key for *provider* on the relay side."""
    env_var = "GEMINI_API_KEY" if provider.lower() == "gemini" else f"{provider.upper()}_API_KEY"
    return (
        f"[red]Error:[/] No API key for '{provider}'.\n"
        f"  Set:  export {env_var}=..."
    )
