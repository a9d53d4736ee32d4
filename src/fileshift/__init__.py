"""fileshift — bulk extension renaming, export, and file-aware LLM chat."""

__version__ = "0.1.0"
