"""Single-key shortcuts for the interactive browse screen."""

from __future__ import annotations

DOWNLOAD_ALL = "download_all"
CHAT = "chat"
CLEAR = "clear"
QUIT = "quit"

# Focus kinds in which keystrokes are text, never shortcuts.
TEXT_FOCUS: frozenset[str] = frozenset({"input", "textarea", "select"})

_KEYMAP = {"c": CHAT, "x": CLEAR, "q": QUIT}


def resolve_shortcut(key: str, focus: str | None, file_count: int) -> str | None:
    """Map *key* to an action name, or None.

    ``r``/``R`` downloads everything and only applies when files are loaded.
    Nothing triggers while *focus* is a text control.
    """
    if focus is not None and focus.lower() in TEXT_FOCUS:
        return None
    if key in ("r", "R"):
        return DOWNLOAD_ALL if file_count > 0 else None
    return _KEYMAP.get(key.lower())
