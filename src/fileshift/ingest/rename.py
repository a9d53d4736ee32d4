"""Extension rewriting for relative paths.

Only the final suffix of the leaf name changes; directory segments are kept
verbatim. Applying the same target twice yields the same path.
"""

from __future__ import annotations

import re

CONVERSION_OPTIONS: tuple[str, ...] = ("ts", "tsx", "js", "jsx", "json", "txt", "html", "css", "md")

_EXT_RE = re.compile(r"^[A-Za-z0-9_+\-]+$")


def rename_path(path: str, extension: str) -> str:
    """Return *path* with the leaf's final extension replaced by *extension*.

    >>> rename_path("src/components/Button.tsx", "ts")
    'src/components/Button.ts'
    >>> rename_path("Makefile", "txt")
    'Makefile.txt'
    """
    parts = path.split("/")
    leaf = parts.pop()
    base, dot, _ = leaf.rpartition(".")
    if not dot:
        base = leaf
    return "/".join(p for p in [*parts, f"{base}.{extension}"] if p)


def file_type(path: str) -> str:
    """Final extension of the leaf name, or ``"file"`` when it has none."""
    leaf = path.rsplit("/", 1)[-1]
    base, dot, ext = leaf.rpartition(".")
    if not dot or not ext:
        return "file"
    return ext


def leaf_name(path: str) -> str:
    return path.rsplit("/", 1)[-1] or path


def normalize_extension(token: str) -> str:
    """Strip a leading dot and validate an extension token.

    Raises:
        ValueError: If the token is empty or contains dots, separators or
            whitespace (an inner dot would break idempotent renaming).
    """
    ext = token.strip().lstrip(".")
    if not ext or not _EXT_RE.match(ext):
        raise ValueError(
            f"Invalid target extension {token!r}: use a single token such as 'ts' or 'md'."
        )
    return ext
