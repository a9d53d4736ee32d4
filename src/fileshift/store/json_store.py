"""JSON-file backed state store.

All keys live in a single JSON object on disk. Every write rewrites the
whole file atomically (temp file in the same directory → ``os.replace``),
so a crash leaves either the old or the new document, never a torn one.
"""

from __future__ import annotations

import json
import os
import tempfile
from pathlib import Path

from fileshift.store.base import StateStore, StoreError


class JsonFileStore(StateStore):
    def __init__(self, path: Path) -> None:
        self.path = path

    def _read(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as exc:
            raise StoreError(f"Cannot read state file '{self.path}': {exc}") from exc
        if not isinstance(data, dict):
            raise StoreError(f"State file '{self.path}' does not contain a JSON object")
        return data

    def _write(self, data: dict[str, str]) -> None:
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, suffix=".tmp")
        except OSError as exc:
            raise StoreError(f"Cannot write state file '{self.path}': {exc}") from exc
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f)
            os.replace(tmp_path, self.path)
        except OSError as exc:
            try:
                os.unlink(tmp_path)
            except OSError:
                pass
            raise StoreError(f"Cannot write state file '{self.path}': {exc}") from exc

    def load(self, key: str) -> str | None:
        value = self._read().get(key)
        return value if isinstance(value, str) else None

    def save(self, key: str, value: str) -> None:
        data = self._read()
        data[key] = value
        self._write(data)

    def clear(self, key: str) -> None:
        data = self._read()
        if key in data:
            del data[key]
            self._write(data)
