"""Key-value state store interface and an in-memory implementation."""

from __future__ import annotations

from abc import ABC, abstractmethod


class StoreError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


class StateStore(ABC):
    """String key → string value store (a local-storage equivalent)."""

    @abstractmethod
    def load(self, key: str) -> str | None:
        """Return the value stored under *key*, or ``None``."""

    @abstractmethod
    def save(self, key: str, value: str) -> None:
        """Store *value* under *key*, replacing any previous value."""

    @abstractmethod
    def clear(self, key: str) -> None:
        """Remove *key*; a missing key is not an error."""


class MemoryStore(StateStore):
    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.data: dict[str, str] = dict(initial or {})

    def load(self, key: str) -> str | None:
        return self.data.get(key)

    def save(self, key: str, value: str) -> None:
        self.data[key] = value

    def clear(self, key: str) -> None:
        self.data.pop(key, None)
