"""fileshift state store — injectable key-value persistence."""

from fileshift.store.base import MemoryStore, StateStore, StoreError
from fileshift.store.json_store import JsonFileStore
from fileshift.store.persistence import StatePersistence

__all__ = ["JsonFileStore", "MemoryStore", "StatePersistence", "StateStore", "StoreError"]
