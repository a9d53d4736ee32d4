"""Best-effort persistence of the working set, chat history and settings.

Every saver swallows and logs failures; every loader falls back to empty
state or the caller's default. Empty collections are never stored: their key
is removed instead. There is no schema version and no migration.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from collections.abc import Iterable

from fileshift.models import ChatMessage, FileRecord, WorkingSet
from fileshift.store.base import StateStore, StoreError

logger = logging.getLogger(__name__)

WORKING_SET_KEY = "working_set"
CHAT_HISTORY_KEY = "chat_history"
TARGET_EXTENSION_KEY = "target_extension"
PRESERVE_FOLDERS_KEY = "preserve_folders"

_LOAD_ERRORS = (StoreError, ValueError, KeyError, TypeError, binascii.Error)


def record_to_dict(record: FileRecord) -> dict:
    return {
        "id": record.id,
        "originalPath": record.original_path,
        "newPath": record.new_path,
        "content": base64.b64encode(record.content).decode("ascii"),
        "originalType": record.original_type,
        "newType": record.new_type,
    }


def record_from_dict(data: dict) -> FileRecord:
    return FileRecord(
        id=str(data["id"]),
        original_path=str(data["originalPath"]),
        new_path=str(data["newPath"]),
        content=base64.b64decode(data["content"], validate=True),
        original_type=str(data["originalType"]),
        new_type=str(data["newType"]),
    )


class StatePersistence:
    """Reads and writes application state through an injected ``StateStore``."""

    def __init__(self, store: StateStore) -> None:
        self.store = store

    # ---- working set ----

    def save_working_set(self, records: Iterable[FileRecord]) -> None:
        records = list(records)
        try:
            if not records:
                self.store.clear(WORKING_SET_KEY)
                return
            payload = json.dumps([record_to_dict(r) for r in records])
            self.store.save(WORKING_SET_KEY, payload)
        except StoreError as exc:
            logger.error("Could not save working set: %s", exc)

    def load_working_set(self) -> WorkingSet:
        try:
            raw = self.store.load(WORKING_SET_KEY)
            if not raw:
                return ()
            return tuple(record_from_dict(item) for item in json.loads(raw))
        except _LOAD_ERRORS as exc:
            logger.error("Could not load working set: %s", exc)
            return ()

    # ---- chat history ----

    def save_chat(self, messages: Iterable[ChatMessage]) -> None:
        messages = list(messages)
        try:
            if not messages:
                self.store.clear(CHAT_HISTORY_KEY)
                return
            self.store.save(CHAT_HISTORY_KEY, json.dumps([m.to_dict() for m in messages]))
        except StoreError as exc:
            logger.error("Could not save chat history: %s", exc)

    def load_chat(self) -> list[ChatMessage]:
        try:
            raw = self.store.load(CHAT_HISTORY_KEY)
            if not raw:
                return []
            return [ChatMessage.from_dict(item) for item in json.loads(raw)]
        except _LOAD_ERRORS as exc:
            logger.error("Could not load chat history: %s", exc)
            return []

    # ---- settings ----

    def save_target_extension(self, extension: str) -> None:
        try:
            self.store.save(TARGET_EXTENSION_KEY, extension)
        except StoreError as exc:
            logger.error("Could not save target extension: %s", exc)

    def load_target_extension(self, default: str) -> str:
        try:
            return self.store.load(TARGET_EXTENSION_KEY) or default
        except StoreError as exc:
            logger.error("Could not load target extension: %s", exc)
            return default

    def save_preserve_folders(self, preserve: bool) -> None:
        try:
            self.store.save(PRESERVE_FOLDERS_KEY, "true" if preserve else "false")
        except StoreError as exc:
            logger.error("Could not save folder preference: %s", exc)

    def load_preserve_folders(self, default: bool = True) -> bool:
        try:
            raw = self.store.load(PRESERVE_FOLDERS_KEY)
        except StoreError as exc:
            logger.error("Could not load folder preference: %s", exc)
            return default
        if raw is None:
            return default
        return raw != "false"
