"""Domain models shared by the ingestion and chat flows."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Role = Literal["user", "model"]


@dataclass(frozen=True)
class FileRecord:
    """One ingested file with its original and rewritten path.

    ``content`` holds the raw bytes exactly as read; nothing downstream
    transforms them.
    """

    id: str
    original_path: str
    new_path: str
    content: bytes
    original_type: str
    new_type: str


@dataclass(frozen=True)
class ChatMessage:
    role: Role
    text: str
    image: str | None = None  # data: URL of an attached image

    def to_dict(self) -> dict:
        data: dict = {"role": self.role, "text": self.text}
        if self.image:
            data["image"] = self.image
        return data

    @classmethod
    def from_dict(cls, data: dict) -> ChatMessage:
        role = data["role"]
        if role not in ("user", "model"):
            raise ValueError(f"Unknown message role: {role!r}")
        return cls(role=role, text=str(data.get("text", "")), image=data.get("image"))


WorkingSet = tuple[FileRecord, ...]
