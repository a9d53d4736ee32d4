"""Outbound request parts: an optional inline image, then one text part."""

from __future__ import annotations

import base64
import logging
import mimetypes
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

from fileshift.models import FileRecord

logger = logging.getLogger(__name__)

DECODE_ERROR_PLACEHOLDER = "[Error: Could not decode file content]"

_CONTEXT_PREAMBLE = "Based on the following file contents, please answer the user's question."


@dataclass(frozen=True)
class ImageAttachment:
    mime_type: str
    data: bytes

    @classmethod
    def from_path(cls, path: Path) -> ImageAttachment:
        mime, _ = mimetypes.guess_type(path.name)
        if mime is None or not mime.startswith("image/"):
            raise ValueError(f"Not an image file: '{path}'")
        return cls(mime_type=mime, data=path.read_bytes())

    @property
    def b64(self) -> str:
        return base64.b64encode(self.data).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.b64}"


def decode_content(content: bytes) -> str:
    try:
        return content.decode("utf-8")
    except UnicodeDecodeError as exc:
        logger.warning("Failed to decode file content: %s", exc)
        return DECODE_ERROR_PLACEHOLDER


def file_section(record: FileRecord) -> str:
    return (
        f"--- START OF FILE: {record.original_path} ---\n"
        f"{decode_content(record.content)}\n"
        f"--- END OF FILE: {record.original_path} ---"
    )


def compose_prompt(question: str, records: Sequence[FileRecord]) -> str:
    """The raw question, or the question framed by every file's content."""
    if not records:
        return question
    context = "\n\n".join(file_section(r) for r in records)
    return f"{_CONTEXT_PREAMBLE}\n\nFILE CONTEXT:\n{context}\n\nUSER QUESTION:\n{question}"


def assemble_parts(
    question: str,
    records: Sequence[FileRecord],
    image: ImageAttachment | None = None,
) -> list[dict]:
    parts: list[dict] = []
    if image is not None:
        parts.append({"inlineData": {"mimeType": image.mime_type, "data": image.b64}})
    parts.append({"text": compose_prompt(question, records)})
    return parts
