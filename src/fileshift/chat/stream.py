"""Streaming reassembly of model responses into the conversation.

The in-progress model message is owned by a ``StreamSession``: it keeps a
private text buffer and, after each append, publishes an immutable
``ChatMessage`` snapshot as the conversation's last message. Readers only
ever see complete snapshots.

Failures never leave a half-built message behind: a partial message is
closed as-is and one synthetic error message follows it.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import AsyncIterable, Callable

import httpx

from fileshift.models import ChatMessage

logger = logging.getLogger(__name__)

ERROR_PREFIX = "Sorry, an error occurred"


class RemoteModelError(RuntimeError):
    """Non-success response from the model endpoint."""

    def __init__(self, status_code: int, message: str) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.message = message


class Conversation:
    def __init__(self, messages: list[ChatMessage] | None = None) -> None:
        self._messages: list[ChatMessage] = list(messages or [])
        self._session: StreamSession | None = None

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def streaming(self) -> bool:
        return self._session is not None and not self._session.closed

    def append(self, message: ChatMessage) -> None:
        if self.streaming:
            raise RuntimeError("Cannot append while a model message is streaming")
        self._messages.append(message)

    def begin_stream(self) -> StreamSession:
        if self.streaming:
            raise RuntimeError("A model message is already streaming")
        self._messages.append(ChatMessage(role="model", text=""))
        self._session = StreamSession(self, len(self._messages) - 1)
        return self._session

    def _publish(self, index: int, text: str) -> None:
        self._messages[index] = ChatMessage(role="model", text=text)


class StreamSession:
    """Mutable buffer behind the conversation's streaming model message."""

    def __init__(self, conversation: Conversation, index: int) -> None:
        self._conversation = conversation
        self._index = index
        self._parts: list[str] = []
        self.closed = False

    @property
    def text(self) -> str:
        return "".join(self._parts)

    def append(self, text: str) -> None:
        if self.closed:
            raise RuntimeError("Stream session is closed")
        if not text:
            return
        self._parts.append(text)
        self._conversation._publish(self._index, self.text)

    def close(self) -> ChatMessage:
        self.closed = True
        return self._conversation.messages[self._index]


def error_text(exc: BaseException) -> str:
    if isinstance(exc, RemoteModelError):
        kind = f"HTTP {exc.status_code}"
    else:
        kind = type(exc).__name__
    return f"{ERROR_PREFIX} ({kind}): {exc}"


async def reassemble(
    conversation: Conversation,
    chunks: AsyncIterable[bytes],
    on_update: Callable[[str], None] | None = None,
) -> ChatMessage | None:
    """Consume *chunks* into one model message of *conversation*.

    *on_update* receives each newly decoded piece of text as it arrives.
    Returns the final model message (the error message when the transport
    fails), or ``None`` when the body was empty.
    """
    decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
    session: StreamSession | None = None

    def _emit(text: str) -> None:
        assert session is not None
        session.append(text)
        if text and on_update is not None:
            on_update(text)

    try:
        async for chunk in chunks:
            if session is None:
                session = conversation.begin_stream()
            _emit(decoder.decode(chunk))
        if session is None:
            return None
        _emit(decoder.decode(b"", final=True))
        return session.close()
    except (httpx.HTTPError, RemoteModelError) as exc:
        logger.error("Error receiving model response: %s", exc)
        if session is not None:
            session.close()
        message = ChatMessage(role="model", text=error_text(exc))
        conversation.append(message)
        return message
