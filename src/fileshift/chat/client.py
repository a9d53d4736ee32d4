"""HTTP client for the streaming model endpoint, plus the full chat round.

The endpoint accepts ``POST {"contents": [Part, ...]}`` and answers either
with a chunked ``text/plain`` stream of generated text or with a JSON
``{"error": "..."}`` body and a non-success status.

No retries: a failed request becomes one error message in the conversation.
"""

from __future__ import annotations

import logging
from collections.abc import AsyncIterator, Callable, Sequence

import httpx

from fileshift.chat.prompt import ImageAttachment, assemble_parts
from fileshift.chat.stream import Conversation, RemoteModelError, reassemble
from fileshift.models import ChatMessage, FileRecord

logger = logging.getLogger(__name__)

_FALLBACK_ERROR = "Failed to get a response from the server."


class RemoteModelClient:
    """Streams generated text from *endpoint*.

    Args:
        endpoint: Full URL of the chat endpoint.
        timeout: Connect/read timeout in seconds.
        transport: Optional httpx transport (tests use ``httpx.MockTransport``).
    """

    def __init__(
        self,
        endpoint: str,
        timeout: float = 120.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.endpoint = endpoint
        self.timeout = timeout
        self.transport = transport

    async def stream(self, parts: list[dict]) -> AsyncIterator[bytes]:
        """Yield raw body chunks of the response to *parts*.

        Raises:
            RemoteModelError: On a non-success status.
            httpx.HTTPError: On transport failures.
        """
        async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
            async with client.stream("POST", self.endpoint, json={"contents": parts}) as response:
                if not response.is_success:
                    await response.aread()
                    raise RemoteModelError(response.status_code, _error_message(response))
                async for chunk in response.aiter_bytes():
                    if chunk:
                        yield chunk


def _error_message(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return "Failed to parse error response."
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase or _FALLBACK_ERROR


async def send_message(
    conversation: Conversation,
    question: str,
    records: Sequence[FileRecord],
    client: RemoteModelClient,
    image: ImageAttachment | None = None,
    on_update: Callable[[str], None] | None = None,
) -> ChatMessage | None:
    """Run one chat round: user message → request → streamed model message.

    Returns:
        The model message produced (possibly an error message), or ``None``
        if the endpoint answered with an empty body.

    Raises:
        ValueError: If there is neither a question nor an image.
    """
    text = question.strip()
    if not text and image is None:
        raise ValueError("Nothing to send: provide a question or an image.")

    conversation.append(
        ChatMessage(role="user", text=text, image=image.data_url if image else None)
    )
    parts = assemble_parts(text, records, image)
    logger.debug("Sending %d part(s) with %d file(s) of context", len(parts), len(records))
    return await reassemble(conversation, client.stream(parts), on_update=on_update)
