"""fileshift chat — prompt assembly, streaming client and reassembly."""

from fileshift.chat.client import RemoteModelClient, send_message
from fileshift.chat.prompt import ImageAttachment, assemble_parts
from fileshift.chat.stream import Conversation, RemoteModelError, StreamSession, reassemble

__all__ = [
    "Conversation",
    "ImageAttachment",
    "RemoteModelClient",
    "RemoteModelError",
    "StreamSession",
    "assemble_parts",
    "reassemble",
    "send_message",
]
