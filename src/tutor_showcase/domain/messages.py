"""Platform-neutral view of inbound bot messages."""

from dataclasses import dataclass


@dataclass(frozen=True)
class InboundDocument:
    """A file attached to a message."""

    file_id: str
    mime_type: str | None
    filename: str | None
    size: int | None = None


@dataclass(frozen=True)
class InboundMessage:
    """A message received from a chat user."""

    sender_id: int
    chat_id: int
    text: str | None = None
    document: InboundDocument | None = None
    photo_file_id: str | None = None
    has_voice: bool = False
