"""Pydantic models for Telegram webhook payloads."""

from pydantic import BaseModel, Field

from tutor_showcase.domain.messages import InboundDocument, InboundMessage


class TelegramUser(BaseModel):
    """Telegram user payload."""

    id: int
    is_bot: bool | None = None
    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


class TelegramChat(BaseModel):
    """Telegram chat payload."""

    id: int
    type: str
    title: str | None = None
    username: str | None = None


class TelegramPhotoSize(BaseModel):
    """Telegram photo size payload."""

    file_id: str
    file_unique_id: str
    width: int
    height: int
    file_size: int | None = None


class TelegramDocument(BaseModel):
    """Telegram document payload."""

    file_id: str
    file_unique_id: str
    file_name: str | None = None
    mime_type: str | None = None
    file_size: int | None = None


class TelegramVoice(BaseModel):
    """Telegram voice note payload."""

    file_id: str
    file_unique_id: str
    duration: int
    mime_type: str | None = None


class TelegramMessage(BaseModel):
    """Telegram message payload."""

    message_id: int
    date: int
    chat: TelegramChat
    from_user: TelegramUser = Field(alias="from")
    text: str | None = None
    photo: list[TelegramPhotoSize] | None = None
    document: TelegramDocument | None = None
    voice: TelegramVoice | None = None

    def to_inbound(self) -> InboundMessage:
        """Convert to the platform-neutral message the dispatcher consumes."""
        document = None
        if self.document:
            document = InboundDocument(
                file_id=self.document.file_id,
                mime_type=self.document.mime_type,
                filename=self.document.file_name,
                size=self.document.file_size,
            )
        return InboundMessage(
            sender_id=self.from_user.id,
            chat_id=self.chat.id,
            text=self.text,
            document=document,
            photo_file_id=(
                _select_largest_photo(self.photo).file_id if self.photo else None
            ),
            has_voice=self.voice is not None,
        )


class TelegramUpdate(BaseModel):
    """Telegram update payload."""

    update_id: int
    message: TelegramMessage | None = None


def _select_largest_photo(photos: list[TelegramPhotoSize]) -> TelegramPhotoSize:
    """Select the largest photo size from the Telegram payload."""
    return max(photos, key=lambda photo: (photo.width * photo.height))
