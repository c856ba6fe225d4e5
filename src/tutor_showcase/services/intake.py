"""State machine for the showcase content intake conversation."""

import logging
import threading
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import PurePosixPath

from tutor_showcase.adapters.telegram_file_client import TelegramFileClient
from tutor_showcase.domain.intake import IntakeSession, IntakeStep
from tutor_showcase.errors import (
    CatalogWriteError,
    DownloadError,
    IntakeWriteError,
    NoActiveSession,
    StorageReadError,
    UnsupportedMediaType,
)
from tutor_showcase.services.catalog import CatalogService
from tutor_showcase.services.conversations import ConversationStore
from tutor_showcase.services.messaging import BotReply, escape_markdown, plain, rich
from tutor_showcase.services.storage import StorageGateway
from tutor_showcase.telegram_commands import FINISH_TOKEN, BotCommand, parse_command

logger = logging.getLogger(__name__)

PDF_CONTENT_TYPE = "application/pdf"
THUMBNAIL_CONTENT_TYPE = "image/jpeg"
_DEFAULT_FILENAME = "document.pdf"

_PROMPTS = {
    IntakeStep.AWAITING_TITLE: "📝 What is the title of the work?",
    IntakeStep.AWAITING_AUTHOR: "👤 Who is the author?",
    IntakeStep.AWAITING_DESCRIPTION: "✍️ Please send a short description.",
    IntakeStep.AWAITING_THUMBNAIL_OR_DONE: (
        f"🖼 Send a thumbnail image, or {FINISH_TOKEN} to finish without one."
    ),
}


@dataclass
class DocumentKeyFactory:
    """Builds ``<millis>-<filename>`` keys with a strictly increasing prefix."""

    clock: Callable[[], float] = time.time
    _last_prefix: int = 0
    _lock: threading.Lock = field(default_factory=threading.Lock)

    def __call__(self, filename: str | None) -> str:
        with self._lock:
            prefix = max(int(self.clock() * 1000), self._last_prefix + 1)
            self._last_prefix = prefix
        return f"{prefix}-{_safe_filename(filename)}"


@dataclass
class IntakeService:
    """Drives one user at a time through publishing a showcase item."""

    conversations: ConversationStore
    storage: StorageGateway
    catalog: CatalogService
    file_client: TelegramFileClient
    placeholder_thumbnail_url: str
    key_factory: DocumentKeyFactory = field(default_factory=DocumentKeyFactory)

    async def start_from_document(
        self,
        user_id: int,
        file_id: str,
        mime_type: str | None,
        filename: str | None,
    ) -> BotReply:
        """Store an uploaded PDF and open a session asking for the title."""
        if not mime_type or "pdf" not in mime_type.lower():
            raise UnsupportedMediaType(f"Rejected document type {mime_type!r}")
        data = await self._download(file_id)
        key = self.key_factory(filename)
        self.storage.upload(self.storage.private_bucket, key, data, PDF_CONTENT_TYPE)
        replaced = self.conversations.get(user_id) is not None
        self.conversations.start(user_id, key)
        logger.info(
            "Intake session started",
            extra={"user_id": user_id, "document_key": key, "replaced": replaced},
        )
        lines = [
            "✅ PDF uploaded successfully\\!",
            f"📁 File: {escape_markdown(key)}",
        ]
        if replaced:
            lines.append("♻️ Your previous unfinished upload was discarded\\.")
        lines.append(escape_markdown(_PROMPTS[IntakeStep.AWAITING_TITLE]))
        return rich("\n".join(lines))

    async def handle_text(self, user_id: int, text: str) -> BotReply:
        """Advance the user's session with a text answer."""
        session = self.conversations.get(user_id)
        if session is None:
            raise NoActiveSession(f"No intake session for user {user_id}")
        handler = self._text_handlers()[session.step]
        return await handler(session, text.strip())

    async def handle_photo(self, user_id: int, file_id: str) -> BotReply:
        """Attach a thumbnail to the session's record and finish the session."""
        session = self.conversations.get(user_id)
        if session is None:
            raise NoActiveSession(f"No intake session for user {user_id}")
        if (
            session.step is not IntakeStep.AWAITING_THUMBNAIL_OR_DONE
            or session.record_id is None
        ):
            return plain(
                "🖼 I'm not ready for a thumbnail yet. " + _PROMPTS[session.step]
            )
        data = await self._download(file_id)
        if not self.conversations.is_current(session):
            logger.info(
                "Dropping thumbnail for a closed session",
                extra={"user_id": user_id, "session_id": str(session.session_id)},
            )
            return plain(
                "🛑 That upload was cancelled or replaced, so the photo was not used."
            )
        ref = self.storage.upload(
            self.storage.public_bucket,
            thumbnail_key(session.document_key),
            data,
            THUMBNAIL_CONTENT_TYPE,
        )
        record = self.catalog.update_record(
            session.record_id, {"thumbnail_url": ref.public_url}
        )
        self.conversations.finish(session)
        logger.info(
            "Thumbnail attached", extra={"user_id": user_id, "record_id": str(record.id)}
        )
        return rich(
            f"🎉 Thumbnail added\\. *{escape_markdown(record.title)}* is live\\!"
        )

    def cancel(self, user_id: int) -> BotReply:
        if self.conversations.clear(user_id):
            logger.info("Intake session cancelled", extra={"user_id": user_id})
            return plain("🛑 Upload cancelled. Send another PDF to start again.")
        return plain("Nothing to cancel.")

    def _text_handlers(
        self,
    ) -> dict[IntakeStep, Callable[[IntakeSession, str], Awaitable[BotReply]]]:
        return {
            IntakeStep.AWAITING_TITLE: self._on_title,
            IntakeStep.AWAITING_AUTHOR: self._on_author,
            IntakeStep.AWAITING_DESCRIPTION: self._on_description,
            IntakeStep.AWAITING_THUMBNAIL_OR_DONE: self._on_thumbnail_or_done,
        }

    async def _on_title(self, session: IntakeSession, text: str) -> BotReply:
        if not _is_answer(text):
            return plain(_PROMPTS[IntakeStep.AWAITING_TITLE])
        self.conversations.advance(
            session, title=text, step=IntakeStep.AWAITING_AUTHOR
        )
        return rich(
            f"📖 Title: *{escape_markdown(text)}*\n"
            f"{escape_markdown(_PROMPTS[IntakeStep.AWAITING_AUTHOR])}"
        )

    async def _on_author(self, session: IntakeSession, text: str) -> BotReply:
        if not _is_answer(text):
            return plain(_PROMPTS[IntakeStep.AWAITING_AUTHOR])
        self.conversations.advance(
            session, author=text, step=IntakeStep.AWAITING_DESCRIPTION
        )
        return rich(
            f"👤 Author: *{escape_markdown(text)}*\n"
            f"{escape_markdown(_PROMPTS[IntakeStep.AWAITING_DESCRIPTION])}"
        )

    async def _on_description(self, session: IntakeSession, text: str) -> BotReply:
        if not _is_answer(text):
            return plain(_PROMPTS[IntakeStep.AWAITING_DESCRIPTION])
        try:
            document_url = self.storage.document_url(session.document_key)
            record = self.catalog.create_record(
                {
                    "title": session.title,
                    "author": session.author,
                    "description": text,
                    "document_key": session.document_key,
                    "document_url": document_url,
                    "thumbnail_url": self.placeholder_thumbnail_url,
                }
            )
        except (StorageReadError, CatalogWriteError) as exc:
            raise IntakeWriteError(f"Publishing {session.document_key} failed") from exc
        self.conversations.advance(
            session,
            description=text,
            record_id=record.id,
            step=IntakeStep.AWAITING_THUMBNAIL_OR_DONE,
        )
        return rich(
            f"🚀 *{escape_markdown(record.title)}* by "
            f"{escape_markdown(record.author)} is published\\!\n"
            f"{escape_markdown(_PROMPTS[IntakeStep.AWAITING_THUMBNAIL_OR_DONE])}"
        )

    async def _on_thumbnail_or_done(
        self, session: IntakeSession, text: str
    ) -> BotReply:
        command = parse_command(text)
        if command is None or command[0] is not BotCommand.DONE:
            return plain(_PROMPTS[IntakeStep.AWAITING_THUMBNAIL_OR_DONE])
        self.conversations.finish(session)
        logger.info(
            "Intake session finished",
            extra={"user_id": session.user_id, "record_id": str(session.record_id)},
        )
        return plain("✅ All done! The item is live on the showcase.")

    async def _download(self, file_id: str) -> bytes:
        try:
            return await self.file_client.download_file_bytes(file_id)
        except DownloadError:
            raise
        except Exception as exc:
            logger.exception("Telegram download failed", extra={"file_id": file_id})
            raise DownloadError(f"Download of {file_id} failed") from exc


def thumbnail_key(document_key: str) -> str:
    """Derive the public thumbnail key for a stored document."""
    return f"{PurePosixPath(document_key).stem}-thumbnail.jpg"


def _safe_filename(filename: str | None) -> str:
    name = PurePosixPath((filename or "").replace("\\", "/")).name.strip()
    return name or _DEFAULT_FILENAME


def _is_answer(text: str) -> bool:
    # Slash-prefixed text is a command, never a title, author or description.
    return bool(text) and not text.startswith("/")
