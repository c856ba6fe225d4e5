"""Routing of inbound bot messages to commands and the intake flow."""

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from tutor_showcase.domain.auth import Role
from tutor_showcase.domain.messages import InboundMessage
from tutor_showcase.errors import ShowcaseError
from tutor_showcase.services.authorization import AuthorizationRegistry
from tutor_showcase.services.catalog import CatalogService
from tutor_showcase.services.conversations import ConversationStore
from tutor_showcase.services.intake import IntakeService
from tutor_showcase.services.messaging import (
    BotReply,
    ReplySender,
    escape_markdown,
    plain,
    rich,
)
from tutor_showcase.telegram_commands import BotCommand, parse_command

logger = logging.getLogger(__name__)

DENIED_TEXT = "❌ You are not authorized to use this bot."
FALLBACK_TEXT = (
    "💡 Send a PDF file to add student work, or use /help for commands."
)
VOICE_TEXT = "🎤 Voice message received! Voice-to-text feature coming soon."

HELP_TEXT = "\n".join(
    [
        "🎨 *Showcase Bot*",
        "",
        "*Adding student work:*",
        "1\\. Send a PDF file of the student's work",
        "2\\. Reply with the title, author and description when asked",
        "3\\. Optionally send a thumbnail image, or /done to finish",
        "",
        "*Commands:*",
        "📋 /list \\- View published works",
        "🔍 /status \\- Check bot status",
        "🙋 /whoami \\- Show your id and role",
        "🛑 /cancel \\- Cancel the current upload",
        "➕ /adduser \\<id\\> \\[role\\] \\- Authorize a user \\(admins\\)",
        "❓ /help \\- Show this help",
        "",
        "PDFs stay private behind signed links; thumbnails are public\\.",
    ]
)

Handler = Callable[[InboundMessage, list[str]], Awaitable[BotReply]]


@dataclass
class CommandDispatcher:
    """Authorizes and routes each inbound message, then sends the reply."""

    registry: AuthorizationRegistry
    intake_service: IntakeService
    catalog_service: CatalogService
    conversations: ConversationStore
    sender: ReplySender
    private_bucket: str
    public_bucket: str
    list_limit: int = 10
    environment: str = "local"

    async def dispatch(self, message: InboundMessage) -> None:
        """Handle one inbound message; never raises for domain errors."""
        if not self.registry.is_authorized(message.sender_id):
            logger.info(
                "Rejected unauthorized user", extra={"user_id": message.sender_id}
            )
            await self.sender.send(message.chat_id, plain(DENIED_TEXT))
            return
        try:
            reply = await self._route(message)
        except ShowcaseError as exc:
            logger.warning(
                "Bot request failed",
                exc_info=True,
                extra={"user_id": message.sender_id, "error": type(exc).__name__},
            )
            reply = plain(self._error_text(exc))
        await self.sender.send(message.chat_id, reply)

    async def _route(self, message: InboundMessage) -> BotReply:
        parsed = parse_command(message.text)
        if parsed is not None:
            command, args = parsed
            handler = self._command_handlers().get(command)
            if handler is not None:
                return await handler(message, args)
        if message.document is not None:
            return await self.intake_service.start_from_document(
                user_id=message.sender_id,
                file_id=message.document.file_id,
                mime_type=message.document.mime_type,
                filename=message.document.filename,
            )
        if message.photo_file_id is not None:
            return await self.intake_service.handle_photo(
                message.sender_id, message.photo_file_id
            )
        if message.has_voice:
            return plain(VOICE_TEXT)
        if message.text is not None:
            return await self.intake_service.handle_text(
                message.sender_id, message.text
            )
        return plain(FALLBACK_TEXT)

    def _command_handlers(self) -> dict[BotCommand, Handler]:
        # /done is the intake finish token and falls through to the state machine.
        return {
            BotCommand.START: self._help,
            BotCommand.HELP: self._help,
            BotCommand.STATUS: self._status,
            BotCommand.LIST: self._list,
            BotCommand.WHOAMI: self._whoami,
            BotCommand.CANCEL: self._cancel,
            BotCommand.ADD_USER: self._add_user,
        }

    async def _help(self, message: InboundMessage, args: list[str]) -> BotReply:
        return rich(HELP_TEXT)

    async def _status(self, message: InboundMessage, args: list[str]) -> BotReply:
        lines = [
            "🤖 *Bot Status*",
            "",
            "✅ Bot is running",
            "",
            "📊 *Storage Buckets:*",
            f"• PDFs: {escape_markdown(self.private_bucket)}",
            f"• Thumbnails: {escape_markdown(self.public_bucket)}",
            "",
            f"👤 *Authorized Users:* {len(self.registry.users())}",
            f"📝 *Open uploads:* {len(self.conversations.sessions())}",
        ]
        return rich("\n".join(lines))

    async def _list(self, message: InboundMessage, args: list[str]) -> BotReply:
        records = list(self.catalog_service.list_published(self.list_limit))
        if not records:
            return plain("📚 No showcase items found.")
        lines = ["📚 *Published Showcase Items:*", ""]
        for record in records:
            lines.extend(
                [
                    f"📖 *{escape_markdown(record.title)}*",
                    f"👤 Author: {escape_markdown(record.author)}",
                    f"📅 {escape_markdown(record.created_at.date().isoformat())}",
                    "",
                ]
            )
        return rich("\n".join(lines).rstrip())

    async def _whoami(self, message: InboundMessage, args: list[str]) -> BotReply:
        role = self.registry.role_of(message.sender_id)
        role_name = role.value if role else "none"
        return plain(f"🙋 Your user id is {message.sender_id}, role: {role_name}.")

    async def _cancel(self, message: InboundMessage, args: list[str]) -> BotReply:
        return self.intake_service.cancel(message.sender_id)

    async def _add_user(self, message: InboundMessage, args: list[str]) -> BotReply:
        if len(args) not in {1, 2} or not args[0].isdigit():
            return plain("Usage: /adduser <telegram_user_id> [content_manager|admin]")
        target_user_id = int(args[0])
        role = self.registry.add_user(
            message.sender_id,
            target_user_id,
            args[1] if len(args) > 1 else Role.CONTENT_MANAGER,
        )
        return plain(
            f"✅ User {target_user_id} added as {role.value}.\n"
            "⚠️ This is kept in memory only and will be lost when the bot "
            "restarts. Add the user to TELEGRAM_AUTHORIZED_USERS to keep access."
        )

    def _error_text(self, exc: ShowcaseError) -> str:
        """Return a user-facing error message with local debug info."""
        if self.environment == "local":
            return f"{exc.user_message} (debug: {type(exc).__name__}: {exc})"
        return exc.user_message
