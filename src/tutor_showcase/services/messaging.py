"""Outbound bot replies and Telegram MarkdownV2 helpers."""

import logging
import re
from dataclasses import dataclass

from tutor_showcase.adapters.telegram_client import TelegramClient

logger = logging.getLogger(__name__)

MARKDOWN_V2 = "MarkdownV2"

_MARKDOWN_SPECIALS = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")
_MARKDOWN_MARKUP = re.compile(r"\\(.)|[*_~`]")


@dataclass(frozen=True)
class BotReply:
    """A reply to send back to a chat."""

    text: str
    markdown: bool = False


def escape_markdown(text: object) -> str:
    """Escape user-supplied text for interpolation into a MarkdownV2 message."""
    return _MARKDOWN_SPECIALS.sub(r"\\\1", str(text))


def to_plain(text: str) -> str:
    """Strip MarkdownV2 escapes and emphasis markers from a message."""
    return _MARKDOWN_MARKUP.sub(lambda match: match.group(1) or "", text)


def plain(text: str) -> BotReply:
    return BotReply(text=text)


def rich(text: str) -> BotReply:
    """Build a MarkdownV2 reply; callers escape interpolated user text."""
    return BotReply(text=text, markdown=True)


@dataclass
class ReplySender:
    """Delivers replies with one plain-text retry before dropping them."""

    telegram_client: TelegramClient

    async def send(self, chat_id: int, reply: BotReply) -> bool:
        """Send a reply and return whether it was delivered."""
        if reply.markdown:
            try:
                await self.telegram_client.send_message(
                    chat_id=chat_id, text=reply.text, parse_mode=MARKDOWN_V2
                )
            except Exception:
                logger.warning(
                    "Rich message failed, retrying as plain text",
                    exc_info=True,
                    extra={"chat_id": chat_id},
                )
            else:
                return True
            return await self._send_plain(chat_id, to_plain(reply.text), retries=0)
        return await self._send_plain(chat_id, reply.text, retries=1)

    async def _send_plain(self, chat_id: int, text: str, retries: int) -> bool:
        for attempt in range(retries + 1):
            try:
                await self.telegram_client.send_message(chat_id=chat_id, text=text)
            except Exception:
                if attempt < retries:
                    logger.warning(
                        "Plain message failed, retrying once",
                        exc_info=True,
                        extra={"chat_id": chat_id},
                    )
                    continue
                logger.exception(
                    "Dropping undeliverable message", extra={"chat_id": chat_id}
                )
                return False
            return True
        return False
