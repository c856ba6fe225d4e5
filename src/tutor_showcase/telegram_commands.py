"""Telegram bot command configuration."""

from dataclasses import dataclass
from enum import Enum


@dataclass(frozen=True)
class TelegramCommand:
    """Declarative bot command definition."""

    command: str
    description: str


class BotCommand(Enum):
    """Enum of bot commands (single source of truth)."""

    START = TelegramCommand("start", "Welcome and usage guide")
    HELP = TelegramCommand("help", "How to publish student work")
    STATUS = TelegramCommand("status", "Bot and storage status")
    LIST = TelegramCommand("list", "Recently published showcase items")
    WHOAMI = TelegramCommand("whoami", "Show your user id and role")
    CANCEL = TelegramCommand("cancel", "Cancel the current upload")
    ADD_USER = TelegramCommand("adduser", "Authorize a user (admins only)")
    DONE = TelegramCommand("done", "Finish an upload without a thumbnail")


FINISH_TOKEN = f"/{BotCommand.DONE.value.command}"


def telegram_commands() -> list[dict[str, str]]:
    """Return commands formatted for Telegram API."""
    return [
        {"command": entry.value.command, "description": entry.value.description}
        for entry in BotCommand
    ]


def parse_command(text: str | None) -> tuple[BotCommand, list[str]] | None:
    """Return the command and its arguments when text starts with one."""
    if not text:
        return None
    tokens = text.strip().split()
    if not tokens or not tokens[0].startswith("/"):
        return None
    name = tokens[0][1:].split("@", maxsplit=1)[0].lower()
    for entry in BotCommand:
        if entry.value.command == name:
            return entry, tokens[1:]
    return None


CHAT_MENU_BUTTON: dict[str, object] = {"type": "commands"}
