"""Telegram file download client."""

from dataclasses import dataclass
from typing import Protocol

import httpx

from tutor_showcase.adapters.telegram_client import TELEGRAM_API_URL
from tutor_showcase.errors import DownloadError


class TelegramFileClient(Protocol):
    """Interface for downloading files sent to the bot."""

    async def download_file_bytes(self, file_id: str) -> bytes:
        """Download a Telegram file and return its bytes."""


@dataclass
class HttpxTelegramFileClient(TelegramFileClient):
    """Resolves file ids with getFile and fetches the content over httpx."""

    bot_token: str
    http_client: httpx.AsyncClient

    @classmethod
    def create(cls, bot_token: str) -> "HttpxTelegramFileClient":
        return cls(bot_token=bot_token, http_client=httpx.AsyncClient())

    async def download_file_bytes(self, file_id: str) -> bytes:
        response = await self.http_client.get(
            f"{TELEGRAM_API_URL}/bot{self.bot_token}/getFile",
            params={"file_id": file_id},
            timeout=10,
        )
        response.raise_for_status()
        payload = response.json()
        file_path = (payload.get("result") or {}).get("file_path")
        if not payload.get("ok") or not file_path:
            raise DownloadError(f"Telegram getFile failed for {file_id}")
        file_response = await self.http_client.get(
            f"{TELEGRAM_API_URL}/file/bot{self.bot_token}/{file_path}", timeout=30
        )
        file_response.raise_for_status()
        return file_response.content

    async def close(self) -> None:
        await self.http_client.aclose()
