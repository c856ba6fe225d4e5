"""Application configuration."""

import os

from pydantic_settings import BaseSettings, SettingsConfigDict

from tutor_showcase.domain.auth import Role
from tutor_showcase.errors import InvalidRole

_ENVIRONMENT = os.getenv("ENVIRONMENT", "local")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    telegram_bot_token: str
    supabase_url: str
    supabase_service_key: str
    admin_token: str
    telegram_authorized_users: str | None = None
    telegram_webhook_secret: str | None = None
    telegram_notify_chat_id: int | None = None
    private_bucket: str = "showcase-pdfs-private"
    public_bucket: str = "showcase-thumbnails-public"
    placeholder_thumbnail_url: str = "/images/showcase-placeholder.jpg"
    signed_url_ttl_seconds: int = 24 * 60 * 60
    showcase_list_limit: int = 10
    recaptcha_secret_key: str | None = None
    recaptcha_min_score: float = 0.5
    app_version: str = "1.0.0"
    environment: str = _ENVIRONMENT

    model_config = SettingsConfigDict(
        env_file=(f".env.{_ENVIRONMENT}", ".env"),
        extra="ignore",
    )


def parse_authorized_users(raw: str | None) -> dict[int, Role]:
    """Parse the seed list of authorized Telegram users.

    Entries are comma-separated ``<user_id>[:<role>]`` pairs; the role defaults
    to content_manager. Malformed entries are skipped.
    """
    users: dict[int, Role] = {}
    if raw is None:
        return users
    for chunk in raw.split(","):
        value = chunk.strip()
        if not value:
            continue
        user_part, _, role_part = value.partition(":")
        user_part = user_part.strip()
        if not user_part.isdigit():
            continue
        try:
            role = Role.parse(role_part) if role_part.strip() else Role.CONTENT_MANAGER
        except InvalidRole:
            continue
        users[int(user_part)] = role
    return users
