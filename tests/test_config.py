"""Tests for configuration parsing."""

from tutor_showcase.config import Settings, parse_authorized_users
from tutor_showcase.domain.auth import Role


def test_parse_authorized_users_with_roles() -> None:
    users = parse_authorized_users("1001:admin, 1002:content_manager,1003")

    assert users == {
        1001: Role.ADMIN,
        1002: Role.CONTENT_MANAGER,
        1003: Role.CONTENT_MANAGER,
    }


def test_parse_authorized_users_skips_malformed_entries() -> None:
    users = parse_authorized_users("abc,1004:owner,,1005:ADMIN, :admin")

    assert users == {1005: Role.ADMIN}


def test_parse_authorized_users_empty() -> None:
    assert parse_authorized_users(None) == {}
    assert parse_authorized_users("") == {}


def test_settings_defaults(settings: Settings) -> None:
    assert settings.private_bucket == "showcase-pdfs-private"
    assert settings.public_bucket == "showcase-thumbnails-public"
    assert settings.signed_url_ttl_seconds == 86400
    assert settings.showcase_list_limit == 10
    assert settings.telegram_webhook_secret is None


def test_settings_read_environment(monkeypatch) -> None:
    monkeypatch.setenv("TELEGRAM_BOT_TOKEN", "env-token")
    monkeypatch.setenv("SUPABASE_URL", "https://env.supabase.co")
    monkeypatch.setenv("SUPABASE_SERVICE_KEY", "env-key")
    monkeypatch.setenv("ADMIN_TOKEN", "env-admin")
    monkeypatch.setenv("TELEGRAM_NOTIFY_CHAT_ID", "-100123")

    settings = Settings(_env_file=None)

    assert settings.telegram_bot_token == "env-token"
    assert settings.telegram_notify_chat_id == -100123
