"""Dependency container wiring for the application."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass

from supabase import create_client

from tutor_showcase.adapters.recaptcha_client import HttpxRecaptchaClient
from tutor_showcase.adapters.supabase_application_repository import (
    SupabaseApplicationRepository,
)
from tutor_showcase.adapters.supabase_catalog_repository import (
    SupabaseCatalogRepository,
)
from tutor_showcase.adapters.supabase_object_store import SupabaseObjectStore
from tutor_showcase.adapters.telegram_client import (
    HttpxTelegramClient,
    TelegramClient,
)
from tutor_showcase.adapters.telegram_file_client import HttpxTelegramFileClient
from tutor_showcase.config import Settings, parse_authorized_users
from tutor_showcase.services.applications import ApplicationService
from tutor_showcase.services.authorization import AuthorizationRegistry
from tutor_showcase.services.catalog import CatalogService
from tutor_showcase.services.commands import CommandDispatcher
from tutor_showcase.services.conversations import ConversationStore
from tutor_showcase.services.intake import IntakeService
from tutor_showcase.services.messaging import ReplySender
from tutor_showcase.services.showcase_feed import ShowcaseFeed
from tutor_showcase.services.storage import StorageGateway


@dataclass
class AppContainer:
    """Holds application-wide dependencies."""

    settings: Settings
    telegram_client: TelegramClient
    registry: AuthorizationRegistry
    conversations: ConversationStore
    storage: StorageGateway
    catalog_service: CatalogService
    intake_service: IntakeService
    dispatcher: CommandDispatcher
    showcase_feed: ShowcaseFeed
    application_service: ApplicationService
    close_resources: Callable[[], Awaitable[None]]


def build_container(settings: Settings | None = None) -> AppContainer:
    """Create the default dependency container."""
    resolved_settings = settings or Settings()
    supabase_client = create_client(
        resolved_settings.supabase_url, resolved_settings.supabase_service_key
    )
    telegram_client = HttpxTelegramClient.create(resolved_settings.telegram_bot_token)
    telegram_file_client = HttpxTelegramFileClient.create(
        resolved_settings.telegram_bot_token
    )
    captcha_client = (
        HttpxRecaptchaClient.create(resolved_settings.recaptcha_secret_key)
        if resolved_settings.recaptcha_secret_key
        else None
    )
    registry = AuthorizationRegistry(
        parse_authorized_users(resolved_settings.telegram_authorized_users)
    )
    conversations = ConversationStore()
    storage = StorageGateway(
        store=SupabaseObjectStore(supabase_client),
        private_bucket=resolved_settings.private_bucket,
        public_bucket=resolved_settings.public_bucket,
        signed_url_ttl_seconds=resolved_settings.signed_url_ttl_seconds,
    )
    catalog_service = CatalogService(SupabaseCatalogRepository(supabase_client))
    sender = ReplySender(telegram_client)
    intake_service = IntakeService(
        conversations=conversations,
        storage=storage,
        catalog=catalog_service,
        file_client=telegram_file_client,
        placeholder_thumbnail_url=resolved_settings.placeholder_thumbnail_url,
    )
    dispatcher = CommandDispatcher(
        registry=registry,
        intake_service=intake_service,
        catalog_service=catalog_service,
        conversations=conversations,
        sender=sender,
        private_bucket=resolved_settings.private_bucket,
        public_bucket=resolved_settings.public_bucket,
        list_limit=resolved_settings.showcase_list_limit,
        environment=resolved_settings.environment,
    )
    application_service = ApplicationService(
        repository=SupabaseApplicationRepository(supabase_client),
        sender=sender,
        captcha_client=captcha_client,
        min_captcha_score=resolved_settings.recaptcha_min_score,
        notify_chat_id=resolved_settings.telegram_notify_chat_id,
    )

    async def close_resources() -> None:
        await telegram_client.close()
        await telegram_file_client.close()
        if captcha_client is not None:
            await captcha_client.close()

    return AppContainer(
        settings=resolved_settings,
        telegram_client=telegram_client,
        registry=registry,
        conversations=conversations,
        storage=storage,
        catalog_service=catalog_service,
        intake_service=intake_service,
        dispatcher=dispatcher,
        showcase_feed=ShowcaseFeed(catalog=catalog_service, storage=storage),
        application_service=application_service,
        close_resources=close_resources,
    )
