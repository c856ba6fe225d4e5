"""Shared test fixtures."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime, timedelta
from uuid import UUID, uuid4

import pytest

from tutor_showcase.adapters.telegram_client import TelegramClient
from tutor_showcase.adapters.telegram_file_client import TelegramFileClient
from tutor_showcase.config import Settings, parse_authorized_users
from tutor_showcase.containers import AppContainer
from tutor_showcase.domain.applications import (
    ApplicationReceipt,
    ApplicationSubmission,
)
from tutor_showcase.domain.showcase import PublicationStatus, ShowcaseRecord
from tutor_showcase.services.applications import (
    ApplicationRepository,
    ApplicationService,
    CaptchaClient,
)
from tutor_showcase.services.authorization import AuthorizationRegistry
from tutor_showcase.services.catalog import CatalogRepository, CatalogService
from tutor_showcase.services.commands import CommandDispatcher
from tutor_showcase.services.conversations import ConversationStore
from tutor_showcase.services.intake import IntakeService
from tutor_showcase.services.messaging import ReplySender
from tutor_showcase.services.showcase_feed import ShowcaseFeed
from tutor_showcase.services.storage import ObjectStore, StorageGateway

ADMIN_ID = 1001
MANAGER_ID = 1002
STRANGER_ID = 9999
NOTIFY_CHAT_ID = 5000


@dataclass
class SentMessage:
    chat_id: int
    text: str
    parse_mode: str | None


@dataclass
class FakeTelegramClient(TelegramClient):
    """Fake Telegram client that records messages."""

    messages: list[SentMessage] = field(default_factory=list)
    fail_markdown: bool = False
    fail_all: bool = False
    fail_first: int = 0
    attempts: int = 0
    commands: list[dict[str, str]] | None = None
    menu_button: dict[str, object] | None = None

    async def send_message(
        self,
        chat_id: int,
        text: str,
        parse_mode: str | None = None,
    ) -> None:
        self.attempts += 1
        if (
            self.fail_all
            or self.attempts <= self.fail_first
            or (self.fail_markdown and parse_mode is not None)
        ):
            raise RuntimeError("Bad Request: can't parse entities")
        self.messages.append(SentMessage(chat_id, text, parse_mode))

    async def set_my_commands(self, commands: list[dict[str, str]]) -> None:
        self.commands = commands

    async def set_chat_menu_button(
        self, menu_button: dict[str, object] | None = None
    ) -> None:
        self.menu_button = menu_button

    def texts(self) -> list[str]:
        return [message.text for message in self.messages]


@dataclass
class FakeTelegramFileClient(TelegramFileClient):
    """Fake Telegram file client that returns static bytes."""

    content: bytes = b"%PDF-1.7 fake"
    downloads: list[str] = field(default_factory=list)
    fail: bool = False

    async def download_file_bytes(self, file_id: str) -> bytes:
        self.downloads.append(file_id)
        if self.fail:
            raise RuntimeError("connection reset")
        return self.content


@dataclass
class InMemoryObjectStore(ObjectStore):
    """In-memory bucketed object store for tests."""

    objects: dict[tuple[str, str], tuple[bytes, str]] = field(default_factory=dict)
    calls: list[tuple[str, str, str]] = field(default_factory=list)
    fail_puts: bool = False
    fail_signing: bool = False
    down_buckets: set[str] = field(default_factory=set)

    def put(self, bucket: str, key: str, data: bytes, content_type: str) -> None:
        self.calls.append(("put", bucket, key))
        if self.fail_puts:
            raise RuntimeError("storage unavailable")
        self.objects[(bucket, key)] = (data, content_type)

    def public_url(self, bucket: str, key: str) -> str:
        self.calls.append(("public_url", bucket, key))
        return f"https://storage.test/public/{bucket}/{key}"

    def signed_url(self, bucket: str, key: str, ttl_seconds: int) -> str:
        self.calls.append(("signed_url", bucket, key))
        if self.fail_signing or (bucket, key) not in self.objects:
            raise KeyError(key)
        return f"https://storage.test/sign/{bucket}/{key}?ttl={ttl_seconds}&token={uuid4().hex}"

    def get(self, bucket: str, key: str) -> bytes:
        return self.objects[(bucket, key)][0]

    def check_bucket(self, bucket: str) -> None:
        if bucket in self.down_buckets:
            raise RuntimeError(f"bucket {bucket} unreachable")


@dataclass
class InMemoryCatalogRepository(CatalogRepository):
    """In-memory showcase catalog for tests."""

    records: dict[UUID, ShowcaseRecord] = field(default_factory=dict)
    inserts: list[dict[str, object]] = field(default_factory=list)
    updates: list[tuple[UUID, dict[str, object]]] = field(default_factory=list)
    fail_insert: bool = False
    fail_list: bool = False
    down: bool = False
    _tick: int = 0

    def insert_record(self, payload: dict[str, object]) -> ShowcaseRecord:
        self.inserts.append(payload)
        if self.fail_insert:
            raise RuntimeError("insert failed")
        now = self._now()
        record = ShowcaseRecord(
            id=uuid4(),
            title=str(payload["title"]),
            author=str(payload["author"]),
            description=str(payload["description"]),
            document_key=str(payload["document_key"]),
            document_url=payload.get("document_url"),
            thumbnail_url=payload.get("thumbnail_url"),
            status=PublicationStatus(payload["status"]),
            created_at=now,
            updated_at=now,
        )
        self.records[record.id] = record
        return record

    def update_record(
        self, record_id: UUID, payload: dict[str, object]
    ) -> ShowcaseRecord | None:
        self.updates.append((record_id, payload))
        current = self.records.get(record_id)
        if current is None:
            return None
        updated = replace(current, **payload, updated_at=self._now())
        self.records[record_id] = updated
        return updated

    def list_by_status(self, status: str, limit: int | None) -> list[ShowcaseRecord]:
        if self.fail_list:
            raise RuntimeError("query failed")
        rows = sorted(
            (record for record in self.records.values() if record.status == status),
            key=lambda record: record.created_at,
            reverse=True,
        )
        return rows[:limit] if limit is not None else rows

    def ping(self) -> None:
        if self.down:
            raise RuntimeError("database unreachable")

    def _now(self) -> datetime:
        self._tick += 1
        return datetime(2026, 1, 1, tzinfo=UTC) + timedelta(minutes=self._tick)


@dataclass
class InMemoryApplicationRepository(ApplicationRepository):
    """In-memory application repository for tests."""

    applications: dict[UUID, ApplicationSubmission] = field(default_factory=dict)

    def create_application(
        self, submission: ApplicationSubmission
    ) -> ApplicationReceipt:
        application_id = uuid4()
        self.applications[application_id] = submission
        return ApplicationReceipt(id=application_id, submission=submission)


@dataclass
class FakeCaptchaClient(CaptchaClient):
    """Fake CAPTCHA client returning a fixed verdict."""

    payload: dict = field(default_factory=lambda: {"success": True, "score": 0.9})
    tokens: list[str] = field(default_factory=list)

    async def verify(self, token: str, remote_ip: str | None = None) -> dict:
        self.tokens.append(token)
        return self.payload


@pytest.fixture
def settings() -> Settings:
    return Settings(
        telegram_bot_token="test-token",
        supabase_url="https://example.supabase.co",
        supabase_service_key="header.payload.signature",
        admin_token="admin-token",
        telegram_authorized_users=f"{ADMIN_ID}:admin,{MANAGER_ID}:content_manager",
        telegram_notify_chat_id=NOTIFY_CHAT_ID,
        environment="test",
    )


@pytest.fixture
def telegram_client() -> FakeTelegramClient:
    return FakeTelegramClient()


@pytest.fixture
def file_client() -> FakeTelegramFileClient:
    return FakeTelegramFileClient()


@pytest.fixture
def object_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def catalog_repository() -> InMemoryCatalogRepository:
    return InMemoryCatalogRepository()


@pytest.fixture
def application_repository() -> InMemoryApplicationRepository:
    return InMemoryApplicationRepository()


@pytest.fixture
def captcha_client() -> FakeCaptchaClient:
    return FakeCaptchaClient()


@pytest.fixture
def storage(settings: Settings, object_store: InMemoryObjectStore) -> StorageGateway:
    return StorageGateway(
        store=object_store,
        private_bucket=settings.private_bucket,
        public_bucket=settings.public_bucket,
    )


@pytest.fixture
def conversations() -> ConversationStore:
    return ConversationStore()


@pytest.fixture
def intake_service(
    settings: Settings,
    conversations: ConversationStore,
    storage: StorageGateway,
    catalog_repository: InMemoryCatalogRepository,
    file_client: FakeTelegramFileClient,
) -> IntakeService:
    return IntakeService(
        conversations=conversations,
        storage=storage,
        catalog=CatalogService(catalog_repository),
        file_client=file_client,
        placeholder_thumbnail_url=settings.placeholder_thumbnail_url,
    )


@pytest.fixture
def container(  # noqa: PLR0913
    settings: Settings,
    telegram_client: FakeTelegramClient,
    conversations: ConversationStore,
    storage: StorageGateway,
    intake_service: IntakeService,
    application_repository: InMemoryApplicationRepository,
    captcha_client: FakeCaptchaClient,
) -> AppContainer:
    registry = AuthorizationRegistry(
        parse_authorized_users(settings.telegram_authorized_users)
    )
    catalog_service = intake_service.catalog
    sender = ReplySender(telegram_client)
    dispatcher = CommandDispatcher(
        registry=registry,
        intake_service=intake_service,
        catalog_service=catalog_service,
        conversations=conversations,
        sender=sender,
        private_bucket=settings.private_bucket,
        public_bucket=settings.public_bucket,
        list_limit=settings.showcase_list_limit,
        environment=settings.environment,
    )
    application_service = ApplicationService(
        repository=application_repository,
        sender=sender,
        captcha_client=captcha_client,
        notify_chat_id=settings.telegram_notify_chat_id,
    )

    async def close_resources() -> None:
        return None

    return AppContainer(
        settings=settings,
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
