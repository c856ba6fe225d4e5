"""Supabase-backed showcase catalog repository."""

from dataclasses import dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from tutor_showcase.domain.showcase import PublicationStatus, ShowcaseRecord
from tutor_showcase.services.catalog import CatalogRepository

_TABLE = "showcase"
_COLUMNS = (
    "id, title, author, description, document_key, document_url, "
    "thumbnail_url, status, created_at, updated_at"
)


@dataclass
class SupabaseCatalogRepository(CatalogRepository):
    """Supabase implementation for showcase records."""

    client: Client

    def insert_record(self, payload: dict[str, object]) -> ShowcaseRecord:
        """Insert a showcase row stamped with creation times."""
        now = datetime.now(tz=UTC).isoformat()
        response = (
            self.client.table(_TABLE)
            .insert({**payload, "created_at": now, "updated_at": now})
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create showcase record")
        return _to_record(response.data[0])

    def update_record(
        self, record_id: UUID, payload: dict[str, object]
    ) -> ShowcaseRecord | None:
        """Merge fields into a showcase row and bump updated_at."""
        response = (
            self.client.table(_TABLE)
            .update({**payload, "updated_at": datetime.now(tz=UTC).isoformat()})
            .eq("id", str(record_id))
            .execute()
        )
        if not response.data:
            return None
        return _to_record(response.data[0])

    def list_by_status(self, status: str, limit: int | None) -> list[ShowcaseRecord]:
        query = (
            self.client.table(_TABLE)
            .select(_COLUMNS)
            .eq("status", status)
            .order("created_at", desc=True)
        )
        if limit is not None:
            query = query.limit(limit)
        response = query.execute()
        return [_to_record(row) for row in response.data or []]

    def ping(self) -> None:
        self.client.table(_TABLE).select("id").limit(1).execute()


def _to_record(row: dict[str, object]) -> ShowcaseRecord:
    return ShowcaseRecord(
        id=UUID(str(row["id"])),
        title=str(row["title"]),
        author=str(row["author"]),
        description=str(row.get("description") or ""),
        document_key=str(row["document_key"]),
        document_url=row.get("document_url"),
        thumbnail_url=row.get("thumbnail_url"),
        status=PublicationStatus(row.get("status") or PublicationStatus.DRAFT.value),
        created_at=_parse_timestamp(row.get("created_at")),
        updated_at=_parse_timestamp(row.get("updated_at")),
    )


def _parse_timestamp(value: object) -> datetime:
    if isinstance(value, datetime):
        return value
    if isinstance(value, str) and value:
        return datetime.fromisoformat(value)
    return datetime.now(tz=UTC)
