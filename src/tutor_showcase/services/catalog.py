"""Catalog of published showcase records."""

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from typing import Protocol
from uuid import UUID

from tutor_showcase.domain.showcase import PublicationStatus, ShowcaseRecord
from tutor_showcase.errors import CatalogReadError, CatalogWriteError

logger = logging.getLogger(__name__)

_REQUIRED_FIELDS = ("title", "author", "description", "document_key")


class CatalogRepository(Protocol):
    """Persistence interface for showcase records."""

    def insert_record(self, payload: dict[str, object]) -> ShowcaseRecord:
        """Insert a record and return it with store-assigned fields."""

    def update_record(
        self, record_id: UUID, payload: dict[str, object]
    ) -> ShowcaseRecord | None:
        """Merge fields into a record; return None when the id is unknown."""

    def list_by_status(self, status: str, limit: int | None) -> list[ShowcaseRecord]:
        """Return records with a status, newest first."""

    def ping(self) -> None:
        """Raise when the store is unreachable."""


@dataclass(frozen=True)
class PublishedListing:
    """Lazy view of published records; each iteration re-runs the query."""

    repository: CatalogRepository
    limit: int | None = None

    def __iter__(self) -> Iterator[ShowcaseRecord]:
        try:
            records = self.repository.list_by_status(
                PublicationStatus.PUBLISHED.value, self.limit
            )
        except Exception as exc:
            raise CatalogReadError("Listing published records failed") from exc
        yield from records


@dataclass
class CatalogService:
    """Creates, updates and lists showcase records."""

    repository: CatalogRepository

    def create_record(self, fields: dict[str, object]) -> ShowcaseRecord:
        """Insert a new published record."""
        missing = [name for name in _REQUIRED_FIELDS if not _has_text(fields, name)]
        if missing:
            raise CatalogWriteError(f"Missing fields: {', '.join(missing)}")
        payload = dict(fields)
        payload["status"] = PublicationStatus.PUBLISHED.value
        try:
            record = self.repository.insert_record(payload)
        except Exception as exc:
            logger.exception("Failed to insert showcase record")
            raise CatalogWriteError("Insert failed") from exc
        logger.info("Showcase record created", extra={"record_id": str(record.id)})
        return record

    def update_record(
        self, record_id: UUID, partial_fields: dict[str, object]
    ) -> ShowcaseRecord:
        try:
            record = self.repository.update_record(record_id, dict(partial_fields))
        except Exception as exc:
            logger.exception(
                "Failed to update showcase record",
                extra={"record_id": str(record_id)},
            )
            raise CatalogWriteError(f"Update of {record_id} failed") from exc
        if record is None:
            raise CatalogWriteError(f"Unknown showcase record {record_id}")
        return record

    def list_published(self, limit: int | None = None) -> PublishedListing:
        return PublishedListing(self.repository, limit)

    def ping(self) -> bool:
        try:
            self.repository.ping()
        except Exception:
            logger.exception("Catalog health check failed")
            return False
        return True


def _has_text(fields: dict[str, object], name: str) -> bool:
    value = fields.get(name)
    return isinstance(value, str) and bool(value.strip())
