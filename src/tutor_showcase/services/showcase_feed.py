"""Public view of published showcase items."""

import logging
from dataclasses import dataclass

from tutor_showcase.domain.showcase import ShowcaseRecord
from tutor_showcase.errors import StorageReadError
from tutor_showcase.services.catalog import CatalogService
from tutor_showcase.services.storage import StorageGateway

logger = logging.getLogger(__name__)


@dataclass
class ShowcaseFeed:
    """Serializes published records with freshly signed PDF links."""

    catalog: CatalogService
    storage: StorageGateway

    def entries(self, limit: int | None = None) -> list[dict[str, object]]:
        """Return published records in the site's JSON shape, newest first."""
        return [self.to_public(record) for record in self.catalog.list_published(limit)]

    def to_public(self, record: ShowcaseRecord) -> dict[str, object]:
        try:
            pdf_url = self.storage.document_url(record.document_key)
        except StorageReadError:
            logger.warning(
                "Could not sign document URL",
                exc_info=True,
                extra={"record_id": str(record.id)},
            )
            pdf_url = None
        return {
            "id": str(record.id),
            "title": record.title,
            "author": record.author,
            "description": record.description,
            "pdfUrl": pdf_url,
            "thumbnailUrl": record.thumbnail_url,
            "createdAt": record.created_at.isoformat(),
            "updatedAt": record.updated_at.isoformat(),
            "status": record.status.value,
        }
