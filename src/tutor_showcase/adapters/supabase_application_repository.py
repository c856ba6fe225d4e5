"""Supabase-backed application repository."""

from dataclasses import asdict, dataclass
from datetime import UTC, datetime
from uuid import UUID

from supabase import Client

from tutor_showcase.domain.applications import (
    ApplicationReceipt,
    ApplicationSubmission,
)
from tutor_showcase.services.applications import ApplicationRepository


@dataclass
class SupabaseApplicationRepository(ApplicationRepository):
    """Supabase implementation for tutoring applications."""

    client: Client

    def create_application(
        self, submission: ApplicationSubmission
    ) -> ApplicationReceipt:
        """Insert an application row and return its id."""
        response = (
            self.client.table("applications")
            .insert(
                {
                    **asdict(submission),
                    "submitted_at": datetime.now(tz=UTC).isoformat(),
                }
            )
            .execute()
        )
        if not response.data:
            raise RuntimeError("Failed to create application")
        return ApplicationReceipt(id=UUID(response.data[0]["id"]), submission=submission)
