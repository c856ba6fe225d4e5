"""Domain models for the content intake conversation."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID


class IntakeStep(str, Enum):
    """Steps of the intake conversation, in order."""

    AWAITING_TITLE = "awaiting_title"
    AWAITING_AUTHOR = "awaiting_author"
    AWAITING_DESCRIPTION = "awaiting_description"
    AWAITING_THUMBNAIL_OR_DONE = "awaiting_thumbnail_or_done"


@dataclass(frozen=True)
class IntakeSession:
    """One user's in-progress publish flow."""

    session_id: UUID
    user_id: int
    document_key: str
    step: IntakeStep = IntakeStep.AWAITING_TITLE
    title: str | None = None
    author: str | None = None
    description: str | None = None
    record_id: UUID | None = None
