"""Domain models for showcase items."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID


class PublicationStatus(str, Enum):
    """Publication state of a showcase record."""

    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True)
class ShowcaseRecord:
    """A published unit of student work."""

    id: UUID
    title: str
    author: str
    description: str
    document_key: str
    document_url: str | None
    thumbnail_url: str | None
    status: PublicationStatus
    created_at: datetime
    updated_at: datetime


@dataclass(frozen=True)
class StorageRef:
    """Location of an uploaded object."""

    bucket: str
    key: str
    public_url: str | None = None
