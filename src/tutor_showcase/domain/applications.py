"""Domain models for tutoring applications."""

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class ApplicationSubmission:
    """Validated application form ready to be stored."""

    student_name: str
    grade: str
    phone_number: str
    program: str
    comments: str
    ip_address: str
    captcha_verified: bool
    status: str = "new"


@dataclass(frozen=True)
class ApplicationReceipt:
    """Result of storing an application."""

    id: UUID
    submission: ApplicationSubmission
