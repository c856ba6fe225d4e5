"""Tutoring application submissions from the website form."""

import logging
from dataclasses import dataclass
from typing import Protocol

from tutor_showcase.domain.applications import (
    ApplicationReceipt,
    ApplicationSubmission,
)
from tutor_showcase.errors import (
    ApplicationValidationError,
    CaptchaFailed,
    CaptchaRequired,
)
from tutor_showcase.services.messaging import (
    BotReply,
    ReplySender,
    escape_markdown,
    rich,
)

logger = logging.getLogger(__name__)


class ApplicationRepository(Protocol):
    """Persistence interface for applications."""

    def create_application(
        self, submission: ApplicationSubmission
    ) -> ApplicationReceipt:
        """Store an application and return its receipt."""


class CaptchaClient(Protocol):
    """Interface for CAPTCHA token verification."""

    async def verify(self, token: str, remote_ip: str | None = None) -> dict:
        """Return the verification payload for a token."""


@dataclass
class ApplicationService:
    """Validates, stores and announces tutoring applications."""

    repository: ApplicationRepository
    sender: ReplySender
    captcha_client: CaptchaClient | None = None
    min_captcha_score: float = 0.5
    notify_chat_id: int | None = None

    async def submit(  # noqa: PLR0913
        self,
        name: str | None,
        grade: str | None,
        phone: str | None,
        program: str | None,
        comments: str | None,
        captcha_token: str | None,
        client_ip: str,
    ) -> ApplicationReceipt:
        """Validate a form submission, store it and notify the tutor."""
        required = [name, grade, phone, program]
        if not all(value and value.strip() for value in required):
            raise ApplicationValidationError("Missing required fields")
        if not captcha_token:
            raise CaptchaRequired("No CAPTCHA token supplied")
        await self._verify_captcha(captcha_token, client_ip)

        submission = ApplicationSubmission(
            student_name=name.strip(),
            grade=grade.strip(),
            phone_number=phone.strip(),
            program=program.strip(),
            comments=(comments or "").strip(),
            ip_address=client_ip,
            captcha_verified=True,
        )
        receipt = self.repository.create_application(submission)
        logger.info("Application stored", extra={"application_id": str(receipt.id)})
        await self._notify(receipt)
        return receipt

    async def _verify_captcha(self, token: str, client_ip: str) -> None:
        if self.captcha_client is None:
            logger.warning("No CAPTCHA secret configured, skipping verification")
            return
        try:
            result = await self.captcha_client.verify(token, remote_ip=client_ip)
        except Exception as exc:
            logger.exception("CAPTCHA verification request failed")
            raise CaptchaFailed("CAPTCHA service unavailable") from exc
        if not result.get("success"):
            logger.warning(
                "CAPTCHA verification failed",
                extra={"error_codes": result.get("error-codes")},
            )
            raise CaptchaFailed("CAPTCHA rejected")
        score = result.get("score")
        if isinstance(score, int | float) and score < self.min_captcha_score:
            logger.warning("CAPTCHA score too low", extra={"score": score})
            raise CaptchaFailed(f"CAPTCHA score {score} below threshold")

    async def _notify(self, receipt: ApplicationReceipt) -> None:
        if self.notify_chat_id is None:
            logger.warning("No notification chat configured, skipping notification")
            return
        delivered = await self.sender.send(
            self.notify_chat_id, format_application_notice(receipt)
        )
        if not delivered:
            logger.error(
                "Failed to send application notification",
                extra={"application_id": str(receipt.id)},
            )


def format_application_notice(receipt: ApplicationReceipt) -> BotReply:
    """Format a new-application notice for Telegram."""
    submission = receipt.submission
    lines = [
        "📋 *New Application Received\\!*",
        "",
        f"👤 *Student:* {escape_markdown(submission.student_name)}",
        f"📚 *Grade:* {escape_markdown(submission.grade)}",
        f"📞 *Phone:* {escape_markdown(submission.phone_number)}",
        f"🎓 *Program:* {escape_markdown(submission.program)}",
        f"💬 *Comments:* {escape_markdown(submission.comments or 'None')}",
        "",
        f"🆔 *Application ID:* {escape_markdown(receipt.id)}",
    ]
    return rich("\n".join(lines))
