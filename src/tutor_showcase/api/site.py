"""Public endpoints used by the marketing site."""

from __future__ import annotations

import logging
from datetime import UTC, datetime
from typing import TYPE_CHECKING

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from tutor_showcase.errors import CatalogReadError, ShowcaseError, StorageReadError

if TYPE_CHECKING:
    from tutor_showcase.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["site"])


class ApplicationForm(BaseModel):
    """Application form payload posted by the site."""

    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    grade: str | None = None
    phone: str | None = None
    program: str | None = None
    comments: str | None = None
    captcha_token: str | None = Field(default=None, alias="captchaToken")


@router.get("/health")
async def health(request: Request) -> JSONResponse:
    """Report API, database and storage health."""
    container: AppContainer = request.app.state.container
    database_ok = container.catalog_service.ping()
    buckets = container.storage.check()
    storage_ok = all(buckets.values())
    overall = "healthy" if database_ok and storage_ok else "degraded"
    payload = {
        "status": overall,
        "timestamp": _now_iso(),
        "services": {
            "api": "healthy",
            "database": "healthy" if database_ok else "error",
            "storage": "healthy" if storage_ok else "error",
        },
        "version": container.settings.app_version,
        "environment": container.settings.environment,
    }
    status_code = (
        status.HTTP_200_OK
        if overall == "healthy"
        else status.HTTP_503_SERVICE_UNAVAILABLE
    )
    return JSONResponse(payload, status_code=status_code)


@router.get("/showcase")
async def showcase(request: Request) -> dict[str, object]:
    """List published showcase items with freshly signed PDF links."""
    container: AppContainer = request.app.state.container
    try:
        collections = container.showcase_feed.entries()
    except CatalogReadError:
        logger.exception("Error fetching showcase data")
        return {
            "collections": [],
            "lastUpdated": _now_iso(),
            "totalItems": 0,
            "fallback": True,
        }
    return {
        "collections": collections,
        "lastUpdated": _now_iso(),
        "totalItems": len(collections),
    }


@router.get("/pdfs/{filename}")
async def pdf(filename: str, request: Request) -> Response:
    """Stream a stored showcase PDF from the private bucket."""
    container: AppContainer = request.app.state.container
    if "/" in filename or "\\" in filename or filename.startswith("."):
        return Response("PDF not found", status_code=status.HTTP_404_NOT_FOUND)
    try:
        content = container.storage.download(
            container.storage.private_bucket, filename
        )
    except StorageReadError:
        logger.warning("PDF not found", exc_info=True, extra={"pdf_key": filename})
        return Response("PDF not found", status_code=status.HTTP_404_NOT_FOUND)
    return Response(
        content,
        media_type="application/pdf",
        headers={
            "Content-Disposition": f'inline; filename="{filename}"',
            "Cache-Control": "private, max-age=3600",
        },
    )


@router.post("/submit-application")
async def submit_application(form: ApplicationForm, request: Request) -> JSONResponse:
    """Accept an application from the site form."""
    container: AppContainer = request.app.state.container
    try:
        receipt = await container.application_service.submit(
            name=form.name,
            grade=form.grade,
            phone=form.phone,
            program=form.program,
            comments=form.comments,
            captcha_token=form.captcha_token,
            client_ip=_client_ip(request),
        )
    except ShowcaseError as exc:
        return JSONResponse(
            {"success": False, "message": exc.user_message},
            status_code=status.HTTP_400_BAD_REQUEST,
        )
    except Exception:
        logger.exception("Error submitting application")
        return JSONResponse(
            {
                "success": False,
                "message": "Failed to submit application. Please try again.",
            },
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return JSONResponse(
        {
            "success": True,
            "message": "Application submitted successfully! We will contact you soon.",
            "applicationId": str(receipt.id),
        }
    )


def _client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.headers.get("x-real-ip") or "unknown"


def _now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()
