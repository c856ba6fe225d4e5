"""Admin API endpoints with simple token auth."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from fastapi import APIRouter, Depends, Header, HTTPException, Request, status

from tutor_showcase.errors import CatalogReadError

if TYPE_CHECKING:
    from tutor_showcase.containers import AppContainer

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


def _get_admin_token(request: Request) -> str:
    container: AppContainer = request.app.state.container
    return container.settings.admin_token


async def require_admin(
    x_admin_token: str | None = Header(default=None),
    admin_token: str = Depends(_get_admin_token),
) -> None:
    """Ensure requests include a valid admin token."""
    if not x_admin_token or x_admin_token != admin_token:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED)


@router.get("/health", dependencies=[Depends(require_admin)])
async def admin_health() -> dict[str, str]:
    """Admin health check endpoint."""
    return {"status": "ok"}


@router.get("/users", dependencies=[Depends(require_admin)])
async def list_users(request: Request) -> dict[str, object]:
    """Return bot users and roles, including unsaved runtime additions."""
    container: AppContainer = request.app.state.container
    users = container.registry.users()
    return {
        "users": [
            {"telegram_user_id": user_id, "role": role.value}
            for user_id, role in sorted(users.items())
        ],
        "durable": False,
    }


@router.get("/sessions", dependencies=[Depends(require_admin)])
async def list_sessions(request: Request) -> dict[str, object]:
    """Return intake sessions that are currently open."""
    container: AppContainer = request.app.state.container
    return {
        "sessions": [
            {
                "session_id": str(session.session_id),
                "user_id": session.user_id,
                "step": session.step.value,
                "document_key": session.document_key,
                "record_id": str(session.record_id) if session.record_id else None,
            }
            for session in container.conversations.sessions()
        ]
    }


@router.get("/showcase", dependencies=[Depends(require_admin)])
async def list_showcase(request: Request, limit: int = 50) -> dict[str, object]:
    """Return published records including their storage keys."""
    container: AppContainer = request.app.state.container
    try:
        records = list(container.catalog_service.list_published(limit))
    except CatalogReadError as exc:
        logger.exception("Error fetching showcase records for admin")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Showcase catalog unavailable",
        ) from exc
    return {
        "records": [
            {
                "id": str(record.id),
                "title": record.title,
                "author": record.author,
                "document_key": record.document_key,
                "thumbnail_url": record.thumbnail_url,
                "created_at": record.created_at.isoformat(),
            }
            for record in records
        ]
    }
