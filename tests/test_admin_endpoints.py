"""Tests for admin endpoints."""

from fastapi.testclient import TestClient

from tutor_showcase.api.app import create_app
from tutor_showcase.domain.auth import Role
from tutor_showcase.services.catalog import CatalogService
from tests.conftest import ADMIN_ID, MANAGER_ID, InMemoryCatalogRepository

HEADERS = {"X-Admin-Token": "admin-token"}


def test_admin_users_endpoint_includes_runtime_additions(container) -> None:
    container.registry.add_user(ADMIN_ID, 111, Role.CONTENT_MANAGER)
    client = TestClient(create_app(container))

    response = client.get("/admin/users", headers=HEADERS)

    assert response.status_code == 200
    data = response.json()
    assert data["durable"] is False
    assert data["users"] == [
        {"telegram_user_id": 111, "role": "content_manager"},
        {"telegram_user_id": ADMIN_ID, "role": "admin"},
        {"telegram_user_id": MANAGER_ID, "role": "content_manager"},
    ]


def test_admin_sessions_endpoint(container) -> None:
    container.conversations.start(MANAGER_ID, "1-poem.pdf")
    client = TestClient(create_app(container))

    response = client.get("/admin/sessions", headers=HEADERS)

    assert response.status_code == 200
    session = response.json()["sessions"][0]
    assert session["user_id"] == MANAGER_ID
    assert session["step"] == "awaiting_title"
    assert session["document_key"] == "1-poem.pdf"
    assert session["record_id"] is None


def test_admin_showcase_endpoint(container) -> None:
    catalog: CatalogService = container.catalog_service
    record = catalog.create_record(
        {
            "title": "Ocean Dreams",
            "author": "Mira",
            "description": "A poem.",
            "document_key": "1-poem.pdf",
        }
    )
    client = TestClient(create_app(container))

    response = client.get("/admin/showcase", headers=HEADERS)

    assert response.status_code == 200
    assert response.json()["records"] == [
        {
            "id": str(record.id),
            "title": "Ocean Dreams",
            "author": "Mira",
            "document_key": "1-poem.pdf",
            "thumbnail_url": None,
            "created_at": record.created_at.isoformat(),
        }
    ]


def test_admin_endpoints_require_token(container) -> None:
    client = TestClient(create_app(container))

    for path in ("/admin/users", "/admin/sessions", "/admin/showcase"):
        assert client.get(path).status_code == 401


def test_admin_showcase_reports_unavailable_catalog(
    container, catalog_repository: InMemoryCatalogRepository
) -> None:
    catalog_repository.fail_list = True
    client = TestClient(create_app(container))

    response = client.get("/admin/showcase", headers=HEADERS)

    assert response.status_code == 503
    assert response.json() == {"detail": "Showcase catalog unavailable"}
