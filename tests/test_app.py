from __future__ import annotations

import pytest

from portfolio_api.services.projects import ProjectService

pytestmark = pytest.mark.integration


def test_health(client) -> None:
    response = client.get("/api/health")

    assert response.status_code == 200
    assert response.get_json() == {"status": "OK", "message": "Server is running"}


def test_unknown_route_uses_error_envelope(client) -> None:
    response = client.get("/api/nothing-here")

    assert response.status_code == 404
    assert set(response.get_json()) == {"message"}


def test_oversized_upload_is_rejected(app, client, auth_headers, upload, media_store) -> None:
    app.config["MAX_CONTENT_LENGTH"] = 1024

    response = client.post(
        "/api/projects",
        data={"title": "Big", "image": upload(content=b"x" * 4096)},
        headers=auth_headers,
        content_type="multipart/form-data",
    )

    assert response.status_code == 413
    assert "message" in response.get_json()
    assert media_store.uploads == []


def test_unexpected_errors_are_hidden(client, monkeypatch: pytest.MonkeyPatch) -> None:
    def explode(self, query, base_url=""):
        raise RuntimeError("database exploded with secrets")

    monkeypatch.setattr(ProjectService, "list", explode)

    response = client.get("/api/projects")

    assert response.status_code == 500
    assert response.get_json() == {"message": "Internal server error"}


def test_cors_allows_configured_origin(client) -> None:
    response = client.get("/api/health", headers={"Origin": "http://localhost:5173"})

    assert response.headers["Access-Control-Allow-Origin"] == "http://localhost:5173"
