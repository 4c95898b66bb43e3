from __future__ import annotations

import io

import pytest

from portfolio_api import create_app, db
from portfolio_api.config import TestingConfig
from portfolio_api.services.auth import AuthService
from portfolio_api.services.media_store import MediaStoreError, UploadedMedia

ADMIN_EMAIL = "admin@example.com"
ADMIN_PASSWORD = "secret123"


class FakeMediaStore:
    """In-memory stand-in for the Cloudinary store that records every call."""

    def __init__(self, pages: int = 3) -> None:
        self.pages = pages
        self.fail_destroy = False
        self.uploads: list[dict] = []
        self.destroyed: list[tuple[str, str]] = []
        self.page_lookups: list[tuple[str, str]] = []

    def upload(self, file, folder, resource_type="image", transformation=None) -> UploadedMedia:
        self.uploads.append(
            {
                "filename": file.filename,
                "folder": folder,
                "resource_type": resource_type,
                "transformation": transformation,
            }
        )
        number = len(self.uploads)
        extension = "pdf" if resource_type == "raw" else "png"
        public_id = f"{folder}/upload-{number}"
        url = (
            f"https://res.cloudinary.com/demo/{resource_type}/upload/"
            f"v170000000{number}/{public_id}.{extension}"
        )
        return UploadedMedia(url=url, public_id=public_id, resource_type=resource_type)

    def destroy(self, public_id, resource_type="image") -> str:
        self.destroyed.append((public_id, resource_type))
        if self.fail_destroy:
            raise MediaStoreError("provider unavailable")
        return "ok"

    def page_count(self, public_id, resource_type="raw") -> int:
        self.page_lookups.append((public_id, resource_type))
        return self.pages


@pytest.fixture
def media_store() -> FakeMediaStore:
    return FakeMediaStore()


@pytest.fixture
def app(media_store: FakeMediaStore):
    app = create_app(TestingConfig, media_store=media_store)
    yield app
    with app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin_id(app) -> str:
    with app.app_context():
        service = AuthService(db.session, app.config["JWT_SECRET"])
        user, _ = service.seed_admin(ADMIN_EMAIL, ADMIN_PASSWORD, "Admin")
        return user.id


@pytest.fixture
def auth_headers(client, admin_id: str) -> dict[str, str]:
    response = client.post(
        "/api/auth/login", json={"email": ADMIN_EMAIL, "password": ADMIN_PASSWORD}
    )
    return {"Authorization": f"Bearer {response.get_json()['token']}"}


@pytest.fixture
def upload():
    def make(name: str = "shot.png", mimetype: str = "image/png", content: bytes = b"fake-bytes"):
        return (io.BytesIO(content), name, mimetype)

    return make
