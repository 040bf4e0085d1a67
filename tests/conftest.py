import pytest
from fastapi.testclient import TestClient
from myb.core.config import Settings
from myb.core.security import issue_token
from myb.main import create_app

ADMIN_USER = "admin@example.com"
ADMIN_PASS = "open-sesame"
READER = "reader@example.com"


def make_settings(tmp_path, **overrides) -> Settings:
    values = {
        "data_dir": str(tmp_path / "data"),
        "uploads_dir": str(tmp_path / "uploads"),
        "database_url": f"sqlite:///{tmp_path / 'myb.db'}",
        "admin_user": ADMIN_USER,
        "admin_pass": ADMIN_PASS,
        "jwt_secret": "test-secret",
    }
    values.update(overrides)
    return Settings(_env_file=None, **values)


def bearer(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def settings(tmp_path):
    return make_settings(tmp_path)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def admin_headers(client):
    resp = client.post("/auth/login", json={"username": ADMIN_USER, "password": ADMIN_PASS})
    assert resp.status_code == 200
    return bearer(resp.json()["token"])


@pytest.fixture
def reader_headers(settings):
    return bearer(issue_token(READER, "reader", settings))


@pytest.fixture
def book(client, admin_headers):
    resp = client.post(
        "/tables/books",
        json={"title": "The Long Road", "author": "M. Author", "genre": "Drama", "price": 4.5, "published": True},
        headers=admin_headers,
    )
    assert resp.status_code == 200
    return resp.json()
