import base64
import pytest
from fastapi.testclient import TestClient
from myb.core.errors import InvalidPayload, MissingField, PayloadTooLarge, UnsupportedType
from myb.main import create_app
from myb.services.uploads import parse_data_uri, sanitize_filename, save_upload
from conftest import make_settings

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + bytes(range(256))


def data_uri(mime: str, content: bytes) -> str:
    return f"data:{mime};base64,{base64.b64encode(content).decode()}"


def test_sanitize_filename():
    assert sanitize_filename("My Cover (final).png") == "My_Cover_final.png"
    assert sanitize_filename("../../etc/passwd") == "....etcpasswd"
    assert sanitize_filename("???") == "upload"


def test_parse_data_uri():
    assert parse_data_uri("data:image/PNG;base64,AAAA") == ("image/png", "AAAA")
    with pytest.raises(InvalidPayload):
        parse_data_uri("image/png;base64,AAAA")


def test_save_upload_validation(settings):
    with pytest.raises(MissingField):
        save_upload("", data_uri("image/png", PNG_BYTES), settings)
    with pytest.raises(MissingField):
        save_upload("cover.png", None, settings)
    with pytest.raises(UnsupportedType):
        save_upload("anim.gif", data_uri("image/gif", b"GIF89a"), settings)
    with pytest.raises(InvalidPayload):
        save_upload("cover.png", "data:image/png;base64,@@not base64@@", settings)


def test_save_upload_enforces_size_cap(tmp_path):
    settings = make_settings(tmp_path, max_upload_bytes=16)
    with pytest.raises(PayloadTooLarge):
        save_upload("cover.png", data_uri("image/png", PNG_BYTES), settings)


def test_upload_then_fetch_returns_identical_bytes(client):
    resp = client.post("/upload", json={"filename": "My Cover.png", "data": data_uri("image/png", PNG_BYTES)})

    assert resp.status_code == 200
    url = resp.json()["url"]
    assert url.startswith("/uploads/") and url.endswith("-My_Cover.png")

    fetched = client.get(url)
    assert fetched.status_code == 200
    assert fetched.content == PNG_BYTES
    assert fetched.headers["content-type"] == "image/png"


def test_upload_accepts_pdf(client):
    resp = client.post("/upload", json={"filename": "book.pdf", "data": data_uri("application/pdf", b"%PDF-1.4\n")})

    assert resp.status_code == 200
    assert client.get(resp.json()["url"]).content == b"%PDF-1.4\n"


def test_upload_errors_map_to_http(client):
    gif = client.post("/upload", json={"filename": "a.gif", "data": data_uri("image/gif", b"GIF89a")})
    assert gif.status_code == 400
    assert gif.json() == {"error": "Unsupported mime type"}

    missing = client.post("/upload", json={"filename": "a.png"})
    assert missing.status_code == 400
    assert missing.json() == {"error": "filename and data required"}

    malformed = client.post("/upload", json={"filename": "a.png", "data": "hello"})
    assert malformed.status_code == 400
    assert malformed.json() == {"error": "Invalid data"}


def test_unknown_upload_is_not_found(client):
    assert client.get("/uploads/nothing-here.png").status_code == 404


def test_upload_can_require_admin(tmp_path):
    client = TestClient(create_app(make_settings(tmp_path, upload_requires_admin=True)))
    payload = {"filename": "a.png", "data": data_uri("image/png", PNG_BYTES)}

    assert client.post("/upload", json=payload).status_code == 401

    login = client.post("/auth/login", json={"username": "admin@example.com", "password": "open-sesame"})
    token = login.json()["token"]
    resp = client.post("/upload", json=payload, headers={"Authorization": f"Bearer {token}"})
    assert resp.status_code == 200
