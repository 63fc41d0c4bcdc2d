"""Tests for the gallery HTTP API."""

import os

import pytest
from fastapi.testclient import TestClient

from sphere_gallery.config import Settings
from sphere_gallery.main import create_app


@pytest.fixture
def settings(tmp_path):
    return Settings(
        IMAGES_DIR=str(tmp_path / "images"),
        STATIC_DIR=str(tmp_path / "static"),
    )


@pytest.fixture
def client(settings):
    with TestClient(create_app(settings)) as test_client:
        yield test_client


def upload(client, png_bytes, name="cat.png"):
    return client.post("/api/upload", files={"image": (name, png_bytes, "image/png")})


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"ok": True}


def test_upload_stores_file_and_returns_url(client, settings, png_bytes):
    response = upload(client, png_bytes)

    assert response.status_code == 200
    body = response.json()
    assert body["imageUrl"] == f"/images/{body['id']}"
    assert body["id"].endswith("-cat.png")

    stored = os.path.join(settings.IMAGES_DIR, body["id"])
    with open(stored, "rb") as f:
        assert f.read() == png_bytes


def test_uploaded_file_is_served_statically(client, png_bytes):
    body = upload(client, png_bytes).json()

    response = client.get(body["imageUrl"])
    assert response.status_code == 200
    assert response.content == png_bytes


def test_upload_without_file_is_rejected(client, settings):
    response = client.post("/api/upload", data={"caption": "no file here"})

    assert response.status_code == 400
    assert "error" in response.json()
    assert os.listdir(settings.IMAGES_DIR) == []


def test_upload_with_empty_body_is_rejected(client, settings):
    response = client.post("/api/upload")

    assert response.status_code == 400
    assert os.listdir(settings.IMAGES_DIR) == []


def test_list_images_after_two_uploads(client, png_bytes):
    upload(client, png_bytes, "one.png")
    upload(client, png_bytes, "two.png")

    response = client.get("/api/images")

    assert response.status_code == 200
    records = response.json()
    assert len(records) == 2
    for record in records:
        assert record["url"].startswith("/images/")
        assert record["url"] == f"/images/{record['id']}"
    assert sorted(r["id"].split("-", 2)[2] for r in records) == ["one.png", "two.png"]


def test_list_images_does_not_filter_non_images(client, settings):
    with open(os.path.join(settings.IMAGES_DIR, "notes.txt"), "w") as f:
        f.write("hello")

    records = client.get("/api/images").json()
    assert records == [{"url": "/images/notes.txt", "id": "notes.txt"}]


def test_list_images_directory_failure_returns_500(client, settings):
    os.rmdir(settings.IMAGES_DIR)

    response = client.get("/api/images")

    assert response.status_code == 500
    assert response.json()["error"] == "Failed to read image directory"


def test_manifest_lists_urls(client, png_bytes):
    body = upload(client, png_bytes).json()

    response = client.get("/images.json")

    assert response.status_code == 200
    assert response.json() == [{"url": body["imageUrl"]}]


def test_root_without_static_dir_returns_api_info(client):
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_root_serves_static_dir(settings):
    os.makedirs(settings.STATIC_DIR)
    with open(os.path.join(settings.STATIC_DIR, "index.html"), "w") as f:
        f.write("<html>gallery</html>")

    with TestClient(create_app(settings)) as test_client:
        response = test_client.get("/")
        assert response.status_code == 200
        assert "gallery" in response.text

        # API routes still win over the root mount
        assert test_client.get("/health").json() == {"ok": True}
