"""Tests for the drop/upload pipeline and the startup manifest loader."""

import asyncio
import logging

import pytest

from sphere_gallery.viewer.application import Application
from sphere_gallery.viewer.controls import RIGHT_BUTTON
from sphere_gallery.viewer.persistence import load_persistent_images
from sphere_gallery.viewer.uploads import DroppedFile

from conftest import FakeClient


def make_app(client, texture_loader):
    return Application(800, 800, client=client, texture_loader=texture_loader)


def test_non_image_drop_is_ignored(image_file, texture_loader):
    client = FakeClient()
    app = make_app(client, texture_loader)

    async def scenario():
        assert app.on_drop([DroppedFile(image_file, "text/plain")]) is None
        assert app.on_drop([]) is None
        assert app.uploads.pending == 0

    asyncio.run(scenario())

    assert len(app.gallery) == 0
    assert client.uploads == []


def test_drop_outside_event_loop_adds_nothing(image_file, texture_loader):
    client = FakeClient()
    app = make_app(client, texture_loader)

    with pytest.raises(RuntimeError):
        app.on_drop([DroppedFile(image_file, "image/png")])

    assert len(app.gallery) == 0
    assert app.uploads.pending == 0
    assert client.uploads == []


def test_drop_shows_preview_before_response(image_file, texture_loader):
    client = FakeClient()
    client.release.clear()
    app = make_app(client, texture_loader)
    preview_url = image_file.resolve().as_uri()

    async def scenario():
        panel = app.on_drop([DroppedFile(image_file, "image/png")])

        assert len(app.gallery) == 1
        assert panel.url == preview_url
        assert panel.faces.front.map.url == preview_url

        # Let the upload start, then confirm the preview is still shown
        await asyncio.sleep(0.05)
        assert panel.url == preview_url

        client.release.set()
        await app.uploads.drain()
        return panel

    panel = asyncio.run(scenario())

    assert panel.url == "/images/abc.png"
    assert panel.faces.front.map.url == "/images/abc.png"
    assert panel.faces.back.map.mirrored
    assert texture_loader.loaded == [preview_url, "/images/abc.png"]
    assert client.uploads == [(image_file, "image/png", "cat.png")]


def test_failed_upload_keeps_preview(image_file, texture_loader, caplog):
    client = FakeClient(fail_upload=True)
    app = make_app(client, texture_loader)

    async def scenario():
        panel = app.on_drop([DroppedFile(image_file, "image/png")])
        await app.uploads.drain()
        return panel

    with caplog.at_level(logging.WARNING):
        panel = asyncio.run(scenario())

    assert panel.url == image_file.resolve().as_uri()
    assert len(app.gallery) == 1
    assert "Upload failed, kept local preview" in caplog.text


def test_drops_upload_independently(tmp_path, png_bytes, texture_loader):
    client = FakeClient()
    app = make_app(client, texture_loader)
    files = []
    for name in ("a.png", "b.png"):
        path = tmp_path / name
        path.write_bytes(png_bytes)
        files.append(path)

    async def scenario():
        panels = [app.on_drop([DroppedFile(path, "image/png")]) for path in files]
        await app.uploads.drain()
        return panels

    panels = asyncio.run(scenario())

    assert len(app.gallery) == 2
    assert all(panel.url == "/images/abc.png" for panel in panels)
    assert sorted(call[2] for call in client.uploads) == ["a.png", "b.png"]


def test_only_first_dropped_file_is_used(tmp_path, image_file, texture_loader):
    client = FakeClient()
    app = make_app(client, texture_loader)
    other = DroppedFile(tmp_path / "other.png", "image/png")

    async def scenario():
        app.on_drop([DroppedFile(image_file, "image/png"), other])
        await app.uploads.drain()

    asyncio.run(scenario())

    assert len(app.gallery) == 1
    assert [call[2] for call in client.uploads] == ["cat.png"]


def test_drop_unlocks_look_controls(image_file, texture_loader):
    app = make_app(FakeClient(), texture_loader)
    app.on_mouse_down(RIGHT_BUTTON)

    async def scenario():
        app.on_drop([DroppedFile(image_file, "text/plain")])

    asyncio.run(scenario())

    assert not app.controls.is_locked


def test_manifest_creates_random_panels(texture_loader):
    app = make_app(FakeClient(manifest=["/images/a.png", "/images/b.png"]), texture_loader)

    panels = load_persistent_images(app.client, app.factory)

    assert [p.url for p in panels] == ["/images/a.png", "/images/b.png"]
    for panel in panels:
        assert 10 - 1e-9 <= (panel.position ** 2).sum() ** 0.5 <= 14 + 1e-9


def test_manifest_failure_leaves_gallery_empty(texture_loader, caplog):
    app = make_app(FakeClient(fail_manifest=True), texture_loader)

    with caplog.at_level(logging.ERROR):
        panels = load_persistent_images(app.client, app.factory)

    assert panels == []
    assert len(app.gallery) == 0
    assert "Failed to load persistent images" in caplog.text


@pytest.mark.parametrize("media_type,expected", [
    ("image/png", True),
    ("image/jpeg", True),
    ("text/plain", False),
    ("", False),
])
def test_dropped_file_is_image(tmp_path, media_type, expected):
    assert DroppedFile(tmp_path / "x", media_type).is_image is expected
