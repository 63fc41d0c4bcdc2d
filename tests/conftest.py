"""Shared fixtures and fakes for the gallery tests."""

import io
import threading
from typing import List

import pytest
from PIL import Image

from sphere_gallery.schemas import ManifestEntry, UploadResponse
from sphere_gallery.viewer.client import GalleryApiError
from sphere_gallery.viewer.textures import Texture

RED = (255, 0, 0)
BLUE = (0, 0, 255)


def make_image() -> Image.Image:
    """2x1 image: red on the left, blue on the right."""
    image = Image.new("RGB", (2, 1))
    image.putpixel((0, 0), RED)
    image.putpixel((1, 0), BLUE)
    return image


@pytest.fixture
def png_bytes() -> bytes:
    buffer = io.BytesIO()
    make_image().save(buffer, format="PNG")
    return buffer.getvalue()


@pytest.fixture
def image_file(tmp_path, png_bytes):
    path = tmp_path / "cat.png"
    path.write_bytes(png_bytes)
    return path


class FakeTextureLoader:
    """Returns an in-memory texture for any URL and records the requests."""

    def __init__(self):
        self.loaded: List[str] = []

    def __call__(self, url: str) -> Texture:
        self.loaded.append(url)
        return Texture(url=url, image=make_image())


class FakeClient:
    """Stands in for GalleryApiClient without any network access."""

    base_url = "http://gallery.test/"

    def __init__(self, manifest=None, upload_result=None, fail_manifest=False, fail_upload=False):
        self.manifest = manifest or []
        self.upload_result = upload_result or UploadResponse(image_url="/images/abc.png", id="abc.png")
        self.fail_manifest = fail_manifest
        self.fail_upload = fail_upload
        self.uploads = []
        # Uploads block until released so tests can observe the preview state
        self.release = threading.Event()
        self.release.set()

    def fetch_manifest(self):
        if self.fail_manifest:
            raise GalleryApiError("manifest unavailable")
        return [ManifestEntry(url=url) for url in self.manifest]

    def upload_image(self, path, media_type, filename=None):
        self.uploads.append((path, media_type, filename))
        self.release.wait(timeout=5)
        if self.fail_upload:
            raise GalleryApiError("connection refused")
        return self.upload_result


@pytest.fixture
def texture_loader():
    return FakeTextureLoader()
