"""
HTTP client for the gallery server.
Wraps the manifest and upload endpoints used by the viewer.
"""
import logging
from pathlib import Path
from typing import List, Optional, Union
from urllib.parse import urljoin

import requests
from pydantic import TypeAdapter, ValidationError

from sphere_gallery.schemas import ManifestEntry, UploadResponse

logger = logging.getLogger(__name__)

MANIFEST_PATH = "images.json"
UPLOAD_PATH = "/api/upload"

_manifest_adapter = TypeAdapter(List[ManifestEntry])


class GalleryApiError(Exception):
    """Raised when the gallery server cannot be reached or answers unexpectedly."""


class GalleryApiClient:
    """
    Blocking client for the gallery server endpoints.

    Args:
        base_url: Server root, e.g. "http://localhost:3001"
        session: Optional requests session to reuse connections
        timeout: Per-request timeout in seconds
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0
    ):
        self.base_url = base_url if base_url.endswith("/") else base_url + "/"
        self.session = session or requests.Session()
        self.timeout = timeout

    def _url(self, path: str) -> str:
        return urljoin(self.base_url, path)

    def fetch_manifest(self) -> List[ManifestEntry]:
        """
        Fetch the list of persisted image URLs.

        Returns:
            List[ManifestEntry]: Records in manifest order

        Raises:
            GalleryApiError: On network errors, non-success status or a malformed manifest
        """
        try:
            response = self.session.get(self._url(MANIFEST_PATH), timeout=self.timeout)
            response.raise_for_status()
            return _manifest_adapter.validate_json(response.content)
        except requests.RequestException as e:
            raise GalleryApiError(f"Could not load manifest: {e}") from e
        except ValidationError as e:
            raise GalleryApiError(f"Malformed manifest: {e}") from e

    def upload_image(
        self,
        path: Union[str, Path],
        media_type: str,
        filename: Optional[str] = None
    ) -> UploadResponse:
        """
        Upload a local image file as multipart field "image".

        Args:
            path: Local file to send
            media_type: Declared MIME type of the file
            filename: Name to send (defaults to the file's name)

        Returns:
            UploadResponse: Server-assigned URL and id

        Raises:
            GalleryApiError: On network errors, non-success status or an unexpected body
        """
        path = Path(path)
        try:
            with open(path, "rb") as f:
                response = self.session.post(
                    self._url(UPLOAD_PATH),
                    files={"image": (filename or path.name, f, media_type)},
                    timeout=self.timeout,
                )
            response.raise_for_status()
            return UploadResponse.model_validate_json(response.content)
        except (OSError, requests.RequestException) as e:
            raise GalleryApiError(f"Upload of {path.name} failed: {e}") from e
        except ValidationError as e:
            raise GalleryApiError(f"Unexpected upload response: {e}") from e
