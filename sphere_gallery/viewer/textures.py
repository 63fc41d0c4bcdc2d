"""
Texture loading for gallery panels.
Images are fetched from the gallery server (or read from a local preview
file) and decoded with Pillow.
"""
import io
import logging
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Optional
from urllib.parse import urljoin, urlparse
from urllib.request import url2pathname

import requests
from PIL import Image, ImageOps, UnidentifiedImageError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Texture:
    """
    Image bound to a panel face.

    ``image`` is None when the source could not be loaded; the face then
    renders without a map.
    """
    url: str
    image: Optional[Image.Image] = None
    mirrored: bool = False

    def mirror(self) -> "Texture":
        """
        Return the horizontally mirrored copy used on the back face.
        """
        image = ImageOps.mirror(self.image) if self.image is not None else None
        return replace(self, image=image, mirrored=not self.mirrored)


def local_file_path(url: str) -> Optional[Path]:
    """
    Filesystem path of a file:// URL, or None for any other scheme.
    """
    parsed = urlparse(url)
    if parsed.scheme != "file":
        return None
    return Path(url2pathname(parsed.path))


class TextureLoader:
    """
    Loads textures from file:// preview references or server URLs.

    Relative URLs such as "/images/abc.png" are resolved against the
    gallery server base URL.
    """

    def __init__(
        self,
        base_url: str,
        session: Optional[requests.Session] = None,
        timeout: float = 30.0
    ):
        self.base_url = base_url
        self.session = session or requests.Session()
        self.timeout = timeout

    def _read_bytes(self, url: str) -> bytes:
        path = local_file_path(url)
        if path is not None:
            return path.read_bytes()

        response = self.session.get(urljoin(self.base_url, url), timeout=self.timeout)
        response.raise_for_status()
        return response.content

    def load(self, url: str) -> Texture:
        """
        Load a texture.

        Args:
            url: file:// preview URI, absolute URL or server-relative URL

        Returns:
            Texture: Decoded texture, or an empty texture if loading failed
        """
        try:
            data = self._read_bytes(url)
            image = Image.open(io.BytesIO(data))
            image.load()
        except (OSError, requests.RequestException, UnidentifiedImageError, Image.DecompressionBombError) as e:
            logger.warning(f"Failed to load texture {url}: {str(e)}")
            return Texture(url=url)

        logger.debug(f"Loaded texture {url} ({image.size[0]}x{image.size[1]}, {image.mode})")
        return Texture(url=url, image=image)
