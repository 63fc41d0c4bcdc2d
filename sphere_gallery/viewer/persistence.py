"""
Startup loading of previously uploaded images.
"""
import logging
from typing import List

from sphere_gallery.viewer.client import GalleryApiClient, GalleryApiError
from sphere_gallery.viewer.gallery import GalleryItemFactory, Panel, Placement

logger = logging.getLogger(__name__)


def load_persistent_images(client: GalleryApiClient, factory: GalleryItemFactory) -> List[Panel]:
    """
    Create one randomly placed panel per manifest record.

    Fails soft: if the manifest is unavailable or malformed the error is
    logged and the gallery starts empty. There is no retry.

    Args:
        client: API client used to fetch the manifest
        factory: Factory that builds and registers the panels

    Returns:
        List[Panel]: Panels created, in manifest order
    """
    try:
        entries = client.fetch_manifest()
    except GalleryApiError as e:
        logger.error(f"Failed to load persistent images: {str(e)}")
        return []

    panels = [factory.create(entry.url, Placement.RANDOM) for entry in entries]
    logger.info(f"Loaded {len(panels)} persistent image(s)")
    return panels
