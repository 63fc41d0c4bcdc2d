"""
Drag-and-drop upload pipeline.

A drop is committed locally first: a preview panel appears in front of the
viewer straight from the local file. The upload then runs as a background
task and, once the server confirms it, the panel switches to the
server-hosted image and URL.
"""
import asyncio
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Optional, Sequence, Set

from sphere_gallery.viewer.client import GalleryApiClient, GalleryApiError
from sphere_gallery.viewer.gallery import GalleryItemFactory, Panel, Placement
from sphere_gallery.viewer.textures import Texture

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DroppedFile:
    """A file dropped on the viewer, with its declared media type."""
    path: Path
    media_type: str

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def is_image(self) -> bool:
        return bool(self.media_type) and self.media_type.startswith("image/")

    def preview_url(self) -> str:
        """Local reference used until the server URL is known."""
        return self.path.resolve().as_uri()


class UploadPipeline:
    """
    Optimistic preview followed by a background upload confirmation.

    Args:
        client: API client that performs the upload
        factory: Factory creating the preview panel
        load_texture: Callable loading the server-hosted texture
    """

    def __init__(
        self,
        client: GalleryApiClient,
        factory: GalleryItemFactory,
        load_texture: Callable[[str], Texture]
    ):
        self.client = client
        self.factory = factory
        self.load_texture = load_texture
        # Strong references keep fire-and-forget tasks alive until they finish
        self._tasks: Set[asyncio.Task] = set()

    @property
    def pending(self) -> int:
        return len(self._tasks)

    def handle_drop(self, files: Sequence[DroppedFile]) -> Optional[Panel]:
        """
        Handle a drop event.

        Only the first dropped file is considered; drops without a file or
        whose file is not declared as an image are ignored.

        Args:
            files: Files carried by the drop, in drop order

        Returns:
            Optional[Panel]: The preview panel, or None if the drop was ignored
        """
        dropped = files[0] if files else None
        if dropped is None or not dropped.is_image:
            return None

        # Raises before any panel exists when called outside the event loop
        loop = asyncio.get_running_loop()

        panel = self.factory.create(dropped.preview_url(), Placement.IN_FRONT_OF_VIEWER)
        logger.info(f"Showing local preview for {dropped.name}")

        task = loop.create_task(self._confirm(panel, dropped))
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return panel

    async def _confirm(self, panel: Panel, dropped: DroppedFile) -> None:
        try:
            result = await asyncio.to_thread(
                self.client.upload_image, dropped.path, dropped.media_type, dropped.name
            )
        except GalleryApiError as e:
            logger.warning(f"Upload failed, kept local preview: {str(e)}")
            return

        texture = await asyncio.to_thread(self.load_texture, result.image_url)
        panel.set_image(result.image_url, texture)
        logger.info(f"Upload confirmed: {dropped.name} -> {result.image_url}")

    async def drain(self) -> None:
        """Wait for every in-flight upload to finish."""
        while True:
            in_flight = [task for task in self._tasks if not task.done()]
            if not in_flight:
                return
            await asyncio.gather(*in_flight)
