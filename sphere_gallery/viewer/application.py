"""
Viewer application context.

Owns the scene graph, camera, look controls, gallery collection, overlay and
pipelines, dispatches input events to them and runs the per-frame tick.
"""
import asyncio
import logging
import math
import time
from typing import Optional, Sequence

from sphere_gallery.config import Settings, settings as default_settings
from sphere_gallery.viewer.camera import PerspectiveCamera, screen_to_ndc
from sphere_gallery.viewer.client import GalleryApiClient
from sphere_gallery.viewer.controls import LEFT_BUTTON, LookControls
from sphere_gallery.viewer.gallery import GalleryCollection, GalleryItemFactory, Panel
from sphere_gallery.viewer.overlay import ImageOverlay
from sphere_gallery.viewer.persistence import load_persistent_images
from sphere_gallery.viewer.picking import Picker
from sphere_gallery.viewer.placement import PlacementGenerator
from sphere_gallery.viewer.scene import Renderer, Scene
from sphere_gallery.viewer.textures import TextureLoader
from sphere_gallery.viewer.uploads import DroppedFile, UploadPipeline

logger = logging.getLogger(__name__)

# Idle motion of the panels
WAVE_SPEED = 0.5
SWAY_AMPLITUDE = 0.05
BOB_AMPLITUDE = 0.002


class Clock:
    """Elapsed and per-frame time, in seconds."""

    def __init__(self, now=time.perf_counter):
        self._now = now
        self._start = now()
        self._last = self._start
        self.elapsed_time = 0.0

    def get_delta(self) -> float:
        current = self._now()
        delta = current - self._last
        self._last = current
        self.elapsed_time = current - self._start
        return delta


class Application:
    """
    The running viewer.

    Args:
        width: Render surface width in pixels
        height: Render surface height in pixels
        client: API client (defaults to one built from settings)
        texture_loader: Texture loader (defaults to one built from settings)
        renderer: Optional drawing backend
        placement: Optional placement generator (seedable for tests)
        settings: Settings providing the server URL and timeout
    """

    def __init__(
        self,
        width: int,
        height: int,
        client: Optional[GalleryApiClient] = None,
        texture_loader=None,
        renderer: Optional[Renderer] = None,
        placement: Optional[PlacementGenerator] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
    ):
        settings = settings or default_settings
        self.width = width
        self.height = height

        self.scene = Scene()
        self.camera = PerspectiveCamera(aspect=width / height)
        self.controls = LookControls(self.camera)
        self.gallery = GalleryCollection()
        self.overlay = ImageOverlay()
        self.picker = Picker(self.camera)
        self.renderer = renderer
        self.clock = clock or Clock()

        self.client = client or GalleryApiClient(
            settings.GALLERY_SERVER_URL, timeout=settings.REQUEST_TIMEOUT
        )
        load_texture = texture_loader or TextureLoader(
            settings.GALLERY_SERVER_URL, timeout=settings.REQUEST_TIMEOUT
        ).load
        self.factory = GalleryItemFactory(
            self.scene, self.gallery, self.camera, load_texture, placement
        )
        self.uploads = UploadPipeline(self.client, self.factory, load_texture)

        if self.renderer is not None:
            self.renderer.set_size(width, height)

    def start(self) -> None:
        """Populate the gallery from the server manifest."""
        logger.info(f"Loading gallery from {self.client.base_url}")
        load_persistent_images(self.client, self.factory)

    # Input events

    def on_mouse_down(self, button: int) -> None:
        self.controls.on_mouse_down(button)

    def on_mouse_up(self, button: int) -> None:
        self.controls.on_mouse_up(button)

    def on_mouse_leave(self) -> None:
        self.controls.on_mouse_leave()

    def on_mouse_move(self, movement_x: float, movement_y: float) -> None:
        self.controls.on_mouse_move(movement_x, movement_y)

    def on_click(self, button: int, x: float, y: float) -> Optional[Panel]:
        """
        Open the overlay for the panel under a left click.

        Args:
            button: Mouse button index
            x: Pixel column, from the left edge
            y: Pixel row, from the top edge

        Returns:
            Optional[Panel]: The panel that was hit, if any
        """
        if button != LEFT_BUTTON:
            return None
        ndc_x, ndc_y = screen_to_ndc(x, y, self.width, self.height)
        panel = self.picker.pick(ndc_x, ndc_y, self.gallery)
        if panel is not None:
            self.overlay.open(panel.url)
        return panel

    def on_drop(self, files: Sequence[DroppedFile]) -> Optional[Panel]:
        self.controls.unlock()
        return self.uploads.handle_drop(files)

    def on_overlay_close(self) -> None:
        self.overlay.close()

    def on_resize(self, width: int, height: int) -> None:
        self.width = width
        self.height = height
        self.camera.set_aspect(width, height)
        if self.renderer is not None:
            self.renderer.set_size(width, height)

    # Frame loop

    def animate(self, elapsed: float) -> None:
        """Apply the idle sway and bob to every panel."""
        for panel in self.gallery:
            wave = math.sin(elapsed * WAVE_SPEED + panel.animation_phase)
            panel.rotation[1] = panel.base_rotation + wave * SWAY_AMPLITUDE
            panel.position[1] += wave * BOB_AMPLITUDE

    def tick(self) -> None:
        delta = self.clock.get_delta()
        self.animate(self.clock.elapsed_time)
        self.controls.update(delta)
        if self.renderer is not None:
            self.renderer.render(self.scene, self.camera)

    async def run(self, frame_interval: float = 1 / 60) -> None:
        """Load the gallery, then tick until cancelled."""
        self.start()
        while True:
            self.tick()
            await asyncio.sleep(frame_interval)
