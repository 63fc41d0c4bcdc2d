"""
Gallery panels and the factory that places them in the scene.
"""
import enum
import logging
from dataclasses import dataclass, field
from typing import Callable, Iterator, List, Optional, Tuple
from urllib.parse import unquote

import numpy as np

from sphere_gallery.viewer.camera import PerspectiveCamera
from sphere_gallery.viewer.geometry import ORIGIN, euler_to_matrix, intersect_ray_box, look_at, matrix_to_euler
from sphere_gallery.viewer.placement import PlacementGenerator
from sphere_gallery.viewer.scene import Scene
from sphere_gallery.viewer.textures import Texture

logger = logging.getLogger(__name__)

FRAME_COLOR = 0x333333
PANEL_SIZE = (2.0, 2.0, 0.001)
# Distance of optimistic previews in front of the camera
PREVIEW_DISTANCE = 4.0


class Placement(enum.Enum):
    RANDOM = "random"
    IN_FRONT_OF_VIEWER = "in-front-of-viewer"


@dataclass
class Material:
    color: Optional[int] = None
    map: Optional[Texture] = None


def _frame_materials() -> Tuple[Material, ...]:
    return tuple(Material(color=FRAME_COLOR) for _ in range(4))


@dataclass
class PanelFaces:
    """
    Materials of a panel box.

    ``front`` faces the panel's local +Z and shows the image as-is; ``back``
    shows the mirrored copy so the picture reads correctly from behind too.
    """
    front: Material = field(default_factory=Material)
    back: Material = field(default_factory=Material)
    frame: Tuple[Material, ...] = field(default_factory=_frame_materials)

    def set_texture(self, texture: Texture) -> None:
        self.front.map = texture
        self.back.map = texture.mirror()


@dataclass(eq=False)
class Panel:
    """
    A double-sided image panel: the unit of content in the gallery.
    """
    url: str
    position: np.ndarray
    rotation: np.ndarray  # XYZ Euler angles
    base_rotation: float
    animation_phase: int
    faces: PanelFaces = field(default_factory=PanelFaces)
    size: Tuple[float, float, float] = PANEL_SIZE

    @property
    def id(self) -> str:
        """Backing filename: last path segment of the current URL."""
        return unquote(self.url.rstrip("/").rsplit("/", 1)[-1])

    @property
    def rotation_matrix(self) -> np.ndarray:
        return euler_to_matrix(self.rotation)

    def set_image(self, url: str, texture: Texture) -> None:
        """
        Swap both face textures and point the panel at a new URL.
        """
        self.faces.set_texture(texture)
        self.url = url

    def intersect(self, origin: np.ndarray, direction: np.ndarray) -> Optional[float]:
        """Distance along the ray to this panel, or None."""
        half_extents = np.array(self.size) / 2
        return intersect_ray_box(origin, direction, self.position, self.rotation_matrix, half_extents)


class GalleryCollection:
    """
    Insertion-ordered panels. Only ever appended to.
    """

    def __init__(self):
        self._panels: List[Panel] = []

    def append(self, panel: Panel) -> None:
        self._panels.append(panel)

    def __iter__(self) -> Iterator[Panel]:
        return iter(self._panels)

    def __len__(self) -> int:
        return len(self._panels)

    def __getitem__(self, index: int) -> Panel:
        return self._panels[index]


class GalleryItemFactory:
    """
    Builds panels, orients them and registers them in the scene and gallery.

    Args:
        scene: Scene graph the panels are added to
        gallery: Collection the panels are appended to
        camera: Viewer camera, used for previews placed in front of it
        load_texture: Callable turning a URL into a Texture
        placement: Generator for random positions
    """

    def __init__(
        self,
        scene: Scene,
        gallery: GalleryCollection,
        camera: PerspectiveCamera,
        load_texture: Callable[[str], Texture],
        placement: Optional[PlacementGenerator] = None,
    ):
        self.scene = scene
        self.gallery = gallery
        self.camera = camera
        self.load_texture = load_texture
        self.placement = placement or PlacementGenerator()

    def _position_and_target(self, mode: Placement) -> Tuple[np.ndarray, np.ndarray]:
        if mode is Placement.IN_FRONT_OF_VIEWER:
            forward = self.camera.get_world_direction()
            position = self.camera.position + forward * PREVIEW_DISTANCE
            return position, self.camera.position.copy()
        return self.placement.sample(), ORIGIN

    def create(self, url: str, mode: Placement = Placement.RANDOM) -> Panel:
        """
        Create a panel showing the image at ``url``.

        Args:
            url: Image URL (server URL or file:// preview)
            mode: Where to put the panel

        Returns:
            Panel: The new panel, already in the scene and the gallery
        """
        position, target = self._position_and_target(mode)
        rotation = matrix_to_euler(look_at(position, target))

        panel = Panel(
            url=url,
            position=position,
            rotation=rotation,
            base_rotation=float(rotation[1]),
            animation_phase=len(self.gallery),
        )
        panel.faces.set_texture(self.load_texture(url))

        self.scene.add(panel)
        self.gallery.append(panel)
        logger.debug(f"Added panel {panel.id} at {np.round(position, 2)} ({mode.value})")
        return panel
