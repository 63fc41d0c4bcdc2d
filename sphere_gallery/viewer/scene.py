"""
Scene graph container handed to the renderer.
"""
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol

import numpy as np

from sphere_gallery.viewer.geometry import vec3

BACKGROUND_COLOR = 0x0F0F0F


@dataclass
class Light:
    kind: str  # "ambient" or "point"
    color: int
    intensity: float
    position: Optional[np.ndarray] = None


def default_lights() -> List[Light]:
    return [
        Light("ambient", 0xFFFFFF, 0.3),
        Light("point", 0xFFFFFF, 0.8, position=vec3(5, 5, 5)),
    ]


@dataclass
class Scene:
    background: int = BACKGROUND_COLOR
    lights: List[Light] = field(default_factory=default_lights)
    children: List[Any] = field(default_factory=list)

    def add(self, node: Any) -> None:
        self.children.append(node)


class Renderer(Protocol):
    """Drawing backend. Rendering itself happens outside this package."""

    def render(self, scene: Scene, camera: Any) -> None: ...

    def set_size(self, width: int, height: int) -> None: ...
