"""
Perspective camera with yaw/pitch look rotation.
"""
import math
from typing import Tuple

import numpy as np

from sphere_gallery.viewer.geometry import normalize, rotation_x, rotation_y, vec3

DEFAULT_FOV = 35.0  # vertical, degrees
DEFAULT_NEAR = 0.1
DEFAULT_FAR = 1000.0


class PerspectiveCamera:
    """Camera looking down its local -Z axis.

    Orientation is a yaw (around world Y) followed by a pitch (around the
    camera's X axis), i.e. ``R = Ry(yaw) @ Rx(pitch)``.
    """

    def __init__(
        self,
        fov: float = DEFAULT_FOV,
        aspect: float = 1.0,
        near: float = DEFAULT_NEAR,
        far: float = DEFAULT_FAR,
    ):
        self.fov = fov
        self.aspect = aspect
        self.near = near
        self.far = far
        self.position = vec3()
        self.yaw = 0.0
        self.pitch = 0.0

    @property
    def rotation(self) -> np.ndarray:
        return rotation_y(self.yaw) @ rotation_x(self.pitch)

    def get_world_direction(self) -> np.ndarray:
        """Unit vector the camera is looking along."""
        return self.rotation @ vec3(0, 0, -1)

    def set_aspect(self, width: int, height: int) -> None:
        if height > 0:
            self.aspect = width / height

    def ray_from_ndc(self, ndc_x: float, ndc_y: float) -> Tuple[np.ndarray, np.ndarray]:
        """Ray through a point in normalized device coordinates.

        Args:
            ndc_x: Horizontal coordinate in [-1, 1], right is positive
            ndc_y: Vertical coordinate in [-1, 1], up is positive

        Returns:
            Tuple of (origin, normalized direction) in world space
        """
        tan_half = math.tan(math.radians(self.fov) / 2)
        local = vec3(ndc_x * tan_half * self.aspect, ndc_y * tan_half, -1.0)
        return self.position.copy(), normalize(self.rotation @ local)


def screen_to_ndc(x: float, y: float, width: int, height: int) -> Tuple[float, float]:
    """Convert pixel coordinates (origin top-left) to normalized device coordinates."""
    return (x / width) * 2 - 1, -(y / height) * 2 + 1
