"""
Random placement of panels on the placement shell around the viewer.
"""
import math
import random
from typing import Optional

import numpy as np

from sphere_gallery.viewer.geometry import vec3

MIN_RADIUS = 10.0
MAX_RADIUS = 14.0
MAX_HEIGHT = 4.0


class PlacementGenerator:
    """Samples points on a spherical shell with a clamped vertical extent.

    Radius is uniform in ``[min_radius, max_radius)``, azimuth uniform in
    ``[0, 2*pi)`` and height uniform in ``[-max_height, max_height]``. The
    horizontal radius is ``sqrt(radius**2 - height**2)``, so the height bound
    must stay below the inner radius.
    """

    def __init__(
        self,
        min_radius: float = MIN_RADIUS,
        max_radius: float = MAX_RADIUS,
        max_height: float = MAX_HEIGHT,
        rng: Optional[random.Random] = None,
    ):
        if not 0 < min_radius <= max_radius:
            raise ValueError(f"Invalid radius range [{min_radius}, {max_radius})")
        if not 0 <= max_height < min_radius:
            raise ValueError(
                f"Height bound {max_height} must be below the inner radius {min_radius}"
            )
        self.min_radius = min_radius
        self.max_radius = max_radius
        self.max_height = max_height
        self._rng = rng or random.Random()

    def sample(self) -> np.ndarray:
        """Return a new position on the shell."""
        radius = self.min_radius + self._rng.random() * (self.max_radius - self.min_radius)
        theta = self._rng.random() * math.pi * 2
        y = (self._rng.random() - 0.5) * 2 * self.max_height

        horizontal_radius = math.sqrt(radius * radius - y * y)
        x = horizontal_radius * math.cos(theta)
        z = horizontal_radius * math.sin(theta)

        return vec3(x, y, z)
