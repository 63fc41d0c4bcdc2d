"""
Ray-based click picking of gallery panels.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional

from sphere_gallery.viewer.camera import PerspectiveCamera
from sphere_gallery.viewer.gallery import Panel


@dataclass(frozen=True)
class Intersection:
    distance: float
    panel: Panel


class Picker:
    def __init__(self, camera: PerspectiveCamera):
        self.camera = camera

    def intersect(self, ndc_x: float, ndc_y: float, panels: Iterable[Panel]) -> List[Intersection]:
        """All panels hit by the ray through an NDC point, nearest first."""
        origin, direction = self.camera.ray_from_ndc(ndc_x, ndc_y)
        hits = []
        for panel in panels:
            distance = panel.intersect(origin, direction)
            if distance is not None:
                hits.append(Intersection(distance, panel))
        hits.sort(key=lambda hit: hit.distance)
        return hits

    def pick(self, ndc_x: float, ndc_y: float, panels: Iterable[Panel]) -> Optional[Panel]:
        """Nearest panel under an NDC point, or None."""
        hits = self.intersect(ndc_x, ndc_y, panels)
        return hits[0].panel if hits else None
