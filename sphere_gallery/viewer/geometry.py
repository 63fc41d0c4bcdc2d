"""
Vector and rotation helpers for the gallery scene.

Conventions follow a right-handed, y-up world: cameras look down their
local -Z axis, and a panel oriented with :func:`look_at` points its local +Z
(front face) at the target. Euler angles use XYZ order, i.e. the rotation
matrix is ``Rx @ Ry @ Rz``.
"""
import logging
from typing import Optional

import numpy as np

logger = logging.getLogger(__name__)

UP = np.array([0.0, 1.0, 0.0])
ORIGIN = np.zeros(3)


def vec3(x: float = 0.0, y: float = 0.0, z: float = 0.0) -> np.ndarray:
    """Return a float 3-vector."""
    return np.array([x, y, z], dtype=float)


def normalize(v: np.ndarray) -> np.ndarray:
    norm = np.linalg.norm(v)
    if norm == 0:
        return v
    return v / norm


def rotation_x(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[1, 0, 0], [0, c, -s], [0, s, c]])


def rotation_y(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, 0, s], [0, 1, 0], [-s, 0, c]])


def rotation_z(angle: float) -> np.ndarray:
    c, s = np.cos(angle), np.sin(angle)
    return np.array([[c, -s, 0], [s, c, 0], [0, 0, 1]])


def euler_to_matrix(euler: np.ndarray) -> np.ndarray:
    """Convert XYZ-order Euler angles to a 3x3 rotation matrix."""
    x, y, z = euler
    return rotation_x(x) @ rotation_y(y) @ rotation_z(z)


def matrix_to_euler(m: np.ndarray) -> np.ndarray:
    """Convert a 3x3 rotation matrix to XYZ-order Euler angles.

    Args:
        m: Pure rotation matrix

    Returns:
        Array of (x, y, z) angles in radians
    """
    y = np.arcsin(np.clip(m[0, 2], -1.0, 1.0))
    if abs(m[0, 2]) < 0.9999999:
        x = np.arctan2(-m[1, 2], m[2, 2])
        z = np.arctan2(-m[0, 1], m[0, 0])
    else:
        # Gimbal lock: fold the z rotation into x
        x = np.arctan2(m[2, 1], m[1, 1])
        z = 0.0
    return np.array([x, y, z])


def look_at(position: np.ndarray, target: np.ndarray, up: np.ndarray = UP) -> np.ndarray:
    """Rotation matrix turning an object's +Z axis from ``position`` toward ``target``.

    Args:
        position: Object position
        target: Point to face
        up: World up vector

    Returns:
        3x3 rotation matrix whose columns are the object's local axes
    """
    z_axis = target - position
    if np.linalg.norm(z_axis) == 0:
        z_axis = vec3(0, 0, 1)
    z_axis = normalize(z_axis)

    x_axis = np.cross(up, z_axis)
    if np.linalg.norm(x_axis) == 0:
        # Looking straight up or down: nudge forward off the up axis
        logger.debug("look_at direction is parallel to up, nudging it")
        z_axis = normalize(z_axis + vec3(1e-4, 0, 1e-4))
        x_axis = np.cross(up, z_axis)
    x_axis = normalize(x_axis)
    y_axis = np.cross(z_axis, x_axis)

    return np.column_stack((x_axis, y_axis, z_axis))


def intersect_ray_box(
    origin: np.ndarray,
    direction: np.ndarray,
    center: np.ndarray,
    rotation: np.ndarray,
    half_extents: np.ndarray,
) -> Optional[float]:
    """Distance along a ray to an oriented box, or None on a miss.

    The ray is transformed into the box's local frame and tested with the
    slab method.

    Args:
        origin: Ray origin in world space
        direction: Normalized ray direction in world space
        center: Box center in world space
        rotation: 3x3 box rotation (local to world)
        half_extents: Half sizes along the local x, y and z axes

    Returns:
        Distance to the nearest intersection in front of the origin, or None
    """
    local_origin = rotation.T @ (origin - center)
    local_dir = rotation.T @ direction

    t_min, t_max = -np.inf, np.inf
    for axis in range(3):
        if abs(local_dir[axis]) < 1e-12:
            # Parallel to this slab: must already be inside it
            if abs(local_origin[axis]) > half_extents[axis]:
                return None
            continue
        t1 = (-half_extents[axis] - local_origin[axis]) / local_dir[axis]
        t2 = (half_extents[axis] - local_origin[axis]) / local_dir[axis]
        t_min = max(t_min, min(t1, t2))
        t_max = min(t_max, max(t1, t2))
        if t_min > t_max:
            return None

    if t_max < 0:
        return None
    return float(t_min if t_min >= 0 else t_max)
