"""
Pointer-lock look controls driven by the right mouse button.
"""
import enum
import logging
import math

from sphere_gallery.viewer.camera import PerspectiveCamera

logger = logging.getLogger(__name__)

LEFT_BUTTON = 0
RIGHT_BUTTON = 2

# Radians of rotation per pixel of mouse movement
POINTER_SPEED = 0.002
# Polar limits around the horizon, measured from straight up
MIN_POLAR_ANGLE = math.pi / 2 - 0.5
MAX_POLAR_ANGLE = math.pi / 2 + 0.5


class LockState(enum.Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"


class LookControls:
    """Two-state look controller.

    ``UNLOCKED -> LOCKED`` when the right button goes down;
    ``LOCKED -> UNLOCKED`` when the right button goes up or the pointer
    leaves the render surface. Mouse movement turns the camera only while
    locked.
    """

    def __init__(
        self,
        camera: PerspectiveCamera,
        pointer_speed: float = POINTER_SPEED,
        min_polar_angle: float = MIN_POLAR_ANGLE,
        max_polar_angle: float = MAX_POLAR_ANGLE,
    ):
        self.camera = camera
        self.pointer_speed = pointer_speed
        self.min_polar_angle = min_polar_angle
        self.max_polar_angle = max_polar_angle
        self.state = LockState.UNLOCKED

    @property
    def is_locked(self) -> bool:
        return self.state is LockState.LOCKED

    def lock(self) -> None:
        if not self.is_locked:
            self.state = LockState.LOCKED
            logger.debug("Pointer locked")

    def unlock(self) -> None:
        if self.is_locked:
            self.state = LockState.UNLOCKED
            logger.debug("Pointer unlocked")

    def on_mouse_down(self, button: int) -> None:
        if button == RIGHT_BUTTON:
            self.lock()

    def on_mouse_up(self, button: int) -> None:
        if button == RIGHT_BUTTON:
            self.unlock()

    def on_mouse_leave(self) -> None:
        self.unlock()

    def on_mouse_move(self, movement_x: float, movement_y: float) -> None:
        if not self.is_locked:
            return
        self.camera.yaw -= movement_x * self.pointer_speed
        pitch = self.camera.pitch - movement_y * self.pointer_speed
        self.camera.pitch = max(
            math.pi / 2 - self.max_polar_angle,
            min(math.pi / 2 - self.min_polar_angle, pitch),
        )

    def update(self, delta: float) -> None:
        # Look-only controls have no per-frame motion
        pass
