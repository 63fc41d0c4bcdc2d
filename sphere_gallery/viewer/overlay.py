"""
Lightbox overlay showing a clicked panel's full-resolution image.
"""
import asyncio
import logging
from typing import Optional

logger = logging.getLogger(__name__)

# Length of the fade-out transition, in seconds
FADE_DELAY = 0.3


class ImageOverlay:
    """Visibility toggle plus the image currently displayed.

    Closing hides the overlay immediately but keeps ``image_url`` until the
    fade-out is over, so the next open never flashes the previous image.
    """

    def __init__(self, fade_delay: float = FADE_DELAY):
        self.fade_delay = fade_delay
        self.active = False
        self.image_url: Optional[str] = None
        self._pending_clear: Optional[asyncio.TimerHandle] = None

    def _cancel_pending_clear(self) -> None:
        if self._pending_clear is not None:
            self._pending_clear.cancel()
            self._pending_clear = None

    def open(self, url: str) -> None:
        self._cancel_pending_clear()
        self.image_url = url
        self.active = True
        logger.info(f"Opened overlay for {url}")

    def close(self) -> None:
        if not self.active:
            return
        self.active = False
        self._cancel_pending_clear()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No event loop to wait on: nothing is fading, clear right away
            self._clear()
            return
        self._pending_clear = loop.call_later(self.fade_delay, self._clear)

    def on_backdrop_click(self) -> None:
        self.close()

    def _clear(self) -> None:
        self._pending_clear = None
        self.image_url = None
