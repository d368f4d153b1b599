from __future__ import annotations

import logging
from typing import Any, Callable, Final, Optional, Protocol, Sequence, Tuple

import mss
from mss.exception import ScreenShotError
from PIL import Image, ImageChops

from legion_rgb.core.utils.exceptions import CaptureInvalidData

logger = logging.getLogger(__name__)

# Frames are compared at this size to detect "nothing changed".
_COMPARE_SIZE: Final[Tuple[int, int]] = (32, 18)

# mss lists the virtual screen spanning all monitors at 0, then each monitor.
PRIMARY_MONITOR: Final[int] = 1


class FrameCapturer(Protocol):
    def grab(self) -> Image.Image:
        """Return the next screen frame.

        Raises BlockingIOError when no new frame is available yet and
        CaptureInvalidData when the source can no longer be used.
        """

    def close(self) -> None: ...


def select_monitor(monitors: Sequence[dict], wanted: int) -> dict:
    """Return the area of monitor *wanted*, or the primary when it is not present."""

    if len(monitors) <= PRIMARY_MONITOR:
        raise CaptureInvalidData("no monitor available for capture")
    if PRIMARY_MONITOR <= wanted < len(monitors):
        return monitors[wanted]
    logger.warning(
        "Monitor %d not found (available: %d..%d), capturing the primary monitor",
        wanted,
        PRIMARY_MONITOR,
        len(monitors) - 1,
    )
    return monitors[PRIMARY_MONITOR]


class MonitorGrabber:
    """Grab one monitor with mss.

    The mss handle is created on the first grab so it lives on the thread that
    captures; the monitor is resolved at the same time.
    """

    def __init__(self, monitor: int = PRIMARY_MONITOR, *, factory: Optional[Callable[[], Any]] = None) -> None:
        self._monitor = int(monitor)
        self._factory = factory if factory is not None else mss.mss
        self._sct: Any = None
        self._area: Optional[dict] = None

    @property
    def area(self) -> Optional[dict]:
        return self._area

    def __call__(self) -> Image.Image:
        if self._sct is None:
            sct = self._factory()
            try:
                self._area = select_monitor(sct.monitors, self._monitor)
            except CaptureInvalidData:
                sct.close()
                raise
            self._sct = sct
        shot = self._sct.grab(self._area)
        return Image.frombytes("RGB", shot.size, shot.bgra, "raw", "BGRX")

    def close(self) -> None:
        sct, self._sct = self._sct, None
        if sct is not None:
            sct.close()


class ScreenCapturer:
    """Grab frames from one monitor.

    The first frame fixes the expected resolution; a later frame of a different
    size (monitor change, resolution switch) is reported as CaptureInvalidData.
    Identical consecutive frames are reported as BlockingIOError.
    """

    def __init__(
        self,
        monitor: int = PRIMARY_MONITOR,
        *,
        grab: Optional[Callable[[], Image.Image]] = None,
        skip_unchanged: bool = True,
    ) -> None:
        self._source: Optional[MonitorGrabber] = None
        if grab is None:
            self._source = MonitorGrabber(monitor)
            grab = self._source
        self._grab = grab
        self._skip_unchanged = skip_unchanged
        self._size: Optional[Tuple[int, int]] = None
        self._last: Optional[Image.Image] = None

    @property
    def size(self) -> Optional[Tuple[int, int]]:
        return self._size

    def grab(self) -> Image.Image:
        try:
            frame = self._grab()
        except (OSError, ScreenShotError) as exc:
            raise CaptureInvalidData(f"screen grab failed: {exc}") from exc

        if frame is None or frame.width <= 0 or frame.height <= 0:
            raise CaptureInvalidData("screen grab returned no image")

        if self._size is None:
            self._size = frame.size
        elif frame.size != self._size:
            old = self._size
            self._size = None
            self._last = None
            raise CaptureInvalidData(f"display size changed from {old} to {frame.size}")

        thumb = frame.convert("RGB").resize(_COMPARE_SIZE, Image.Resampling.BOX)
        if self._skip_unchanged and self._last is not None:
            if ImageChops.difference(thumb, self._last).getbbox() is None:
                raise BlockingIOError("screen unchanged since last frame")
        self._last = thumb
        return frame

    def close(self) -> None:
        self._last = None
        if self._source is not None:
            self._source.close()


def open_screen_capturer(monitor: int = PRIMARY_MONITOR) -> FrameCapturer:
    return ScreenCapturer(monitor)
