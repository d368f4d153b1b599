from __future__ import annotations

from enum import Enum


class LegionRGBError(Exception):
    """Base class for errors raised by the lighting core."""


class DeviceNotFound(LegionRGBError):
    """No connected USB device matched the known controller table."""


class RangeErrorKind(str, Enum):
    SPEED = "speed"
    BRIGHTNESS = "brightness"
    ZONE = "zone"


class RangeError(LegionRGBError, ValueError):
    """A caller-supplied value is outside the range the firmware accepts.

    Raised before any payload is encoded, so no device write has happened.
    """

    def __init__(self, kind: RangeErrorKind, value: int, lo: int, hi: int) -> None:
        self.kind = kind
        self.value = value
        self.lo = lo
        self.hi = hi
        super().__init__(f"{kind.value} {value!r} out of range [{lo}, {hi}]")


class HidTransportError(LegionRGBError):
    """Opening or writing the HID device failed at the OS/USB layer."""


class CreationErrorKind(str, Enum):
    ACQUIRE_KEYBOARD = "acquire_keyboard"
    INSTANCE_ALREADY_RUNNING = "instance_already_running"


class ManagerCreationError(LegionRGBError):
    def __init__(self, kind: CreationErrorKind, message: str = "") -> None:
        self.kind = kind
        super().__init__(message or kind.value)


class CaptureInvalidData(LegionRGBError):
    """Screen capture produced a frame that cannot be used (e.g. the display changed)."""


def is_device_disconnected(exc: Exception) -> bool:
    """Best-effort check for a disappeared device.

    Disconnects can surface as OSError, usb.core.USBError or a wrapped
    HidTransportError, so only errno and the message are inspected.
    """

    for e in _iter_exc_chain(exc):
        errno = getattr(e, "errno", None)
        if errno == 19:
            return True
        if "No such device" in str(e):
            return True
    return False


def is_device_busy(exc: Exception) -> bool:
    """Best-effort check for transient 'busy' errors."""

    for e in _iter_exc_chain(exc):
        errno = getattr(e, "errno", None)
        if errno == 16:
            return True
        if "Device or resource busy" in str(e):
            return True
    return False


def is_permission_denied(exc: Exception) -> bool:
    """Best-effort check for permission/authorization failures.

    Used to detect when hardware writes fail due to missing udev rules.
    """

    for e in _iter_exc_chain(exc):
        if isinstance(e, PermissionError):
            return True

        errno = getattr(e, "errno", None)
        if errno in (1, 13):
            # EPERM=1, EACCES=13
            return True

        msg = str(e).lower()
        if "permission denied" in msg or "access denied" in msg or "not permitted" in msg:
            return True
    return False


def _iter_exc_chain(exc: BaseException, *, max_depth: int = 10):
    cur: BaseException | None = exc
    depth = 0
    while cur is not None and depth < max_depth:
        yield cur
        nxt = cur.__cause__ or cur.__context__
        if nxt is cur:
            break
        cur = nxt
        depth += 1
