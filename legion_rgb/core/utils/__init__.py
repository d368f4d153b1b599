from __future__ import annotations

from .exceptions import (
    CaptureInvalidData,
    CreationErrorKind,
    DeviceNotFound,
    HidTransportError,
    LegionRGBError,
    ManagerCreationError,
    RangeError,
    RangeErrorKind,
    is_device_busy,
    is_device_disconnected,
    is_permission_denied,
)

__all__ = [
    "CaptureInvalidData",
    "CreationErrorKind",
    "DeviceNotFound",
    "HidTransportError",
    "LegionRGBError",
    "ManagerCreationError",
    "RangeError",
    "RangeErrorKind",
    "is_device_busy",
    "is_device_disconnected",
    "is_permission_denied",
]
