from __future__ import annotations

from .base import DeviceIdentifier, HidTransport, ProbeResult
from .legion import Keyboard, LegionBackend, get_keyboard

__all__ = [
    "DeviceIdentifier",
    "HidTransport",
    "Keyboard",
    "LegionBackend",
    "ProbeResult",
    "get_keyboard",
]
