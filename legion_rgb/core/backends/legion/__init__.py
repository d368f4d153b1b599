"""Lenovo Legion 4-zone (ITE 0x048d:c9xx) keyboard backend."""

from .backend import KNOWN_DEVICES, LegionBackend, get_keyboard
from .device import Keyboard
from .protocol import EffectType, LightingState, build_payload

__all__ = [
    "EffectType",
    "KNOWN_DEVICES",
    "Keyboard",
    "LegionBackend",
    "LightingState",
    "build_payload",
    "get_keyboard",
]
