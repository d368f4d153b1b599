"""Lenovo Legion 4-zone keyboard lighting core."""

from __future__ import annotations

from .core.backends.legion import EffectType, Keyboard, LegionBackend, get_keyboard
from .core.effects.catalog import SwipeMode
from .core.effects.manager import EffectManager, OperationMode
from .core.effects.stop_signals import StopSignals
from .core.profile import Brightness, CustomEffect, Direction, EffectStep, KeyboardZone, Profile, StepType
from .core.utils.exceptions import (
    CaptureInvalidData,
    CreationErrorKind,
    DeviceNotFound,
    HidTransportError,
    LegionRGBError,
    ManagerCreationError,
    RangeError,
    RangeErrorKind,
)

__all__ = [
    "Brightness",
    "CaptureInvalidData",
    "CreationErrorKind",
    "CustomEffect",
    "DeviceNotFound",
    "Direction",
    "EffectManager",
    "EffectStep",
    "EffectType",
    "HidTransportError",
    "Keyboard",
    "KeyboardZone",
    "LegionBackend",
    "LegionRGBError",
    "ManagerCreationError",
    "OperationMode",
    "Profile",
    "RangeError",
    "RangeErrorKind",
    "StepType",
    "StopSignals",
    "SwipeMode",
    "get_keyboard",
]
