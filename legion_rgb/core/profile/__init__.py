from __future__ import annotations

from .custom_effect import CustomEffect, EffectStep, StepType
from .models import Brightness, Direction, KeyboardZone, Profile, zones_from_array

__all__ = [
    "Brightness",
    "CustomEffect",
    "Direction",
    "EffectStep",
    "KeyboardZone",
    "Profile",
    "StepType",
    "zones_from_array",
]
