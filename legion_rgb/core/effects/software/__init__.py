"""Host-driven (CPU) effects package."""

from __future__ import annotations

from .custom import run_custom_effect
from .effects import run_christmas, run_disco, run_lightning, run_smooth_wave, run_swipe
from .temperature import find_temperature_sensor, run_temperature, temperature_target

__all__ = [
    "find_temperature_sensor",
    "run_christmas",
    "run_custom_effect",
    "run_disco",
    "run_lightning",
    "run_smooth_wave",
    "run_swipe",
    "run_temperature",
    "temperature_target",
]
