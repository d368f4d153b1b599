"""Reactive typing effects package."""

from __future__ import annotations

from .fade import run_fade
from .input import KeyEvent, KeyListener, drain_key_events, open_key_listener, try_open_evdev_keyboards
from .ripple import RippleMove, advance, force_pressed, run_ripple
from .zones import KEY_ZONES, zone_for_key

__all__ = [
    "KEY_ZONES",
    "KeyEvent",
    "KeyListener",
    "RippleMove",
    "advance",
    "drain_key_events",
    "force_pressed",
    "open_key_listener",
    "run_fade",
    "run_ripple",
    "try_open_evdev_keyboards",
    "zone_for_key",
]
