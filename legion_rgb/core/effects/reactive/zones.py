"""Physical key to lighting zone map for the 4-zone Legion layout (evdev names)."""

from __future__ import annotations

from typing import Final, Optional

KEY_ZONES: Final[tuple[frozenset[str], ...]] = (
    frozenset(
        {
            "KEY_ESC", "KEY_F1", "KEY_F2", "KEY_F3", "KEY_F4",
            "KEY_GRAVE", "KEY_1", "KEY_2", "KEY_3", "KEY_4",
            "KEY_TAB", "KEY_Q", "KEY_W", "KEY_E",
            "KEY_CAPSLOCK", "KEY_A", "KEY_S", "KEY_D",
            "KEY_LEFTSHIFT", "KEY_Z", "KEY_X",
            "KEY_LEFTCTRL", "KEY_LEFTMETA", "KEY_LEFTALT",
        }
    ),
    frozenset(
        {
            "KEY_F5", "KEY_F6", "KEY_F7", "KEY_F8", "KEY_F9", "KEY_F10",
            "KEY_5", "KEY_6", "KEY_7", "KEY_8", "KEY_9",
            "KEY_R", "KEY_T", "KEY_Y", "KEY_U", "KEY_I",
            "KEY_F", "KEY_G", "KEY_H", "KEY_J", "KEY_K",
            "KEY_C", "KEY_V", "KEY_B", "KEY_N", "KEY_M", "KEY_COMMA",
            "KEY_SPACE", "KEY_RIGHTALT",
        }
    ),
    frozenset(
        {
            "KEY_F11", "KEY_F12", "KEY_INSERT", "KEY_DELETE",
            "KEY_0", "KEY_MINUS", "KEY_EQUAL", "KEY_BACKSPACE",
            "KEY_O", "KEY_P", "KEY_LEFTBRACE", "KEY_RIGHTBRACE", "KEY_ENTER",
            "KEY_L", "KEY_SEMICOLON", "KEY_APOSTROPHE", "KEY_BACKSLASH",
            "KEY_DOT", "KEY_SLASH", "KEY_RIGHTSHIFT", "KEY_RIGHTCTRL",
            "KEY_UP", "KEY_DOWN", "KEY_LEFT", "KEY_RIGHT",
        }
    ),
    frozenset(
        {
            "KEY_HOME", "KEY_END", "KEY_PAGEUP", "KEY_PAGEDOWN",
            "KEY_KPSLASH", "KEY_KPASTERISK", "KEY_KPMINUS",
            "KEY_KP7", "KEY_KP8", "KEY_KP9",
            "KEY_KP4", "KEY_KP5", "KEY_KP6", "KEY_KPPLUS",
            "KEY_KP1", "KEY_KP2", "KEY_KP3",
            "KEY_KP0", "KEY_KPDOT", "KEY_KPENTER", "KEY_NUMLOCK",
        }
    ),
)

_ZONE_BY_KEY: Final[dict[str, int]] = {key: i for i, keys in enumerate(KEY_ZONES) for key in keys}


def zone_for_key(key: str) -> Optional[int]:
    """Return the zone index of an evdev key name, or None for unmapped keys."""

    return _ZONE_BY_KEY.get(str(key).upper())
