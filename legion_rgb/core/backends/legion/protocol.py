"""Legion 4-zone feature report encoding.

The controller takes one 33-byte HID feature report holding the complete
lighting state::

    [0]     report id (0xCC)
    [1]     command id (0x16)
    [2]     mode code (Static=1, Breath=3, Wave=4, Smooth=6)
    [3]     speed (1..4)
    [4]     brightness (1..2)
    [5:17]  zone0 R,G,B ... zone3 R,G,B (Static/Breath only)
    [18]    1 for a leftward wave
    [19]    1 for a rightward wave

Every other byte is zero.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Iterable, List, Sequence

from legion_rgb.core.utils.exceptions import RangeError, RangeErrorKind

REPORT_ID: Final[int] = 0xCC
COMMAND_ID: Final[int] = 0x16
PAYLOAD_SIZE: Final[int] = 33

RGB_OFFSET: Final[int] = 5
LEFT_WAVE_FLAG_OFFSET: Final[int] = 18
RIGHT_WAVE_FLAG_OFFSET: Final[int] = 19

ZONE_COUNT: Final[int] = 4
CHANNEL_COUNT: Final[int] = ZONE_COUNT * 3

SPEED_MIN: Final[int] = 1
SPEED_MAX: Final[int] = 4
BRIGHTNESS_MIN: Final[int] = 1
BRIGHTNESS_MAX: Final[int] = 2
ZONE_MIN: Final[int] = 0
ZONE_MAX: Final[int] = ZONE_COUNT - 1


class EffectType(str, Enum):
    """Firmware lighting modes."""

    STATIC = "Static"
    BREATH = "Breath"
    SMOOTH = "Smooth"
    LEFT_WAVE = "LeftWave"
    RIGHT_WAVE = "RightWave"

    @property
    def mode_code(self) -> int:
        return _MODE_CODES[self]

    @property
    def takes_colors(self) -> bool:
        """Whether the firmware reads the RGB bytes in this mode."""

        return self in (EffectType.STATIC, EffectType.BREATH)


_MODE_CODES: Final[dict[EffectType, int]] = {
    EffectType.STATIC: 0x01,
    EffectType.BREATH: 0x03,
    EffectType.LEFT_WAVE: 0x04,
    EffectType.RIGHT_WAVE: 0x04,
    EffectType.SMOOTH: 0x06,
}


@dataclass
class LightingState:
    effect_type: EffectType = EffectType.STATIC
    speed: int = SPEED_MIN
    brightness: int = BRIGHTNESS_MIN
    rgb_values: List[int] = field(default_factory=lambda: [0] * CHANNEL_COUNT)


def check_speed(speed: int) -> int:
    if not SPEED_MIN <= int(speed) <= SPEED_MAX:
        raise RangeError(RangeErrorKind.SPEED, speed, SPEED_MIN, SPEED_MAX)
    return int(speed)


def check_brightness(brightness: int) -> int:
    if not BRIGHTNESS_MIN <= int(brightness) <= BRIGHTNESS_MAX:
        raise RangeError(RangeErrorKind.BRIGHTNESS, brightness, BRIGHTNESS_MIN, BRIGHTNESS_MAX)
    return int(brightness)


def check_zone(index: int) -> int:
    if not ZONE_MIN <= int(index) <= ZONE_MAX:
        raise RangeError(RangeErrorKind.ZONE, index, ZONE_MIN, ZONE_MAX)
    return int(index)


def check_channels(values: Iterable[int], *, count: int) -> List[int]:
    """Validate an RGB byte sequence of exactly *count* channels."""

    out = [int(v) for v in values]
    if len(out) != count:
        raise ValueError(f"expected {count} color channels, got {len(out)}")
    for v in out:
        if not 0 <= v <= 255:
            raise ValueError(f"color channel {v} out of range [0, 255]")
    return out


def build_payload(state: LightingState) -> bytes:
    """Encode *state* into the 33-byte feature report.

    Raises RangeError for an out-of-range speed or brightness; nothing is
    wrapped or clamped here.
    """

    speed = check_speed(state.speed)
    brightness = check_brightness(state.brightness)

    payload = bytearray(PAYLOAD_SIZE)
    payload[0] = REPORT_ID
    payload[1] = COMMAND_ID
    payload[2] = state.effect_type.mode_code
    payload[3] = speed
    payload[4] = brightness

    if state.effect_type is EffectType.LEFT_WAVE:
        payload[LEFT_WAVE_FLAG_OFFSET] = 1
    elif state.effect_type is EffectType.RIGHT_WAVE:
        payload[RIGHT_WAVE_FLAG_OFFSET] = 1

    if state.effect_type.takes_colors:
        rgb: Sequence[int] = check_channels(state.rgb_values, count=CHANNEL_COUNT)
        payload[RGB_OFFSET : RGB_OFFSET + CHANNEL_COUNT] = bytes(rgb)

    return bytes(payload)
