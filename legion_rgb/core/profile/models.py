from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Tuple

from legion_rgb.core.effects.catalog import Effect, Static, effect_from_dict

Color = Tuple[int, int, int]

ZONE_COUNT = 4


class Direction(str, Enum):
    LEFT = "Left"
    RIGHT = "Right"


class Brightness(str, Enum):
    LOW = "Low"
    HIGH = "High"

    @property
    def driver_value(self) -> int:
        """Firmware brightness byte (Low=1, High=2)."""

        return 1 if self is Brightness.LOW else 2


def _color(value: Any) -> Color:
    r, g, b = (int(v) for v in value)
    for v in (r, g, b):
        if not 0 <= v <= 255:
            raise ValueError(f"color channel {v} out of range [0, 255]")
    return (r, g, b)


@dataclass(frozen=True)
class KeyboardZone:
    rgb: Color = (0, 0, 0)
    enabled: bool = True

    def __post_init__(self) -> None:
        object.__setattr__(self, "rgb", _color(self.rgb))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "KeyboardZone":
        return cls(rgb=_color(data.get("rgb", (0, 0, 0))), enabled=bool(data.get("enabled", True)))

    def to_dict(self) -> dict[str, Any]:
        return {"rgb": list(self.rgb), "enabled": self.enabled}


def zones_from_array(values: List[int]) -> Tuple[KeyboardZone, ...]:
    if len(values) != ZONE_COUNT * 3:
        raise ValueError(f"expected {ZONE_COUNT * 3} color channels, got {len(values)}")
    return tuple(KeyboardZone(rgb=tuple(values[i * 3 : i * 3 + 3])) for i in range(ZONE_COUNT))


@dataclass(frozen=True)
class Profile:
    """A complete lighting selection handed to the effect manager."""

    name: Optional[str] = None
    rgb_zones: Tuple[KeyboardZone, ...] = field(default_factory=lambda: tuple(KeyboardZone() for _ in range(ZONE_COUNT)))
    effect: Effect = field(default_factory=Static)
    direction: Direction = Direction.LEFT
    speed: int = 1
    brightness: Brightness = Brightness.LOW

    def __post_init__(self) -> None:
        zones = tuple(self.rgb_zones)
        if len(zones) != ZONE_COUNT:
            raise ValueError(f"a profile needs exactly {ZONE_COUNT} zones, got {len(zones)}")
        object.__setattr__(self, "rgb_zones", zones)
        object.__setattr__(self, "direction", Direction(self.direction))
        object.__setattr__(self, "brightness", Brightness(self.brightness))
        object.__setattr__(self, "speed", int(self.speed))

    def rgb_array(self) -> List[int]:
        """Flatten the zones into 12 channel bytes; disabled zones are black."""

        out: List[int] = []
        for zone in self.rgb_zones:
            out.extend(zone.rgb if zone.enabled else (0, 0, 0))
        return out

    def zone_color(self, index: int) -> Color:
        zone = self.rgb_zones[index]
        return zone.rgb if zone.enabled else (0, 0, 0)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Profile":
        zones = data.get("rgb_zones")
        return cls(
            name=data.get("name"),
            rgb_zones=tuple(KeyboardZone.from_dict(z) for z in zones) if zones is not None else cls().rgb_zones,
            effect=effect_from_dict(data.get("effect", "Static")),
            direction=Direction(data.get("direction", Direction.LEFT.value)),
            speed=int(data.get("speed", 1)),
            brightness=Brightness(data.get("brightness", Brightness.LOW.value)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "rgb_zones": [z.to_dict() for z in self.rgb_zones],
            "effect": self.effect.to_dict(),
            "direction": self.direction.value,
            "speed": self.speed,
            "brightness": self.brightness.value,
        }
