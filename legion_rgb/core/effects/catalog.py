"""Canonical effect catalog.

Effects form a closed set of variants. Parameterless effects are plain
instances; AmbientLight, Swipe and SmoothWave carry parameters. This module is
dependency-free so profiles, the runner and front ends can all import it.

The dict shape mirrors the saved-profile JSON: parameterless variants are a bare
string (``"Static"``), parameterised ones a single-key object
(``{"Swipe": {"mode": "Fill", "clean_with_black": true}}``).
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from enum import Enum
from typing import Any, ClassVar, Final, Union


class SwipeMode(str, Enum):
    CHANGE = "Change"
    FILL = "Fill"


@dataclass(frozen=True)
class Effect:
    name: ClassVar[str] = ""
    is_built_in: ClassVar[bool] = False
    takes_color_array: ClassVar[bool] = False
    takes_direction: ClassVar[bool] = False
    takes_speed: ClassVar[bool] = False

    def params(self) -> dict[str, Any]:
        out: dict[str, Any] = {}
        for f in fields(self):
            v = getattr(self, f.name)
            out[f.name] = v.value if isinstance(v, Enum) else v
        return out

    def to_dict(self) -> Union[str, dict[str, Any]]:
        if not fields(self):
            return self.name
        return {self.name: self.params()}


# Firmware effects


@dataclass(frozen=True)
class Static(Effect):
    name: ClassVar[str] = "Static"
    is_built_in: ClassVar[bool] = True
    takes_color_array: ClassVar[bool] = True


@dataclass(frozen=True)
class Breath(Effect):
    name: ClassVar[str] = "Breath"
    is_built_in: ClassVar[bool] = True
    takes_color_array: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True


@dataclass(frozen=True)
class Smooth(Effect):
    name: ClassVar[str] = "Smooth"
    is_built_in: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True


@dataclass(frozen=True)
class Wave(Effect):
    name: ClassVar[str] = "Wave"
    is_built_in: ClassVar[bool] = True
    takes_direction: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True


# Software effects


@dataclass(frozen=True)
class Lightning(Effect):
    name: ClassVar[str] = "Lightning"
    takes_speed: ClassVar[bool] = True


@dataclass(frozen=True)
class AmbientLight(Effect):
    name: ClassVar[str] = "AmbientLight"

    # mss monitor index (1 = primary); an unknown index falls back to the primary.
    monitor: int = 1
    fps: int = 30
    saturation_boost: float = 0.0
    # Dim and warm the sampled colors (gentler evening lighting).
    warm_desaturate: bool = False


@dataclass(frozen=True)
class SmoothWave(Effect):
    name: ClassVar[str] = "SmoothWave"
    takes_direction: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True

    mode: SwipeMode = SwipeMode.CHANGE
    clean_with_black: bool = False


@dataclass(frozen=True)
class Swipe(Effect):
    name: ClassVar[str] = "Swipe"
    takes_color_array: ClassVar[bool] = True
    takes_direction: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True

    mode: SwipeMode = SwipeMode.CHANGE
    clean_with_black: bool = False


@dataclass(frozen=True)
class Disco(Effect):
    name: ClassVar[str] = "Disco"
    takes_speed: ClassVar[bool] = True


@dataclass(frozen=True)
class Christmas(Effect):
    name: ClassVar[str] = "Christmas"


@dataclass(frozen=True)
class Fade(Effect):
    name: ClassVar[str] = "Fade"
    takes_color_array: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True


@dataclass(frozen=True)
class Temperature(Effect):
    name: ClassVar[str] = "Temperature"


@dataclass(frozen=True)
class Ripple(Effect):
    name: ClassVar[str] = "Ripple"
    takes_color_array: ClassVar[bool] = True
    takes_speed: ClassVar[bool] = True


# Ordering matters for UI presentation.
EFFECT_TYPES: Final[tuple[type[Effect], ...]] = (
    Static,
    Breath,
    Smooth,
    Wave,
    Lightning,
    AmbientLight,
    SmoothWave,
    Swipe,
    Disco,
    Christmas,
    Fade,
    Temperature,
    Ripple,
)

BUILT_IN_EFFECTS: Final[frozenset[str]] = frozenset(t.name for t in EFFECT_TYPES if t.is_built_in)
SOFTWARE_EFFECTS: Final[frozenset[str]] = frozenset(t.name for t in EFFECT_TYPES if not t.is_built_in)

_BY_KEY: Final[dict[str, type[Effect]]] = {t.name.lower(): t for t in EFFECT_TYPES}

_EFFECT_ALIASES: Final[dict[str, str]] = {
    "ambient": "ambientlight",
    "ambient_light": "ambientlight",
    "smooth_wave": "smoothwave",
    "breathing": "breath",
    # Older builds had a separate warm ambient variant.
    "ambientlightwarmerdesaturated": "ambientlight",
}


def normalize_effect_name(name: str) -> str:
    """Return the canonical variant name for *name* (case-insensitive, aliased)."""

    key = str(name or "").strip().lower().replace("-", "_").replace(" ", "_")
    key = _EFFECT_ALIASES.get(key, key)
    key = _EFFECT_ALIASES.get(key.replace("_", ""), key.replace("_", ""))
    cls = _BY_KEY.get(key)
    if cls is None:
        raise ValueError(f"unknown effect: {name!r}")
    return cls.name


def effect_from_dict(value: Union[str, dict[str, Any], Effect]) -> Effect:
    """Decode an effect from its saved-profile shape."""

    if isinstance(value, Effect):
        return value

    if isinstance(value, str):
        name, params = value, {}
    elif isinstance(value, dict) and len(value) == 1:
        name, params = next(iter(value.items()))
        params = dict(params or {})
    else:
        raise ValueError(f"invalid effect value: {value!r}")

    canonical = normalize_effect_name(name)
    cls = _BY_KEY[canonical.lower()]
    if str(name).strip().lower() == "ambientlightwarmerdesaturated":
        params.setdefault("warm_desaturate", True)

    if "monitor_id" in params and cls is AmbientLight:
        params.setdefault("monitor", params.pop("monitor_id"))

    known = {f.name for f in fields(cls)}
    kwargs: dict[str, Any] = {}
    for key, raw in params.items():
        if key not in known:
            # Saved profiles may carry fields from other builds.
            continue
        kwargs[key] = SwipeMode(raw) if key == "mode" else raw
    return cls(**kwargs)


def effect_to_dict(effect: Effect) -> Union[str, dict[str, Any]]:
    return effect.to_dict()


def title_for_effect(effect: Union[Effect, str]) -> str:
    name = effect.name if isinstance(effect, Effect) else normalize_effect_name(effect)
    titles = {"AmbientLight": "Ambient Light", "SmoothWave": "Smooth Wave"}
    return titles.get(name, name)
