from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Tuple


class StepType(str, Enum):
    SET = "Set"
    TRANSITION = "Transition"


@dataclass(frozen=True)
class EffectStep:
    """One frame of a user-authored effect.

    `delay_between_steps` and `sleep` are milliseconds. `brightness` is the
    firmware value (1..2).
    """

    rgb_array: Tuple[int, ...]
    step_type: StepType = StepType.SET
    brightness: int = 1
    steps: int = 0
    delay_between_steps: int = 0
    sleep: int = 0

    def __post_init__(self) -> None:
        rgb = tuple(int(v) for v in self.rgb_array)
        if len(rgb) != 12 or any(not 0 <= v <= 255 for v in rgb):
            raise ValueError("rgb_array must hold 12 channel values in [0, 255]")
        object.__setattr__(self, "rgb_array", rgb)
        object.__setattr__(self, "step_type", StepType(self.step_type))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "EffectStep":
        return cls(
            rgb_array=tuple(data["rgb_array"]),
            step_type=StepType(data.get("step_type", StepType.SET.value)),
            brightness=int(data.get("brightness", 1)),
            steps=int(data.get("steps", 0)),
            delay_between_steps=int(data.get("delay_between_steps", 0)),
            sleep=int(data.get("sleep", 0)),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "rgb_array": list(self.rgb_array),
            "step_type": self.step_type.value,
            "brightness": self.brightness,
            "steps": self.steps,
            "delay_between_steps": self.delay_between_steps,
            "sleep": self.sleep,
        }


@dataclass(frozen=True)
class CustomEffect:
    effect_steps: Tuple[EffectStep, ...] = field(default_factory=tuple)
    should_loop: bool = False

    def __post_init__(self) -> None:
        object.__setattr__(self, "effect_steps", tuple(self.effect_steps))

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "CustomEffect":
        steps: List[EffectStep] = [EffectStep.from_dict(s) for s in data.get("effect_steps", [])]
        return cls(effect_steps=tuple(steps), should_loop=bool(data.get("should_loop", False)))

    def to_dict(self) -> dict[str, Any]:
        return {
            "effect_steps": [s.to_dict() for s in self.effect_steps],
            "should_loop": self.should_loop,
        }
