from __future__ import annotations

import pytest

from legion_rgb.core.effects import catalog
from legion_rgb.core.profile.custom_effect import CustomEffect, EffectStep, StepType
from legion_rgb.core.profile.models import Brightness, Direction, KeyboardZone, Profile, zones_from_array


def _zones(*colors, disabled=()):
    return tuple(KeyboardZone(rgb=c, enabled=i not in disabled) for i, c in enumerate(colors))


class TestProfile:
    def test_defaults(self) -> None:
        p = Profile()

        assert p.effect == catalog.Static()
        assert p.direction is Direction.LEFT
        assert p.speed == 1
        assert p.brightness is Brightness.LOW
        assert p.rgb_array() == [0] * 12

    def test_disabled_zones_flatten_to_black(self) -> None:
        p = Profile(rgb_zones=_zones((1, 2, 3), (4, 5, 6), (7, 8, 9), (10, 11, 12), disabled={1, 3}))

        assert p.rgb_array() == [1, 2, 3, 0, 0, 0, 7, 8, 9, 0, 0, 0]
        assert p.zone_color(1) == (0, 0, 0)
        assert p.zone_color(2) == (7, 8, 9)

    def test_wrong_zone_count_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            Profile(rgb_zones=_zones((0, 0, 0)))

    def test_bad_color_is_rejected(self) -> None:
        with pytest.raises(ValueError):
            KeyboardZone(rgb=(256, 0, 0))

    def test_brightness_driver_values(self) -> None:
        assert Brightness.LOW.driver_value == 1
        assert Brightness.HIGH.driver_value == 2

    def test_dict_shape_survives_a_save(self) -> None:
        data = {
            "name": "evening",
            "rgb_zones": [
                {"rgb": [255, 0, 0], "enabled": True},
                {"rgb": [0, 255, 0], "enabled": False},
                {"rgb": [0, 0, 255], "enabled": True},
                {"rgb": [9, 9, 9], "enabled": True},
            ],
            "effect": {"Swipe": {"mode": "Fill", "clean_with_black": True}},
            "direction": "Right",
            "speed": 3,
            "brightness": "High",
        }

        p = Profile.from_dict(data)

        assert p.effect == catalog.Swipe(mode=catalog.SwipeMode.FILL, clean_with_black=True)
        assert p.direction is Direction.RIGHT
        assert p.brightness is Brightness.HIGH
        assert p.to_dict() == data

    def test_missing_fields_use_defaults(self) -> None:
        p = Profile.from_dict({"effect": "Smooth"})

        assert p.effect == catalog.Smooth()
        assert p.rgb_array() == [0] * 12


def test_zones_from_array() -> None:
    zones = zones_from_array(list(range(12)))

    assert zones[3].rgb == (9, 10, 11)
    with pytest.raises(ValueError):
        zones_from_array([0] * 11)


class TestCustomEffect:
    def test_step_validation(self) -> None:
        with pytest.raises(ValueError):
            EffectStep(rgb_array=(0,) * 11)
        with pytest.raises(ValueError):
            EffectStep(rgb_array=(300,) + (0,) * 11)

    def test_dict_shape(self) -> None:
        data = {
            "effect_steps": [
                {
                    "rgb_array": [255] * 12,
                    "step_type": "Transition",
                    "brightness": 2,
                    "steps": 50,
                    "delay_between_steps": 10,
                    "sleep": 500,
                }
            ],
            "should_loop": True,
        }

        effect = CustomEffect.from_dict(data)

        assert effect.should_loop is True
        assert effect.effect_steps[0].step_type is StepType.TRANSITION
        assert effect.to_dict() == data

    def test_step_defaults(self) -> None:
        step = EffectStep.from_dict({"rgb_array": [0] * 12})

        assert step.step_type is StepType.SET
        assert step.brightness == 1
        assert step.sleep == 0
