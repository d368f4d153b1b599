from __future__ import annotations

from typing import TYPE_CHECKING

from legion_rgb.core.backends.legion.protocol import EffectType
from legion_rgb.core.effects.timing import ms
from legion_rgb.core.profile.custom_effect import CustomEffect, StepType

if TYPE_CHECKING:
    from legion_rgb.core.effects.context import EffectContext


def run_custom_effect(ctx: "EffectContext", effect: CustomEffect) -> None:
    """Play user-authored steps in order, forever when `should_loop` is set."""

    kb = ctx.kb
    # Color writes are ignored by the firmware animations.
    if not kb.effect_type.takes_colors:
        kb.set_effect(EffectType.STATIC)

    while True:
        for step in effect.effect_steps:
            kb.set_brightness(step.brightness)
            if step.step_type is StepType.SET:
                kb.set_all(step.rgb_array)
            else:
                kb.transition_to(step.rgb_array, step.steps, step.delay_between_steps)

            if ctx.stopped:
                return
            if not ctx.sleep(ms(step.sleep)):
                return

        if not effect.should_loop or not effect.effect_steps or ctx.stopped:
            return
