from __future__ import annotations

from typing import TYPE_CHECKING, Final, Set

from legion_rgb.core.effects.timing import FADE_TICK_S
from legion_rgb.core.profile.models import Profile

from .input import drain_key_events

if TYPE_CHECKING:
    from legion_rgb.core.effects.context import EffectContext

FADE_IDLE_BASE_S: Final[int] = 20
FADE_OUT_STEPS: Final[int] = 230
FADE_OUT_DELAY_MS: Final[int] = 3


def idle_timeout_s(speed: int) -> float:
    return float(FADE_IDLE_BASE_S // max(1, int(speed)))


def run_fade(ctx: "EffectContext", profile: Profile) -> None:
    """Light the keyboard while typing; fade to black after an idle period.

    The key listener raises the keyboard stop flag on every key down, which cuts
    a fade-out short the moment typing resumes.
    """

    kb = ctx.kb
    colors = profile.rgb_array()
    timeout_s = idle_timeout_s(profile.speed)
    held: Set[str] = set()
    faded = False

    with ctx.inputs.key_source(ctx.signals) as source:
        last_active = ctx.now()
        while not ctx.stopped:
            events, closed = drain_key_events(source.events)
            if closed:
                return

            typed = False
            for ev in events:
                if ev.pressed:
                    held.add(ev.key)
                    typed = True
                else:
                    held.discard(ev.key)

            if typed or held:
                kb.set_all(colors)
                ctx.signals.resume_keyboard()
                last_active = ctx.now()
                faded = False
            elif not faded and ctx.now() - last_active > timeout_s:
                # Interrupted fades are retried after the next idle period.
                faded = kb.transition_to([0] * 12, FADE_OUT_STEPS, FADE_OUT_DELAY_MS)

            if not ctx.sleep(FADE_TICK_S):
                return
