from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Final, Iterable, List, Sequence, Set, Tuple

from legion_rgb.core.effects.timing import RIPPLE_STEP_BASE_MS, RIPPLE_TICK_S, per_speed_ms
from legion_rgb.core.profile.models import Profile

from .input import drain_key_events
from .zones import zone_for_key

if TYPE_CHECKING:
    from legion_rgb.core.effects.context import EffectContext

RIPPLE_TRANSITION_STEPS: Final[int] = 20


class RippleMove(Enum):
    OFF = "off"
    CENTER = "center"
    LEFT = "left"
    RIGHT = "right"


RippleState = Tuple[RippleMove, RippleMove, RippleMove, RippleMove]

IDLE: Final[RippleState] = (RippleMove.OFF,) * 4


def advance(state: Sequence[RippleMove]) -> RippleState:
    """Advance the ripple one step.

    A Center spawns Left at i-1 and Right at i+1. Left/Right move one zone
    toward their edge. Every slot not written this step becomes Off, and waves
    reaching the edge disappear.
    """

    n = len(state)
    new: List[RippleMove] = [RippleMove.OFF] * n

    for i, move in enumerate(state):
        if move is RippleMove.LEFT and i > 0:
            new[i - 1] = RippleMove.LEFT
        elif move is RippleMove.RIGHT and i + 1 < n:
            new[i + 1] = RippleMove.RIGHT

    # Centers are applied after the moves so a fresh wave wins over a passing one.
    for i, move in enumerate(state):
        if move is RippleMove.CENTER:
            if i > 0:
                new[i - 1] = RippleMove.LEFT
            if i + 1 < n:
                new[i + 1] = RippleMove.RIGHT

    return tuple(new)  # type: ignore[return-value]


def force_pressed(state: Sequence[RippleMove], pressed_zones: Iterable[int]) -> RippleState:
    out = list(state)
    for zone in pressed_zones:
        out[zone] = RippleMove.CENTER
    return tuple(out)  # type: ignore[return-value]


def ripple_colors(state: Sequence[RippleMove], profile: Profile) -> List[int]:
    """Profile zone color where the zone is lit, black elsewhere."""

    colors = profile.rgb_array()
    out = [0] * 12
    for i, move in enumerate(state):
        if move is not RippleMove.OFF:
            out[i * 3 : i * 3 + 3] = colors[i * 3 : i * 3 + 3]
    return out


def run_ripple(ctx: "EffectContext", profile: Profile) -> None:
    """Key presses light their zone and send a wave outward in both directions."""

    step_s = per_speed_ms(RIPPLE_STEP_BASE_MS, profile.speed)
    held: List[Set[str]] = [set() for _ in range(4)]
    state: RippleState = IDLE

    with ctx.inputs.key_source(ctx.signals) as source:
        last_step = ctx.now()
        while not ctx.stopped:
            events, closed = drain_key_events(source.events)
            if closed:
                break

            tapped: Set[int] = set()
            for ev in events:
                zone = zone_for_key(ev.key)
                if ev.pressed:
                    if zone is not None:
                        held[zone].add(ev.key)
                        tapped.add(zone)
                    ctx.signals.resume_keyboard()
                elif zone is not None:
                    held[zone].discard(ev.key)

            now = ctx.now()
            if now - last_step > step_s:
                state = advance(state)
                last_step = now

            pressed = tapped | {i for i, keys in enumerate(held) if keys}
            state = force_pressed(state, pressed)

            ctx.kb.transition_to(ripple_colors(state, profile), RIPPLE_TRANSITION_STEPS, 0)
            if not ctx.sleep(RIPPLE_TICK_S):
                break
