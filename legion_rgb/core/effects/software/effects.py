"""Host-driven effects that animate the four zones through Static-mode writes."""

from __future__ import annotations

from typing import TYPE_CHECKING, Final, Sequence

from legion_rgb.core.effects.catalog import SwipeMode
from legion_rgb.core.effects.timing import DISCO_PERIOD_BASE_MS, SWIPE_ROUND_PAUSE_S, ms
from legion_rgb.core.profile.models import Direction, Profile

from .base import (
    WHITE,
    Color,
    black,
    rotate_zones,
    set_zone,
    steps_for_speed,
    zone_color,
    zone_order,
)

if TYPE_CHECKING:
    from legion_rgb.core.effects.context import EffectContext


# -- Lightning -----------------------------------------------------------------

LIGHTNING_STEPS_MIN: Final[int] = 50
LIGHTNING_STEPS_MAX: Final[int] = 200
LIGHTNING_FADE_DELAY_MS: Final[int] = 5
LIGHTNING_PAUSE_MIN_MS: Final[int] = 100
LIGHTNING_PAUSE_MAX_MS: Final[int] = 2000


def run_lightning(ctx: "EffectContext", profile: Profile) -> None:
    """Flash a random zone white, let it decay to black, wait a random while."""

    kb = ctx.kb
    rng = ctx.rng
    while not ctx.stopped:
        zone = rng.randrange(4)
        steps = steps_for_speed(rng.randint(LIGHTNING_STEPS_MIN, LIGHTNING_STEPS_MAX), profile.speed)

        flash = black()
        set_zone(flash, zone, WHITE)
        kb.set_all(flash)
        kb.transition_to(black(), steps, LIGHTNING_FADE_DELAY_MS)

        if not ctx.sleep(ms(rng.randint(LIGHTNING_PAUSE_MIN_MS, LIGHTNING_PAUSE_MAX_MS))):
            return


# -- Disco ---------------------------------------------------------------------

DISCO_COLORS: Final[tuple[Color, ...]] = (
    (255, 0, 0),
    (255, 255, 0),
    (0, 255, 0),
    (0, 255, 255),
    (0, 0, 255),
    (255, 0, 255),
)


def run_disco(ctx: "EffectContext", profile: Profile) -> None:
    period_s = ms(DISCO_PERIOD_BASE_MS / (max(1, profile.speed) * 4))
    rng = ctx.rng
    while not ctx.stopped:
        color = DISCO_COLORS[rng.randrange(len(DISCO_COLORS))]
        ctx.kb.set_zone(rng.randrange(4), color)
        if not ctx.sleep(period_s):
            return


# -- Christmas -----------------------------------------------------------------

CHRISTMAS_COLORS: Final[tuple[Color, ...]] = (
    (255, 10, 10),
    (255, 255, 20),
    (30, 255, 30),
    (70, 70, 255),
)
CHRISTMAS_SUBEFFECTS: Final[int] = 4

_CYCLE_ROUNDS: Final[int] = 3
_CYCLE_HOLD_MS: Final[int] = 500
_ALTERNATE_ROUNDS: Final[int] = 4
_ALTERNATE_HOLD_MS: Final[int] = 400
_WIPE_STEPS: Final[int] = 100
_WIPE_DELAY_MS: Final[int] = 1
_CHECKER_ROUNDS: Final[int] = 4
_CHECKER_STEPS: Final[int] = 30
_CHECKER_DELAY_MS: Final[int] = 1
_CHECKER_HOLD_MS: Final[int] = 400

CHECKER_STATE_A: Final[tuple[int, ...]] = (255, 255, 255, 0, 0, 0, 255, 255, 255, 0, 0, 0)
CHECKER_STATE_B: Final[tuple[int, ...]] = (0, 0, 0, 255, 255, 255, 0, 0, 0, 255, 255, 255)


def pick_subeffect(rng, last: int | None, count: int = CHRISTMAS_SUBEFFECTS) -> int:
    """Uniform choice in [0, count) that never repeats *last*."""

    choice = rng.randrange(count)
    while choice == last:
        choice = rng.randrange(count)
    return choice


def run_christmas(ctx: "EffectContext", profile: Profile) -> None:
    subeffects = (_xmas_cycle, _xmas_alternate, _xmas_wipe, _xmas_checker)
    last: int | None = None
    while not ctx.stopped:
        last = pick_subeffect(ctx.rng, last, len(subeffects))
        subeffects[last](ctx)


def _xmas_cycle(ctx: "EffectContext") -> None:
    for _ in range(_CYCLE_ROUNDS):
        for color in CHRISTMAS_COLORS:
            ctx.kb.set_solid(color)
            if not ctx.sleep(ms(_CYCLE_HOLD_MS)):
                return


def _xmas_alternate(ctx: "EffectContext") -> None:
    first = ctx.rng.randrange(len(CHRISTMAS_COLORS))
    second = first
    while second == first:
        second = ctx.rng.randrange(len(CHRISTMAS_COLORS))

    for _ in range(_ALTERNATE_ROUNDS):
        for index in (first, second):
            ctx.kb.set_solid(CHRISTMAS_COLORS[index])
            if not ctx.sleep(ms(_ALTERNATE_HOLD_MS)):
                return


def _xmas_wipe(ctx: "EffectContext") -> None:
    kb = ctx.kb
    kb.transition_to(black(), _WIPE_STEPS, _WIPE_DELAY_MS)

    order = zone_order(reverse=ctx.rng.randrange(2) == 1)
    values = black()
    for color in CHRISTMAS_COLORS:
        for fill in (color, (0, 0, 0)):
            for zone in order:
                if ctx.stopped:
                    return
                set_zone(values, zone, fill)
                kb.transition_to(values, _WIPE_STEPS, _WIPE_DELAY_MS)


def _xmas_checker(ctx: "EffectContext") -> None:
    for _ in range(_CHECKER_ROUNDS):
        for state in (CHECKER_STATE_A, CHECKER_STATE_B):
            ctx.kb.transition_to(state, _CHECKER_STEPS, _CHECKER_DELAY_MS)
            if not ctx.sleep(ms(_CHECKER_HOLD_MS)):
                return


# -- Swipe / SmoothWave --------------------------------------------------------

SWIPE_STEPS: Final[int] = 150
SMOOTH_WAVE_STEPS: Final[int] = 70
SWIPE_CHANGE_DELAY_MS: Final[int] = 10
SWIPE_FILL_DELAY_MS: Final[int] = 1

SMOOTH_WAVE_GRADIENT: Final[tuple[int, ...]] = (255, 0, 0, 0, 255, 0, 0, 0, 255, 255, 0, 255)


def run_swipe(ctx: "EffectContext", profile: Profile) -> None:
    effect = profile.effect
    _swipe(
        ctx,
        colors=profile.rgb_array(),
        direction=profile.direction,
        steps=steps_for_speed(SWIPE_STEPS, profile.speed),
        mode=getattr(effect, "mode", SwipeMode.CHANGE),
        clean_with_black=bool(getattr(effect, "clean_with_black", False)),
    )


def run_smooth_wave(ctx: "EffectContext", profile: Profile) -> None:
    """Swipe over a fixed red/green/blue/magenta gradient."""

    effect = profile.effect
    _swipe(
        ctx,
        colors=list(SMOOTH_WAVE_GRADIENT),
        direction=profile.direction,
        steps=steps_for_speed(SMOOTH_WAVE_STEPS, profile.speed),
        mode=getattr(effect, "mode", SwipeMode.CHANGE),
        clean_with_black=bool(getattr(effect, "clean_with_black", False)),
    )


def _swipe(
    ctx: "EffectContext",
    *,
    colors: Sequence[int],
    direction: Direction,
    steps: int,
    mode: SwipeMode,
    clean_with_black: bool,
) -> None:
    kb = ctx.kb
    rotating = list(colors)
    order = zone_order(reverse=direction is Direction.RIGHT)

    while not ctx.stopped:
        if mode is SwipeMode.CHANGE:
            # Left moves colors one zone toward the end of the array.
            rotating = rotate_zones(rotating, 1 if direction is Direction.LEFT else -1)
            kb.transition_to(rotating, steps, SWIPE_CHANGE_DELAY_MS)
        else:
            values = black()
            for source in order:
                color = zone_color(colors, source)
                fills = [color, (0, 0, 0)] if clean_with_black else [color]
                for fill in fills:
                    for zone in order:
                        if ctx.stopped:
                            return
                        set_zone(values, zone, fill)
                        kb.transition_to(values, steps, SWIPE_FILL_DELAY_MS)

        if not ctx.sleep(SWIPE_ROUND_PAUSE_S):
            return


__all__ = [
    "CHRISTMAS_COLORS",
    "DISCO_COLORS",
    "pick_subeffect",
    "run_christmas",
    "run_disco",
    "run_lightning",
    "run_smooth_wave",
    "run_swipe",
]
