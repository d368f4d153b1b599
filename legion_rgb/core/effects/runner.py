"""Single entry point that plays a profile's effect on the worker thread."""

from __future__ import annotations

import logging
from typing import Callable, Final

from legion_rgb.core.backends.legion.protocol import EffectType
from legion_rgb.core.profile.models import Direction, Profile

from . import catalog
from .ambient import run_ambient
from .context import EffectContext
from .reactive import run_fade, run_ripple
from .software import run_christmas, run_disco, run_lightning, run_smooth_wave, run_swipe, run_temperature

logger = logging.getLogger(__name__)

EffectHandler = Callable[[EffectContext, Profile], None]


def _colors_then_mode(ctx: EffectContext, profile: Profile, mode: EffectType) -> None:
    # Color writes are dropped while a firmware animation (Wave/Smooth) is active.
    if not ctx.kb.effect_type.takes_colors:
        ctx.kb.set_effect(EffectType.STATIC)
    ctx.kb.set_all(profile.rgb_array())
    ctx.kb.set_effect(mode)


def _run_static(ctx: EffectContext, profile: Profile) -> None:
    _colors_then_mode(ctx, profile, EffectType.STATIC)


def _run_breath(ctx: EffectContext, profile: Profile) -> None:
    _colors_then_mode(ctx, profile, EffectType.BREATH)


def _run_smooth(ctx: EffectContext, profile: Profile) -> None:
    ctx.kb.set_effect(EffectType.SMOOTH)


def _run_wave(ctx: EffectContext, profile: Profile) -> None:
    mode = EffectType.LEFT_WAVE if profile.direction is Direction.LEFT else EffectType.RIGHT_WAVE
    ctx.kb.set_effect(mode)


_HANDLERS: Final[dict[type[catalog.Effect], EffectHandler]] = {
    catalog.Static: _run_static,
    catalog.Breath: _run_breath,
    catalog.Smooth: _run_smooth,
    catalog.Wave: _run_wave,
    catalog.Lightning: run_lightning,
    catalog.AmbientLight: run_ambient,
    catalog.SmoothWave: run_smooth_wave,
    catalog.Swipe: run_swipe,
    catalog.Disco: run_disco,
    catalog.Christmas: run_christmas,
    catalog.Fade: run_fade,
    catalog.Temperature: run_temperature,
    catalog.Ripple: run_ripple,
}


def handler_for(effect: catalog.Effect) -> EffectHandler:
    try:
        return _HANDLERS[type(effect)]
    except KeyError:
        raise ValueError(f"no handler for effect {effect!r}") from None


def run_effect(ctx: EffectContext, profile: Profile) -> None:
    """Play *profile*'s effect until it finishes or the manager stop flag is raised.

    Firmware effects return after configuring the device. Software effects loop
    on this thread. Driver errors propagate to the caller.
    """

    handler = handler_for(profile.effect)
    logger.debug("Running effect %s", profile.effect.name)
    handler(ctx, profile)
