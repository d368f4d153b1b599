from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Final

from legion_rgb.core.effects.catalog import AmbientLight
from legion_rgb.core.logging_utils import log_throttled
from legion_rgb.core.profile.models import Profile
from legion_rgb.core.utils.exceptions import CaptureInvalidData

from .pipeline import frame_to_zone_colors

if TYPE_CHECKING:
    from legion_rgb.core.effects.context import EffectContext

logger = logging.getLogger(__name__)

FPS_MIN: Final[int] = 1
FPS_MAX: Final[int] = 60
AMBIENT_TRANSITION_STEPS: Final[int] = 4
AMBIENT_TRANSITION_DELAY_MS: Final[int] = 1


def clamp_settings(effect: AmbientLight) -> tuple[int, float]:
    fps = min(max(int(effect.fps), FPS_MIN), FPS_MAX)
    boost = min(max(float(effect.saturation_boost), 0.0), 1.0)
    return fps, boost


def run_ambient(ctx: "EffectContext", profile: Profile) -> None:
    """Mirror the selected monitor onto the zones, one vertical strip per zone.

    An unchanged frame (BlockingIOError) retries within the same frame budget.
    An unusable capture after frames have been delivered (e.g. the resolution
    changed) stops the effect and asks the manager to restart it with a fresh
    capturer, which selects the monitor again.

    CaptureInvalidData on the very first grab is deliberately re-raised instead
    of requesting a restart: a source that never worked (no display, no
    permission to capture) would otherwise restart forever. The manager logs it
    and hands it to its `on_error` callback, so hosts see the error.
    """

    effect = profile.effect if isinstance(profile.effect, AmbientLight) else AmbientLight()
    fps, boost = clamp_settings(effect)
    frame_s = 1.0 / fps

    capturer = ctx.inputs.screen_capturer(effect.monitor)
    frames = 0
    try:
        while not ctx.stopped:
            start = ctx.now()
            try:
                frame = capturer.grab()
            except BlockingIOError:
                wait = max(0.0, frame_s - (ctx.now() - start))
                if not ctx.sleep(wait):
                    return
                continue
            except CaptureInvalidData as exc:
                if frames == 0:
                    raise
                log_throttled(
                    logger,
                    "ambient.invalid_capture",
                    interval_s=30,
                    level=logging.WARNING,
                    msg=f"Screen capture became invalid, restarting ambient light: {exc}",
                )
                ctx.signals.raise_all()
                ctx.request_refresh()
                return

            frames += 1
            if ctx.stopped:
                return

            target = frame_to_zone_colors(frame, saturation_boost=boost, warm=effect.warm_desaturate)
            ctx.kb.transition_to(target, AMBIENT_TRANSITION_STEPS, AMBIENT_TRANSITION_DELAY_MS)

            remaining = frame_s - (ctx.now() - start)
            if remaining > 0 and not ctx.sleep(remaining):
                return
    finally:
        capturer.close()
