from __future__ import annotations

import logging
import math
from typing import TYPE_CHECKING, Callable, Final, List, Optional, Sequence

import psutil

from legion_rgb.core.effects.timing import TEMPERATURE_PERIOD_S
from legion_rgb.core.profile.models import Profile

from .base import solid

if TYPE_CHECKING:
    from legion_rgb.core.effects.context import EffectContext

logger = logging.getLogger(__name__)

TemperatureReader = Callable[[], Optional[float]]

# AMD (k10temp) first, then Intel (coretemp).
PREFERRED_LABELS: Final[tuple[str, ...]] = ("Tctl", "Package id 0")

SAFE_TEMPERATURE_C: Final[float] = 20.0
RAMP_BOOST: Final[float] = 1.6

COOL_COLORS: Final[tuple[int, ...]] = tuple(solid((0, 255, 0)))
HOT_COLORS: Final[tuple[int, ...]] = tuple(solid((255, 0, 0)))

TRANSITION_STEPS: Final[int] = 5
TRANSITION_DELAY_MS: Final[int] = 1

# math.fma exists from Python 3.13 on.
_fma: Optional[Callable[[float, float, float], float]] = getattr(math, "fma", None)


def heat_fraction(temperature_c: float) -> float:
    """Map a temperature onto [0, 1] (0 = at/below the safe threshold)."""

    adjusted = max(float(temperature_c) - SAFE_TEMPERATURE_C, 0.0)
    return min(max(adjusted / 100.0 * RAMP_BOOST, 0.0), 1.0)


def temperature_target(
    temperature_c: float,
    *,
    cool: Sequence[int] = COOL_COLORS,
    hot: Sequence[int] = HOT_COLORS,
) -> List[int]:
    """Per-channel green-to-red gradient for *temperature_c*.

    Each channel is `(hot - cool) * pct + cool`, computed as a fused
    multiply-add where the interpreter provides one (3.13+) and as plain
    float arithmetic otherwise.
    """

    pct = heat_fraction(temperature_c)
    out: List[int] = []
    for c, h in zip(cool, hot):
        delta = float(h) - float(c)
        value = _fma(delta, pct, float(c)) if _fma is not None else delta * pct + float(c)
        out.append(min(255, max(0, int(value))))
    return out


def find_temperature_sensor(labels: Sequence[str] = PREFERRED_LABELS) -> Optional[TemperatureReader]:
    """Return a reader for the first sensor whose label matches *labels*, in order.

    Returns None when psutil exposes no matching sensor on this platform.
    """

    read_all = getattr(psutil, "sensors_temperatures", None)
    if read_all is None:
        return None

    try:
        chips = read_all()
    except OSError as exc:
        logger.warning("Reading temperature sensors failed: %s", exc)
        return None

    for wanted in labels:
        for chip, entries in (chips or {}).items():
            for entry in entries:
                if wanted in (entry.label or ""):
                    logger.debug("Using temperature sensor %s/%s", chip, entry.label)
                    return _make_reader(read_all, chip, entry.label)
    return None


def _make_reader(read_all, chip: str, label: str) -> TemperatureReader:
    def read() -> Optional[float]:
        for entry in read_all().get(chip, ()):
            if entry.label == label:
                return float(entry.current)
        return None

    return read


def run_temperature(ctx: "EffectContext", profile: Profile) -> None:
    read = ctx.inputs.temperature_sensor()
    if read is None:
        logger.warning("Temperature effect: no %s sensor found", " / ".join(PREFERRED_LABELS))
        return

    while not ctx.stopped:
        current = read()
        if current is not None:
            ctx.kb.transition_to(temperature_target(current), TRANSITION_STEPS, TRANSITION_DELAY_MS)
        if not ctx.sleep(TEMPERATURE_PERIOD_S):
            return
