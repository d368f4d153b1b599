"""Poll and pacing intervals shared by the manager and the effect loops.

Cancellation latency of an effect is bounded by the largest wait it performs
between two stop-flag checks, so every wait is named here.
"""

from __future__ import annotations

from typing import Final

# Manager worker idle poll while no command is queued.
MANAGER_IDLE_POLL_S: Final[float] = 0.020

# Fade/Ripple: main loop tick.
FADE_TICK_S: Final[float] = 0.020
RIPPLE_TICK_S: Final[float] = 0.050

# Ripple: propagation step, divided by speed.
RIPPLE_STEP_BASE_MS: Final[int] = 200

# Temperature: sampling period.
TEMPERATURE_PERIOD_S: Final[float] = 0.200

# Swipe/SmoothWave: pause between rotations.
SWIPE_ROUND_PAUSE_S: Final[float] = 0.020

# Disco: base period, divided by speed * 4.
DISCO_PERIOD_BASE_MS: Final[int] = 2000

# Key listener: evdev select() timeout, bounds how fast it notices close().
KEY_LISTENER_POLL_S: Final[float] = 0.050


def ms(value: float) -> float:
    """Milliseconds to seconds."""

    return float(value) / 1000.0


def per_speed_ms(base_ms: int, speed: int) -> float:
    """Return ``base_ms / speed`` in seconds, treating speed < 1 as 1."""

    return ms(int(base_ms) // max(1, int(speed)))
