from __future__ import annotations

import queue
import random
import time
from dataclasses import dataclass, field
from typing import Callable, Optional, Protocol

from legion_rgb.core.backends.legion.device import Keyboard

from .ambient.capture import FrameCapturer, open_screen_capturer
from .reactive.input import KeyEvent, open_key_listener
from .software.temperature import TemperatureReader, find_temperature_sensor
from .stop_signals import StopSignals


class KeySource(Protocol):
    events: "queue.Queue[Optional[KeyEvent]]"

    def __enter__(self) -> "KeySource": ...

    def __exit__(self, exc_type, exc, tb) -> None: ...


@dataclass
class EffectInputs:
    """Factories for the reactive inputs (keys, sensors, screen).

    Swapped for fakes in tests and by hosts that provide their own sources.
    """

    key_source: Callable[[StopSignals], KeySource] = open_key_listener
    temperature_sensor: Callable[[], Optional[TemperatureReader]] = find_temperature_sensor
    screen_capturer: Callable[[int], FrameCapturer] = open_screen_capturer
    clock: Callable[[], float] = time.monotonic


@dataclass
class EffectContext:
    """Everything an effect loop may touch while it runs on the worker thread."""

    kb: Keyboard
    signals: StopSignals
    rng: random.Random = field(default_factory=random.Random)
    inputs: EffectInputs = field(default_factory=EffectInputs)
    request_refresh: Callable[[], None] = lambda: None

    @property
    def stopped(self) -> bool:
        return self.signals.manager_stopped

    def sleep(self, seconds: float) -> bool:
        """Stop-aware pacing sleep; False when the effect should return."""

        return self.signals.sleep(seconds)

    def now(self) -> float:
        return self.inputs.clock()
