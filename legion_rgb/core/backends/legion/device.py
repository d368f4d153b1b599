from __future__ import annotations

import logging
import threading
import time
from typing import Iterable, List, Optional

from legion_rgb.core.backends.base import HidTransport
from legion_rgb.core.effects.transitions import run_transition
from legion_rgb.core.utils.exceptions import HidTransportError

from .protocol import (
    CHANNEL_COUNT,
    EffectType,
    LightingState,
    build_payload,
    check_brightness,
    check_channels,
    check_speed,
    check_zone,
)

logger = logging.getLogger(__name__)


class Keyboard:
    """Driver for one Legion 4-zone controller.

    Every mutator updates the in-memory LightingState and then pushes the whole
    state with one blocking feature-report write.

    A Keyboard has exactly one owner. It cannot be copied, and once
    `bind_owner` has been called, writes from any other thread raise.
    """

    def __init__(self, transport: HidTransport, *, stop_event: Optional[threading.Event] = None) -> None:
        self._transport = transport
        self._state = LightingState()
        self._stop_event = stop_event
        self._owner: Optional[threading.Thread] = None
        self._closed = False
        self.writes = 0

    def __copy__(self):
        raise TypeError("Keyboard handles cannot be copied")

    def __deepcopy__(self, memo):
        raise TypeError("Keyboard handles cannot be copied")

    # -- ownership -----------------------------------------------------------

    def bind_owner(self, thread: Optional[threading.Thread] = None) -> None:
        self._owner = thread if thread is not None else threading.current_thread()

    def release_owner(self) -> None:
        self._owner = None

    def set_stop_event(self, event: Optional[threading.Event]) -> None:
        """Set the flag that interrupts `transition_to`."""

        self._stop_event = event

    @property
    def closed(self) -> bool:
        return self._closed

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._transport.close()
        except Exception as exc:
            logger.debug("Closing HID transport failed: %s", exc)

    # -- state ---------------------------------------------------------------

    @property
    def state(self) -> LightingState:
        return LightingState(
            effect_type=self._state.effect_type,
            speed=self._state.speed,
            brightness=self._state.brightness,
            rgb_values=list(self._state.rgb_values),
        )

    @property
    def effect_type(self) -> EffectType:
        return self._state.effect_type

    @property
    def rgb_values(self) -> List[int]:
        return list(self._state.rgb_values)

    def refresh(self) -> None:
        if self._closed:
            raise HidTransportError("keyboard is closed")
        owner = self._owner
        if owner is not None and owner is not threading.current_thread():
            raise RuntimeError(f"Keyboard is owned by thread {owner.name!r}")

        payload = build_payload(self._state)
        self._transport.send_feature_report(payload)
        self.writes += 1

    # -- mutators ------------------------------------------------------------

    def set_effect(self, effect: EffectType) -> None:
        self._state.effect_type = EffectType(effect)
        self.refresh()

    def set_speed(self, speed: int) -> None:
        self._state.speed = check_speed(speed)
        self.refresh()

    def set_brightness(self, brightness: int) -> None:
        self._state.brightness = check_brightness(brightness)
        self.refresh()

    def set_zone(self, index: int, rgb: Iterable[int]) -> None:
        zone = check_zone(index)
        values = check_channels(rgb, count=3)
        self._state.rgb_values[zone * 3 : zone * 3 + 3] = values
        self.refresh()

    def set_all(self, rgb: Iterable[int]) -> None:
        """Write all 12 channels. No-op outside the Static/Breath modes."""

        values = check_channels(rgb, count=CHANNEL_COUNT)
        if not self._state.effect_type.takes_colors:
            return
        self._state.rgb_values = values
        self.refresh()

    def set_solid(self, rgb: Iterable[int]) -> None:
        """Paint every zone with one color. No-op outside the Static/Breath modes."""

        values = check_channels(rgb, count=3)
        self.set_all(values * 4)

    def transition_to(self, target: Iterable[int], steps: int, delay_ms: int = 0) -> bool:
        """Fade linearly to *target* in *steps* writes, then snap onto it.

        Stops early without the snap when the stop event is raised. Returns True
        if the transition completed. No-op (True) outside the Static/Breath modes.
        """

        target_values = check_channels(target, count=CHANNEL_COUNT)
        if not self._state.effect_type.takes_colors:
            return True

        return run_transition(
            self._write_colors,
            list(self._state.rgb_values),
            target_values,
            steps=int(steps),
            delay_s=max(0, int(delay_ms)) / 1000.0,
            is_cancelled=self._is_cancelled,
            sleep=self._sleep,
        )

    def _write_colors(self, values: List[int]) -> None:
        self._state.rgb_values = list(values)
        self.refresh()

    def _is_cancelled(self) -> bool:
        ev = self._stop_event
        return ev is not None and ev.is_set()

    def _sleep(self, seconds: float) -> None:
        ev = self._stop_event
        if ev is not None:
            ev.wait(seconds)
        else:
            time.sleep(seconds)
