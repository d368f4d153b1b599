from __future__ import annotations

import logging
import queue
import select
import threading
from dataclasses import dataclass
from typing import Any, Iterable, Optional

from legion_rgb.core.config.paths import env_flag
from legion_rgb.core.effects.stop_signals import StopSignals
from legion_rgb.core.effects.timing import KEY_LISTENER_POLL_S
from legion_rgb.core.logging_utils import log_throttled

logger = logging.getLogger(__name__)

# evdev key event values
_KEY_UP = 0
_KEY_DOWN = 1


@dataclass(frozen=True)
class KeyEvent:
    key: str
    pressed: bool


def evdev_key_name(code: int) -> Optional[str]:
    """Translate an evdev key code into its KEY_* name."""

    import evdev  # type: ignore

    name: Any = evdev.ecodes.KEY.get(int(code))
    if isinstance(name, (list, tuple)):
        # Aliased codes (e.g. KEY_MUTE/KEY_MIN_INTERESTING) map to several names.
        name = name[0] if name else None
    return str(name) if name else None


def try_open_evdev_keyboards() -> Optional[list]:
    if env_flag("LEGION_RGB_DISABLE_EVDEV"):
        return None

    try:
        import evdev  # type: ignore
    except ImportError:
        return None

    try:
        devices = [evdev.InputDevice(p) for p in evdev.list_devices()]
    except OSError as exc:
        logger.debug("Listing evdev devices failed: %s", exc)
        return None

    out = []
    for dev in devices:
        try:
            caps = dev.capabilities(verbose=False)
        except OSError:
            dev.close()
            continue
        if evdev.ecodes.EV_KEY in caps:
            out.append(dev)
        else:
            dev.close()

    return out or None


class KeyListener:
    """Auxiliary thread forwarding key presses to the running effect.

    On every key down the keyboard stop flag is raised before the event is
    queued, so a transition in progress on the worker thread stops early. The
    listener never touches the driver. When it ends (closed, or no readable
    input devices) a ``None`` sentinel is queued to mark the channel closed.
    """

    def __init__(self, signals: StopSignals, *, devices: Optional[Iterable[Any]] = None) -> None:
        self.events: "queue.Queue[Optional[KeyEvent]]" = queue.Queue()
        self._signals = signals
        self._devices = list(devices) if devices is not None else None
        self._closing = threading.Event()
        self._thread = threading.Thread(target=self._run, name="legion-rgb-keys", daemon=True)

    def start(self) -> "KeyListener":
        self._thread.start()
        return self

    def close(self, timeout: float = 1.0) -> None:
        self._closing.set()
        if self._thread.is_alive() and self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)

    def __enter__(self) -> "KeyListener":
        return self.start()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def _run(self) -> None:
        devices = self._devices if self._devices is not None else try_open_evdev_keyboards()
        try:
            if not devices:
                log_throttled(
                    logger,
                    "reactive.no_input_devices",
                    interval_s=60,
                    level=logging.WARNING,
                    msg="No readable keyboard input devices (evdev); reactive effects need read access to /dev/input",
                )
                return
            self._poll(devices)
        finally:
            for dev in devices or ():
                try:
                    dev.close()
                except OSError:
                    pass
            self.events.put(None)

    def _poll(self, devices: list) -> None:
        import evdev  # type: ignore

        while not self._closing.is_set() and devices:
            readable, _, _ = select.select(devices, [], [], KEY_LISTENER_POLL_S)
            for dev in readable:
                try:
                    events = list(dev.read())
                except BlockingIOError:
                    continue
                except OSError as exc:
                    logger.info("Input device %s went away: %s", getattr(dev, "path", dev), exc)
                    devices.remove(dev)
                    continue

                for ev in events:
                    if ev.type != evdev.ecodes.EV_KEY or ev.value not in (_KEY_DOWN, _KEY_UP):
                        continue
                    name = evdev_key_name(ev.code)
                    if name is None:
                        continue
                    if ev.value == _KEY_DOWN:
                        self._signals.stop_keyboard()
                        self.events.put(KeyEvent(name, True))
                    else:
                        self.events.put(KeyEvent(name, False))


def drain_key_events(events: "queue.Queue[Optional[KeyEvent]]") -> tuple[list[KeyEvent], bool]:
    """Take every pending event without blocking.

    Returns the events and whether the close sentinel was seen.
    """

    out: list[KeyEvent] = []
    while True:
        try:
            ev = events.get_nowait()
        except queue.Empty:
            return out, False
        if ev is None:
            return out, True
        out.append(ev)


def open_key_listener(signals: StopSignals) -> KeyListener:
    """Default key source factory used by Fade and Ripple."""

    return KeyListener(signals)
