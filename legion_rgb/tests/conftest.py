from __future__ import annotations

import os
import queue
import random
import tempfile
from typing import Callable, List, Optional

import pytest


def _hardware_opted_in() -> bool:
    return os.environ.get("LEGION_RGB_ALLOW_HARDWARE") == "1"


# Safety default: during pytest, never touch the user's real lock/config dir.
if not _hardware_opted_in():
    os.environ.setdefault(
        "LEGION_RGB_CONFIG_DIR",
        tempfile.mkdtemp(prefix="legion-rgb-test-config-"),
    )

# Safety default: running pytest should never scan real USB or input devices
# unless explicitly opted in.
if not _hardware_opted_in():
    os.environ.setdefault("LEGION_RGB_DISABLE_USB_SCAN", "1")
    os.environ.setdefault("LEGION_RGB_DISABLE_EVDEV", "1")


class RecordingTransport:
    """HID transport double that records every feature report."""

    def __init__(self) -> None:
        self.reports: List[bytes] = []
        self.closed = False
        self.fail: Optional[BaseException] = None
        self.on_write: Optional[Callable[[int], None]] = None

    def send_feature_report(self, data: bytes) -> None:
        if self.fail is not None:
            raise self.fail
        self.reports.append(bytes(data))
        if self.on_write is not None:
            self.on_write(len(self.reports))

    def close(self) -> None:
        self.closed = True

    def rgb(self, index: int = -1) -> List[int]:
        return list(self.reports[index][5:17])


class FakeKeySource:
    """Key source double: events are queued by the test."""

    def __init__(self, events=()) -> None:
        self.events: "queue.Queue" = queue.Queue()
        for ev in events:
            self.events.put(ev)
        self.entered = False
        self.exited = False

    def __enter__(self) -> "FakeKeySource":
        self.entered = True
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.exited = True


@pytest.fixture
def transport() -> RecordingTransport:
    return RecordingTransport()


@pytest.fixture
def signals():
    from legion_rgb.core.effects.stop_signals import StopSignals

    return StopSignals()


@pytest.fixture
def keyboard(transport, signals):
    from legion_rgb.core.backends.legion.device import Keyboard

    return Keyboard(transport, stop_event=signals.keyboard_event)


@pytest.fixture
def make_ctx(keyboard, signals):
    """Build an EffectContext around the recording keyboard."""

    from legion_rgb.core.effects.context import EffectContext, EffectInputs

    def _make(**inputs) -> EffectContext:
        refresh = inputs.pop("request_refresh", lambda: None)
        return EffectContext(
            kb=keyboard,
            signals=signals,
            rng=random.Random(1234),
            inputs=EffectInputs(**inputs),
            request_refresh=refresh,
        )

    return _make


@pytest.fixture
def fake_key_source_cls():
    return FakeKeySource
