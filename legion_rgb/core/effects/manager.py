from __future__ import annotations

import logging
import queue
import random
import threading
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Union

from legion_rgb.core.backends.legion.backend import get_keyboard
from legion_rgb.core.backends.legion.device import Keyboard
from legion_rgb.core.backends.legion.protocol import SPEED_MAX, SPEED_MIN, EffectType
from legion_rgb.core.profile.custom_effect import CustomEffect
from legion_rgb.core.profile.models import Profile
from legion_rgb.core.runtime.instance_lock import SingleInstanceLock
from legion_rgb.core.utils.exceptions import (
    CreationErrorKind,
    LegionRGBError,
    ManagerCreationError,
    is_permission_denied,
)

from .context import EffectContext, EffectInputs
from .runner import run_effect
from .software.custom import run_custom_effect
from .stop_signals import StopSignals
from .timing import MANAGER_IDLE_POLL_S

logger = logging.getLogger(__name__)


class OperationMode(str, Enum):
    # Play one command and exit.
    CLI = "cli"
    # Serve commands until shutdown; only the newest queued command is played.
    GUI = "gui"


@dataclass(frozen=True)
class ProfileCommand:
    profile: Profile


@dataclass(frozen=True)
class CustomEffectCommand:
    effect: CustomEffect


@dataclass(frozen=True)
class RefreshCommand:
    """Replay the last profile (requested by an effect that lost its input source)."""


@dataclass(frozen=True)
class ExitCommand:
    pass


Command = Union[ProfileCommand, CustomEffectCommand, RefreshCommand, ExitCommand]


class EffectManager:
    """Owns the keyboard and plays one effect at a time on a dedicated worker thread.

    Callers hand over profiles or custom effects. Each request raises both stop
    flags so the running effect returns at its next check, then the worker
    plays the new request. After `shutdown()` returns no device write happens.
    """

    def __init__(
        self,
        operation_mode: OperationMode = OperationMode.GUI,
        *,
        keyboard: Optional[Keyboard] = None,
        inputs: Optional[EffectInputs] = None,
        instance_lock: Optional[SingleInstanceLock] = None,
        rng: Optional[random.Random] = None,
        on_error: Optional[Callable[[BaseException], None]] = None,
    ) -> None:
        self.mode = OperationMode(operation_mode)
        self.signals = StopSignals()
        self.last_profile: Optional[Profile] = None
        self.last_error: Optional[BaseException] = None
        self._on_error = on_error

        self._lock = instance_lock if instance_lock is not None else SingleInstanceLock()
        if not self._lock.acquire():
            raise ManagerCreationError(
                CreationErrorKind.INSTANCE_ALREADY_RUNNING,
                f"another legion-rgb instance holds {self._lock.path}",
            )

        try:
            kb = keyboard if keyboard is not None else get_keyboard(stop_event=self.signals.keyboard_event)
        except (LegionRGBError, OSError) as exc:
            self._lock.release()
            if is_permission_denied(exc):
                logger.error("%s", exc)
            raise ManagerCreationError(CreationErrorKind.ACQUIRE_KEYBOARD, str(exc)) from exc
        kb.set_stop_event(self.signals.keyboard_event)
        self._kb = kb

        self._queue: "queue.Queue[Command]" = queue.Queue()
        # Serialises "raise stops + enqueue" against "drain + clear stops" so a
        # stop request can never be cleared without its command being seen.
        self._dispatch_lock = threading.Lock()
        self._shut_down = False

        self._ctx = EffectContext(
            kb=kb,
            signals=self.signals,
            rng=rng if rng is not None else random.Random(),
            inputs=inputs if inputs is not None else EffectInputs(),
            request_refresh=self._request_refresh,
        )
        self._thread = threading.Thread(target=self._worker, name="legion-rgb-effects", daemon=True)
        self._thread.start()

    # -- public API ----------------------------------------------------------

    @property
    def keyboard(self) -> Keyboard:
        return self._kb

    @property
    def running(self) -> bool:
        return self._thread.is_alive()

    def set_profile(self, profile: Profile) -> None:
        self._submit(ProfileCommand(profile))

    def custom_effect(self, effect: CustomEffect) -> None:
        self._submit(CustomEffectCommand(effect))

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the worker exits (CLI mode). Returns True if it has."""

        self._thread.join(timeout=timeout)
        return not self._thread.is_alive()

    def shutdown(self, timeout: float = 5.0) -> None:
        if self._shut_down:
            return
        self._shut_down = True

        with self._dispatch_lock:
            self.signals.raise_all()
            self._queue.put(ExitCommand())

        if self._thread is not threading.current_thread():
            self._thread.join(timeout=timeout)
            if self._thread.is_alive():
                logger.warning("Effect worker did not stop within %.1fs", timeout)

        # Closing first makes any straggling write fail instead of reaching the device.
        self._kb.close()
        self._lock.release()

    def __enter__(self) -> "EffectManager":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.shutdown()

    # -- internals -----------------------------------------------------------

    def _submit(self, command: Command) -> None:
        if self._shut_down:
            raise RuntimeError("EffectManager has been shut down")
        with self._dispatch_lock:
            self.signals.raise_all()
            self._queue.put(command)

    def _request_refresh(self) -> None:
        self._queue.put(RefreshCommand())

    def _worker(self) -> None:
        self._kb.bind_owner()
        try:
            if self.mode is OperationMode.CLI:
                self._serve_once()
            else:
                self._serve_forever()
        finally:
            self._kb.release_owner()
            logger.debug("Effect worker exited")

    def _serve_forever(self) -> None:
        while True:
            command = self._next_command(coalesce=True)
            if command is None:
                continue
            if isinstance(command, ExitCommand):
                return
            self._handle(command)

    def _serve_once(self) -> None:
        command = self._next_command(coalesce=False, block=True)
        if command is None or isinstance(command, ExitCommand):
            return
        self._handle(command)

        # An effect may ask to be restarted (e.g. the capture source changed).
        while True:
            pending = self._next_command(coalesce=False, block=False)
            if not isinstance(pending, RefreshCommand):
                return
            self._handle(pending)

    def _next_command(self, *, coalesce: bool, block: bool = False) -> Optional[Command]:
        try:
            if block:
                first = self._queue.get()
            elif coalesce:
                first = self._queue.get(timeout=MANAGER_IDLE_POLL_S)
            else:
                first = self._queue.get_nowait()
        except queue.Empty:
            return None

        with self._dispatch_lock:
            pending = [first]
            if coalesce:
                while True:
                    try:
                        pending.append(self._queue.get_nowait())
                    except queue.Empty:
                        break
            self.signals.clear_all()

        return self._pick(pending)

    @staticmethod
    def _pick(pending: list[Command]) -> Command:
        """Exit wins, then the newest user command, then a refresh."""

        for command in pending:
            if isinstance(command, ExitCommand):
                return command
        user = [c for c in pending if not isinstance(c, RefreshCommand)]
        return user[-1] if user else pending[-1]

    def _handle(self, command: Command) -> None:
        try:
            if isinstance(command, ProfileCommand):
                self._apply_profile(command.profile)
            elif isinstance(command, CustomEffectCommand):
                run_custom_effect(self._ctx, command.effect)
                self.signals.clear_all()
            elif isinstance(command, RefreshCommand):
                if self.last_profile is not None:
                    self._apply_profile(self.last_profile)
        except Exception as exc:
            logger.exception("Effect failed: %s", exc)
            self.last_error = exc
            if self._on_error is not None:
                try:
                    self._on_error(exc)
                except Exception:
                    logger.exception("on_error callback failed")

    def _apply_profile(self, profile: Profile) -> None:
        self.last_profile = profile
        kb = self._kb

        if profile.effect.is_built_in:
            kb.set_speed(min(max(profile.speed, SPEED_MIN), SPEED_MAX))
        else:
            # Software effects animate by rewriting Static colors.
            kb.set_effect(EffectType.STATIC)
        kb.set_brightness(profile.brightness.driver_value)

        run_effect(self._ctx, profile)
        self.signals.clear_all()
