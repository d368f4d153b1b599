from __future__ import annotations

import threading


class StopSignals:
    """Cancellation token shared by the manager, the running effect and input listeners.

    Two flags:

    - ``manager``: the running effect must return at its next check.
    - ``keyboard``: automatic writes are suppressed (a transition in progress
      stops early) because the user is interacting with the keyboard.

    Many threads read and raise the flags. Only the manager clears both, and it
    does so only between commands. Fade and Ripple additionally lower
    ``keyboard`` after handling a key press.
    """

    def __init__(self) -> None:
        self._manager = threading.Event()
        self._keyboard = threading.Event()

    @property
    def manager_event(self) -> threading.Event:
        return self._manager

    @property
    def keyboard_event(self) -> threading.Event:
        return self._keyboard

    @property
    def manager_stopped(self) -> bool:
        return self._manager.is_set()

    @property
    def keyboard_stopped(self) -> bool:
        return self._keyboard.is_set()

    def raise_all(self) -> None:
        self._manager.set()
        self._keyboard.set()

    def clear_all(self) -> None:
        self._manager.clear()
        self._keyboard.clear()

    def stop_keyboard(self) -> None:
        self._keyboard.set()

    def resume_keyboard(self) -> None:
        self._keyboard.clear()

    def sleep(self, seconds: float) -> bool:
        """Wait up to *seconds*, returning early when the manager flag is raised.

        Returns True if the full interval elapsed without a stop request.
        """

        if seconds <= 0:
            return not self._manager.is_set()
        return not self._manager.wait(seconds)

    def __repr__(self) -> str:
        return f"StopSignals(manager={self.manager_stopped}, keyboard={self.keyboard_stopped})"
