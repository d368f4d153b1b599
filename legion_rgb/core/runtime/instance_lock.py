from __future__ import annotations

import logging
import os
from contextlib import suppress
from pathlib import Path
from typing import IO, Optional

from legion_rgb.core.config.paths import lock_file_path

logger = logging.getLogger(__name__)


class SingleInstanceLock:
    """Process-wide exclusive lock so only one manager drives the HID device.

    Uses a non-blocking ``fcntl.flock`` on a lock file in the config dir. On
    platforms without ``fcntl`` the check is skipped and ``acquire`` succeeds.
    """

    def __init__(self, path: Optional[Path] = None) -> None:
        self._path = path
        self._fh: Optional[IO[str]] = None

    @property
    def path(self) -> Path:
        return self._path if self._path is not None else lock_file_path()

    @property
    def held(self) -> bool:
        return self._fh is not None

    def acquire(self) -> bool:
        if self._fh is not None:
            return True

        try:
            import fcntl  # Linux/Unix
        except ImportError:
            return True

        lock_path = self.path
        with suppress(OSError):
            lock_path.parent.mkdir(parents=True, exist_ok=True)

        fh = None
        try:
            fh = open(lock_path, "a+", encoding="utf-8")
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
            fh.seek(0)
            fh.truncate()
            fh.write(f"pid={os.getpid()}\n")
            fh.flush()
        except OSError:
            if fh is not None:
                fh.close()
            logger.info("Instance lock %s is held by another process", lock_path)
            return False

        self._fh = fh
        return True

    def release(self) -> None:
        fh = self._fh
        if fh is None:
            return
        self._fh = None

        try:
            import fcntl
        except ImportError:
            fh.close()
            return

        with suppress(OSError):
            fcntl.flock(fh.fileno(), fcntl.LOCK_UN)
        fh.close()
