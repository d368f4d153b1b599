from __future__ import annotations

import logging
import threading
import time

from legion_rgb.core.config.paths import env_flag


_last_log_times: dict[str, float] = {}
_lock = threading.Lock()


def log_throttled(
    logger,
    key: str,
    *,
    interval_s: float,
    level: int,
    msg: str,
    exc: BaseException | None = None,
) -> bool:
    """Log at most once per *interval_s* for a given *key*.

    Returns True if the message was logged.
    """

    now = time.monotonic()
    with _lock:
        last = _last_log_times.get(key)
        if last is not None and (now - last) < interval_s:
            return False
        _last_log_times[key] = now

    if exc is not None:
        logger.log(level, msg, exc_info=exc)
        return True

    logger.log(level, msg)
    return True


def configure_logging() -> None:
    """Configure root logging for front ends that embed the core.

    Does nothing when the host application already installed handlers.
    """

    if logging.getLogger().handlers:
        return

    level = logging.DEBUG if env_flag("LEGION_RGB_DEBUG") else logging.INFO
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
