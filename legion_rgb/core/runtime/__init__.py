from __future__ import annotations

from .instance_lock import SingleInstanceLock

__all__ = ["SingleInstanceLock"]
