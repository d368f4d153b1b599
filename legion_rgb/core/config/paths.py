"""Config path and environment toggle helpers."""

from __future__ import annotations

import os
from pathlib import Path


def config_dir() -> Path:
    """Return the directory used for legion-rgb state (lock file).

    Priority:
    - LEGION_RGB_CONFIG_DIR
    - XDG_CONFIG_HOME/legion-rgb
    - ~/.config/legion-rgb
    """

    p = os.environ.get("LEGION_RGB_CONFIG_DIR")
    if p:
        return Path(p)

    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg:
        return Path(xdg) / "legion-rgb"

    return Path.home() / ".config" / "legion-rgb"


def lock_file_path() -> Path:
    return config_dir() / "legion-rgb.lock"


def env_flag(name: str) -> bool:
    """Return True when the environment variable is set to a truthy value."""

    return str(os.environ.get(name, "")).strip().lower() in {"1", "true", "yes", "on"}
