from __future__ import annotations

from .paths import config_dir, env_flag, lock_file_path

__all__ = ["config_dir", "env_flag", "lock_file_path"]
