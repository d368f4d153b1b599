from __future__ import annotations

import builtins
from pathlib import Path

from legion_rgb.core.runtime.instance_lock import SingleInstanceLock


def test_acquire_returns_true_when_fcntl_missing(monkeypatch, tmp_path) -> None:
    orig_import = builtins.__import__

    def fake_import(name, globals=None, locals=None, fromlist=(), level=0):
        if name == "fcntl":
            raise ImportError("no fcntl")
        return orig_import(name, globals, locals, fromlist, level)

    monkeypatch.setattr(builtins, "__import__", fake_import)

    lock = SingleInstanceLock(tmp_path / "x.lock")
    assert lock.acquire() is True
    assert not (tmp_path / "x.lock").exists()


def test_acquire_creates_lock_file_and_writes_pid(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("LEGION_RGB_CONFIG_DIR", str(tmp_path / "cfg"))

    lock = SingleInstanceLock()
    try:
        assert lock.acquire() is True
        assert lock.held is True

        lock_path = Path(tmp_path) / "cfg" / "legion-rgb.lock"
        assert lock.path == lock_path
        assert lock_path.read_text(encoding="utf-8").startswith("pid=")
    finally:
        lock.release()

    assert lock.held is False


def test_acquire_returns_false_if_already_locked(tmp_path) -> None:
    import fcntl

    lock_path = tmp_path / "legion-rgb.lock"

    # Hold the lock in this test process with a different file handle.
    with open(lock_path, "a+") as fh:
        fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        assert SingleInstanceLock(lock_path).acquire() is False
        fh.flush()

    # After closing, acquiring should succeed.
    lock = SingleInstanceLock(lock_path)
    assert lock.acquire() is True
    lock.release()


def test_second_instance_is_refused_until_release(tmp_path) -> None:
    first = SingleInstanceLock(tmp_path / "legion-rgb.lock")
    second = SingleInstanceLock(tmp_path / "legion-rgb.lock")

    assert first.acquire() is True
    assert first.acquire() is True
    assert second.acquire() is False

    first.release()
    assert second.acquire() is True
    second.release()
