from __future__ import annotations

from typing import Callable, Iterator, List, Sequence


def clamp_channel(value: float) -> int:
    v = int(value)
    if v < 0:
        return 0
    if v > 255:
        return 255
    return v


def interpolate(current: Sequence[int], target: Sequence[int], steps: int) -> Iterator[List[int]]:
    """Yield *steps* intermediate frames walking linearly from *current* to *target*.

    Deltas are accumulated in floating point and each frame is truncated, so the
    last frame may be off by one from *target*; callers snap afterwards.
    """

    if steps <= 0:
        return

    n = float(steps)
    deltas = [(float(t) - float(c)) / n for c, t in zip(current, target)]
    acc = [float(c) for c in current]

    for _ in range(int(steps)):
        for i, d in enumerate(deltas):
            acc[i] += d
        yield [clamp_channel(v) for v in acc]


def run_transition(
    write: Callable[[List[int]], None],
    current: Sequence[int],
    target: Sequence[int],
    *,
    steps: int,
    delay_s: float,
    is_cancelled: Callable[[], bool],
    sleep: Callable[[float], object],
) -> bool:
    """Step from *current* to *target*, then snap exactly onto *target*.

    *is_cancelled* is checked before every write. A cancelled run stops on the
    last written frame and skips the snap. Returns True when the snap happened.
    """

    target = list(target)

    for frame in interpolate(current, target, steps):
        if is_cancelled():
            return False
        write(frame)
        if delay_s > 0:
            sleep(delay_s)

    if is_cancelled():
        return False

    write(target)
    return True
