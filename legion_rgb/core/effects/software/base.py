from __future__ import annotations

from typing import List, Sequence, Tuple

Color = Tuple[int, int, int]

ZONES = 4
BLACK: Tuple[int, ...] = (0,) * (ZONES * 3)
WHITE: Color = (255, 255, 255)


def black() -> List[int]:
    return list(BLACK)


def solid(color: Sequence[int]) -> List[int]:
    return [int(c) for c in color[:3]] * ZONES


def set_zone(values: List[int], index: int, color: Sequence[int]) -> None:
    values[index * 3 : index * 3 + 3] = [int(c) for c in color[:3]]


def zone_color(values: Sequence[int], index: int) -> Color:
    return (int(values[index * 3]), int(values[index * 3 + 1]), int(values[index * 3 + 2]))


def rotate_zones(values: Sequence[int], zones: int) -> List[int]:
    """Rotate a 12-byte array by whole zones (positive = toward higher indexes)."""

    shift = (int(zones) * 3) % len(values)
    if shift == 0:
        return list(values)
    return list(values[-shift:]) + list(values[:-shift])


def zone_order(reverse: bool) -> List[int]:
    order = list(range(ZONES))
    return order[::-1] if reverse else order


def steps_for_speed(base_steps: int, speed: int) -> int:
    return int(base_steps) // max(1, int(speed))
