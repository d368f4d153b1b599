"""Screen frame -> four zone colors."""

from __future__ import annotations

import colorsys
from typing import List, Tuple

from PIL import Image

Color = Tuple[int, int, int]


def downsample_to_zones(frame: Image.Image, zones: int = 4) -> List[Color]:
    """Average the frame into one color per vertical strip.

    Alpha is premultiplied before the box resize so transparent pixels do not
    bleed their (meaningless) RGB into the average, then divided back out.
    """

    premultiplied = frame.convert("RGBA").convert("RGBa")
    row = premultiplied.resize((zones, 1), Image.Resampling.BOX).convert("RGBA")
    out: List[Color] = []
    for x in range(zones):
        r, g, b, _a = row.getpixel((x, 0))
        out.append((int(r), int(g), int(b)))
    return out


def boost_saturation(color: Color, boost: float) -> Color:
    """Push HSV saturation toward 1 by *boost* (0 = unchanged, 1 = fully saturated)."""

    if boost <= 0:
        return color
    boost = min(float(boost), 1.0)
    h, s, v = colorsys.rgb_to_hsv(color[0] / 255.0, color[1] / 255.0, color[2] / 255.0)
    if s == 0.0:
        # Greys have no hue to push toward.
        return color
    s = s + (1.0 - s) * boost
    r, g, b = colorsys.hsv_to_rgb(h, s, v)
    return (_channel(r), _channel(g), _channel(b))


def warm_desaturate(color: Color) -> Color:
    """Dim the color and bias it warm, flattening strongly single-channel hues."""

    src_r, src_g, src_b = color
    r = src_r // 20 * 10
    g = src_g // 30 * 10
    b = src_b // 70 * 10

    if r < 31 and g < 15 and b < 9:
        return (32, 16, 10)

    if r > g + b:
        r, g, b = src_r // 3, src_r // 7, src_r // 7
    if g > r + b:
        r, g, b = src_g // 3, src_g // 2, src_g // 3
    if b > r + g:
        r, g, b = src_b // 7, src_b // 7, src_b // 3
    return (r, g, b)


def frame_to_zone_colors(
    frame: Image.Image,
    *,
    saturation_boost: float = 0.0,
    warm: bool = False,
) -> List[int]:
    """Full ambient pipeline, returning the 12 channel bytes for the keyboard."""

    out: List[int] = []
    for color in downsample_to_zones(frame):
        color = boost_saturation(color, saturation_boost)
        if warm:
            color = warm_desaturate(color)
        out.extend(color)
    return out


def _channel(value: float) -> int:
    return min(255, max(0, int(round(value * 255.0))))
