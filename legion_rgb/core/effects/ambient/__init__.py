"""Screen-mirroring ambient light effect."""

from __future__ import annotations

from .capture import FrameCapturer, MonitorGrabber, ScreenCapturer, open_screen_capturer, select_monitor
from .effect import run_ambient
from .pipeline import boost_saturation, downsample_to_zones, frame_to_zone_colors, warm_desaturate

__all__ = [
    "FrameCapturer",
    "MonitorGrabber",
    "ScreenCapturer",
    "boost_saturation",
    "downsample_to_zones",
    "frame_to_zone_colors",
    "open_screen_capturer",
    "run_ambient",
    "select_monitor",
    "warm_desaturate",
]
