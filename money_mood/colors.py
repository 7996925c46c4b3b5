"""Hex color helpers and the continuous budget color gradient.

:func:`smooth_color` is deliberately separate from the five-way status
classifier. The classifier drives badges and icons; the gradient drives the
animated primary color, so a one point change in spending never produces a
visible jump.
"""

from __future__ import annotations

import math
import re
from typing import List, Sequence, Tuple

import numpy as np

from .settings import get_mood_config

HEX_COLOR_RE = re.compile(r'^#[0-9A-Fa-f]{6}$')

RGB = Tuple[int, int, int]


def is_hex_color(value: object) -> bool:
    """Return True for ``#RRGGBB`` strings."""
    return isinstance(value, str) and bool(HEX_COLOR_RE.match(value))


def hex_to_rgb(hex_color: str) -> RGB:
    """Convert ``#RRGGBB`` to an ``(r, g, b)`` tuple.

    Raises:
        ValueError: If the value is not a 6-digit hex color
    """
    if not is_hex_color(hex_color):
        raise ValueError(f"Invalid hex color: {hex_color!r}")
    value = hex_color[1:]
    return int(value[0:2], 16), int(value[2:4], 16), int(value[4:6], 16)


def rgb_to_hex(rgb: Sequence[float]) -> str:
    """Convert an RGB triple to ``#rrggbb``, rounding and clamping each channel."""
    channels = [min(255, max(0, int(round(float(c))))) for c in rgb]
    return '#' + ''.join(f'{c:02x}' for c in channels)


def _shift(hex_color: str, amount: int) -> str:
    r, g, b = hex_to_rgb(hex_color)
    return rgb_to_hex((r + amount, g + amount, b + amount))


def lighten_color(hex_color: str, percent: float) -> str:
    """Lighten each channel by ``round(2.55 * percent)``, clamped to 255."""
    return _shift(hex_color, int(round(2.55 * percent)))


def darken_color(hex_color: str, percent: float) -> str:
    """Darken each channel by ``round(2.55 * percent)``, clamped to 0."""
    return _shift(hex_color, -int(round(2.55 * percent)))


def interpolate_color(start: str, end: str, fraction: float) -> str:
    """Linear RGB blend; ``fraction`` 0 gives ``start`` and 1 gives ``end``."""
    fraction = min(1.0, max(0.0, fraction))
    a = np.array(hex_to_rgb(start), dtype=float)
    b = np.array(hex_to_rgb(end), dtype=float)
    return rgb_to_hex(a + (b - a) * fraction)


def _load_anchors() -> List[Tuple[float, str]]:
    config = get_mood_config()
    colors = config['status']['colors']
    anchors = [(float(pct), colors[key]) for pct, key in config['interpolation']['anchors']]
    positions = [pct for pct, _ in anchors]
    if len(anchors) < 2 or any(b <= a for a, b in zip(positions, positions[1:])):
        raise ValueError(f"Interpolation anchors must be strictly increasing, got {positions}")
    for _, color in anchors:
        hex_to_rgb(color)
    return anchors


# Ordered (percentage, color) anchor points of the gradient
COLOR_ANCHORS: List[Tuple[float, str]] = _load_anchors()

_ANCHOR_POSITIONS = np.array([pct for pct, _ in COLOR_ANCHORS], dtype=float)
_ANCHOR_CHANNELS = np.array([hex_to_rgb(color) for _, color in COLOR_ANCHORS], dtype=float).T


def smooth_color(percentage: float) -> str:
    """Map a budget percentage onto the continuous status gradient.

    Input below the first anchor or above the last is clamped to the end
    colors. Between anchors each RGB channel is interpolated linearly.
    NaN is treated as the lowest anchor.

    Example:
        >>> smooth_color(0)
        '#00d4aa'
        >>> smooth_color(250)
        '#dc3545'
    """
    value = float(percentage)
    if math.isnan(value):
        value = float(_ANCHOR_POSITIONS[0])
    # np.interp clamps to the end values outside the anchor range, +/-inf included
    channels = [np.interp(value, _ANCHOR_POSITIONS, channel) for channel in _ANCHOR_CHANNELS]
    return rgb_to_hex(channels)
