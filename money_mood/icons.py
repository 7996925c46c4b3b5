"""App icon variants and the percentage -> variant selector.

The icon table is configured separately from the status classifier so
that tuning one never silently shifts the other, even though both ship
with the same boundaries today.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional

from .colors import is_hex_color
from .models import AppIconVariant
from .settings import get_config_value, get_mood_config, validate_thresholds
from .status import BUDGET_COLORS

_ICON_CONFIG = get_mood_config()['icons']

# Lower bounds per variant, percent of budget
ICON_THRESHOLDS: Dict[str, float] = validate_thresholds(_ICON_CONFIG['thresholds'])

UNKNOWN_ICON_DESCRIPTION: str = get_config_value(
    'mood', 'icons', 'unknown_description', default='App icon status unknown'
)

DEFAULT_VARIANT = AppIconVariant.GOOD


@dataclass(frozen=True)
class IconConfig:
    variant: AppIconVariant
    color: str
    file_name: str
    description: str
    emoji: str = ''


def validate_icon_entry(name: str, entry: Dict[str, Any]) -> None:
    """Check one icon variant entry from the mood config.

    Raises:
        ValueError: On a non-hex color, a non-PNG asset or a short description
    """
    if not is_hex_color(entry.get('color')):
        raise ValueError(f"Icon for {name} has invalid color {entry.get('color')!r}")
    if not str(entry.get('file_name', '')).endswith('.png'):
        raise ValueError(f"Icon for {name} must be a .png asset")
    if len(str(entry.get('description', ''))) <= 10:
        raise ValueError(f"Icon description for {name} is too short")


def validate_distinct_colors(colors: Iterable[str]) -> None:
    lowered = [str(color).lower() for color in colors]
    if len(set(lowered)) != len(lowered):
        raise ValueError("Icon variant colors must be distinct")


def _load_icon_configs() -> Dict[AppIconVariant, IconConfig]:
    raw = _ICON_CONFIG['variants']
    configs: Dict[AppIconVariant, IconConfig] = {}
    for variant in AppIconVariant:
        entry = raw[variant.value]
        validate_icon_entry(variant.value, entry)
        configs[variant] = IconConfig(
            variant=variant,
            color=entry['color'],
            file_name=entry['file_name'],
            description=entry['description'],
            emoji=entry.get('emoji', ''),
        )
    validate_distinct_colors(config.color for config in configs.values())
    return configs


APP_ICON_CONFIGS: Dict[AppIconVariant, IconConfig] = _load_icon_configs()

_BOUNDS = (
    (AppIconVariant.GOOD, 'GOOD'),
    (AppIconVariant.WARNING, 'WARNING'),
    (AppIconVariant.DANGER, 'DANGER'),
    (AppIconVariant.OVER_BUDGET, 'OVER_BUDGET'),
)


def select_variant(percentage: float) -> AppIconVariant:
    """Pick the icon variant for a budget percentage.

    Total over all floats: negatives land in EXCELLENT, +inf in
    OVER_BUDGET and NaN in EXCELLENT.
    """
    if math.isnan(percentage):
        return AppIconVariant.EXCELLENT
    variant = AppIconVariant.EXCELLENT
    for candidate, key in _BOUNDS:
        if percentage >= ICON_THRESHOLDS[key]:
            variant = candidate
    return variant


def variant_for(color: Any, status_label: Any) -> AppIconVariant:
    """Resolve a variant from a status label and/or color.

    The label wins when it names a variant. Otherwise the color is matched
    against the icon palette, then the status palette. Anything else maps
    to the 'good' variant.
    """
    variant = AppIconVariant.parse(status_label)
    if variant is not None:
        return variant

    if isinstance(color, str):
        needle = color.strip().lower()
        for config in APP_ICON_CONFIGS.values():
            if config.color.lower() == needle:
                return config.variant
        # EXCELLENT and GOOD may share a status color; the first match wins
        for key, status_color in BUDGET_COLORS.items():
            if status_color.lower() == needle:
                return AppIconVariant(key.lower())

    return DEFAULT_VARIANT


def describe_variant(variant: Optional[AppIconVariant]) -> str:
    if variant is None:
        return UNKNOWN_ICON_DESCRIPTION
    return APP_ICON_CONFIGS[variant].description


def emotional_progression() -> str:
    """One line per variant describing the face shown at that mood."""
    progression = _ICON_CONFIG['progression']
    lines = []
    for variant in AppIconVariant:
        label = variant.value.replace('_', ' ').title()
        lines.append(f"{APP_ICON_CONFIGS[variant].emoji} {label}: {progression[variant.value]}")
    return '\n'.join(lines)
