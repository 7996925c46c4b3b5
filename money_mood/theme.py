"""Theme palette derived from a budget status."""

from __future__ import annotations

from dataclasses import replace

from .colors import darken_color, lighten_color, smooth_color
from .models import BudgetStatus, DynamicTheme
from .settings import get_mood_config
from .status import BUDGET_COLORS, STATUS_DESCRIPTIONS, STATUS_EMOJI

_THEME_CONFIG = get_mood_config()['theme']

LIGHT_SHIFT = float(_THEME_CONFIG['light_shift'])
DARK_SHIFT = float(_THEME_CONFIG['dark_shift'])

DEFAULT_STATUS = BudgetStatus(
    percentage=0.0,
    status='excellent',
    color=BUDGET_COLORS['EXCELLENT'],
    description=STATUS_DESCRIPTIONS['excellent'],
    icon=STATUS_EMOJI['excellent'],
)


def generate_theme(status: BudgetStatus) -> DynamicTheme:
    """Build a full palette around the discrete status color.

    Structural colors (background, surface, text) are fixed. Primary and
    accent start out as ``status.color``; callers that want the animated
    gradient pass the result through :func:`apply_smooth_color`.
    """
    base = status.color
    return DynamicTheme(
        primary=base,
        primary_light=lighten_color(base, LIGHT_SHIFT),
        primary_dark=darken_color(base, DARK_SHIFT),
        accent=base,
        background=_THEME_CONFIG['background'],
        surface=_THEME_CONFIG['surface'],
        text=_THEME_CONFIG['text'],
        text_secondary=_THEME_CONFIG['text_secondary'],
    )


def apply_smooth_color(theme: DynamicTheme, percentage: float) -> DynamicTheme:
    """Return a copy of ``theme`` with primary/accent on the continuous gradient."""
    color = smooth_color(percentage)
    return replace(theme, primary=color, accent=color)


DEFAULT_THEME = generate_theme(DEFAULT_STATUS)
