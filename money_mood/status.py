"""Budget status classification and aggregation.

:func:`classify` maps a spent/budgeted pair onto one of five statuses;
:func:`aggregate_overall` sums a collection of budget periods and
classifies the totals. Both are pure and safe to call from anywhere.

Threshold table (lower bound inclusive, percent of budget)::

    excellent    [-inf, 50)
    good         [50, 75)
    warning      [75, 100)
    danger       [100, 110)
    over_budget  [110, +inf]
"""

from __future__ import annotations

import math
from typing import Any, Dict, Iterable, Mapping, Union

from .colors import hex_to_rgb
from .models import BudgetPeriod, BudgetStatus, spend_percentage
from .settings import get_mood_config, validate_thresholds

_STATUS_CONFIG = get_mood_config()['status']

# Lower bounds per bucket, percent of budget
BUDGET_THRESHOLDS: Dict[str, float] = validate_thresholds(_STATUS_CONFIG['thresholds'])

BUDGET_COLORS: Dict[str, str] = dict(_STATUS_CONFIG['colors'])
for _color in BUDGET_COLORS.values():
    hex_to_rgb(_color)

STATUS_DESCRIPTIONS: Dict[str, str] = dict(_STATUS_CONFIG['descriptions'])
STATUS_EMOJI: Dict[str, str] = dict(_STATUS_CONFIG['emoji'])
NO_BUDGETS_DESCRIPTION: str = _STATUS_CONFIG['empty_description']

DEFAULT_STATUS_LABEL = 'good'

# Status tag -> key in BUDGET_THRESHOLDS / BUDGET_COLORS, least severe first
_STATUS_KEYS = (
    ('excellent', 'EXCELLENT'),
    ('good', 'GOOD'),
    ('warning', 'WARNING'),
    ('danger', 'DANGER'),
    ('over_budget', 'OVER_BUDGET'),
)
_KEY_BY_STATUS = dict(_STATUS_KEYS)

PeriodLike = Union[BudgetPeriod, Mapping[str, Any]]


def _normalize_status(status: Any) -> str:
    label = getattr(status, 'status', status)
    if not isinstance(label, str):
        return DEFAULT_STATUS_LABEL
    label = label.strip().lower().replace('-', '_')
    return label if label in _KEY_BY_STATUS else DEFAULT_STATUS_LABEL


def status_for_percentage(percentage: float) -> str:
    """Return the status tag for a percentage of budget spent."""
    label = _STATUS_KEYS[0][0]
    for status, key in _STATUS_KEYS[1:]:
        if percentage >= BUDGET_THRESHOLDS[key]:
            label = status
    return label


def get_budget_color(status: Any) -> str:
    """Color for a status tag; unknown input falls back to the 'good' color."""
    return BUDGET_COLORS[_KEY_BY_STATUS[_normalize_status(status)]]


def get_status_description(status: Any) -> str:
    """Description for a status tag; unknown input falls back to 'good'."""
    return STATUS_DESCRIPTIONS[_normalize_status(status)]


def get_budget_status_message(status: Any) -> str:
    """Emoji-prefixed description for a :class:`BudgetStatus` or status tag."""
    if isinstance(status, BudgetStatus):
        label = _normalize_status(status.status)
        return f"{STATUS_EMOJI[label]} {status.description}"
    label = _normalize_status(status)
    return f"{STATUS_EMOJI[label]} {STATUS_DESCRIPTIONS[label]}"


def classify(spent: float, budgeted: float) -> BudgetStatus:
    """Classify spending against a budget.

    Args:
        spent: Amount spent; negative values (refunds) are allowed
        budgeted: Amount budgeted

    Returns:
        BudgetStatus with percentage, status, color, description and icon

    Example:
        >>> classify(800, 1000).status
        'warning'
        >>> classify(100, 0).percentage
        inf
    """
    percentage = spend_percentage(spent, budgeted)
    label = status_for_percentage(percentage)
    return BudgetStatus(
        percentage=percentage,
        status=label,
        color=BUDGET_COLORS[_KEY_BY_STATUS[label]],
        description=STATUS_DESCRIPTIONS[label],
        icon=STATUS_EMOJI[label],
    )


def _amounts(period: PeriodLike) -> tuple:
    if isinstance(period, BudgetPeriod):
        return period.spent_amount, period.budgeted_amount
    spent = period.get('spentAmount', period.get('spent_amount', period.get('spent', 0.0)))
    budgeted = period.get('budgetedAmount', period.get('budgeted_amount', period.get('budgeted', 0.0)))
    return float(spent or 0.0), float(budgeted or 0.0)


def aggregate_overall(periods: Iterable[PeriodLike]) -> BudgetStatus:
    """Classify the combined spend of a collection of budget periods.

    Only the totals matter; per-period ``is_over_budget`` flags and the
    order of the input are ignored.
    """
    pairs = [_amounts(period) for period in periods]
    if not pairs:
        return BudgetStatus(
            percentage=0.0,
            status=DEFAULT_STATUS_LABEL,
            color=BUDGET_COLORS['GOOD'],
            description=NO_BUDGETS_DESCRIPTION,
            icon=STATUS_EMOJI[DEFAULT_STATUS_LABEL],
        )

    total_spent = math.fsum(spent for spent, _ in pairs)
    total_budgeted = math.fsum(budgeted for _, budgeted in pairs)
    return classify(total_spent, total_budgeted)


def status_for_icon(periods: Iterable[PeriodLike]) -> Dict[str, Any]:
    """Overall status reduced to what the icon service needs."""
    overall = aggregate_overall(periods)
    return {
        'color': overall.color,
        'status': overall.status,
        'percentage': overall.percentage,
    }


def progress_percentage(status: BudgetStatus) -> float:
    """Percentage clamped to [0, 100] for progress bars."""
    return min(max(status.percentage, 0.0), 100.0)
