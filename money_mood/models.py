"""Data objects shared by the classifier, theme and icon modules.

Budget periods and transactions are snapshots handed in by an upstream
data layer; nothing in this package mutates them. Upstream payloads use
camelCase keys, so each record offers a ``from_dict`` that accepts either
spelling.
"""

from __future__ import annotations

import math
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Union


def _pick(data: Mapping[str, Any], *keys: str, default: Any = None) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


def spend_percentage(spent: float, budgeted: float) -> float:
    """Percent of budget consumed; +inf when spending against a zero budget."""
    if budgeted == 0:
        return math.inf if spent > 0 else 0.0
    return (spent / budgeted) * 100.0


class AppIconVariant(str, Enum):
    EXCELLENT = 'excellent'
    GOOD = 'good'
    WARNING = 'warning'
    DANGER = 'danger'
    OVER_BUDGET = 'over_budget'

    @property
    def severity(self) -> int:
        return _SEVERITY[self]

    @classmethod
    def parse(cls, value: Any) -> Optional['AppIconVariant']:
        """Return the variant for a tag such as ``'over-budget'``, or None."""
        if isinstance(value, cls):
            return value
        if not isinstance(value, str):
            return None
        normalized = value.strip().lower().replace('-', '_').replace(' ', '_')
        try:
            return cls(normalized)
        except ValueError:
            return None


_SEVERITY = {variant: index for index, variant in enumerate(AppIconVariant)}

STATUS_LABELS = tuple(variant.value for variant in AppIconVariant)


@dataclass(frozen=True)
class BudgetPeriod:
    id: str
    budget_id: str
    category_id: str
    budgeted_amount: float
    spent_amount: float
    start_date: str = ''
    end_date: str = ''

    @property
    def remaining_amount(self) -> float:
        return self.budgeted_amount - self.spent_amount

    @property
    def percentage(self) -> float:
        return spend_percentage(self.spent_amount, self.budgeted_amount)

    @property
    def is_over_budget(self) -> bool:
        return self.percentage >= 100

    def with_spent(self, spent_amount: float) -> 'BudgetPeriod':
        return replace(self, spent_amount=float(spent_amount))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'BudgetPeriod':
        return cls(
            id=str(_pick(data, 'id', default='')),
            budget_id=str(_pick(data, 'budgetId', 'budget_id', default='')),
            category_id=str(_pick(data, 'categoryId', 'category_id', default='')),
            budgeted_amount=float(_pick(data, 'budgetedAmount', 'budgeted_amount', 'budgeted', default=0.0)),
            spent_amount=float(_pick(data, 'spentAmount', 'spent_amount', 'spent', default=0.0)),
            start_date=str(_pick(data, 'startDate', 'start_date', default='')),
            end_date=str(_pick(data, 'endDate', 'end_date', default='')),
        )


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str
    amount: float
    category_id: str
    description: str = ''

    @property
    def is_debit(self) -> bool:
        return self.amount < 0

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'Transaction':
        return cls(
            id=str(_pick(data, 'id', default='')),
            date=str(_pick(data, 'date', default='')),
            amount=float(_pick(data, 'amount', default=0.0)),
            category_id=str(_pick(data, 'categoryId', 'category_id', default='')),
            description=str(_pick(data, 'description', default='')),
        )


@dataclass(frozen=True)
class BudgetStatus:
    percentage: float
    status: str
    color: str
    description: str
    icon: str = ''

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class DynamicTheme:
    primary: str
    primary_light: str
    primary_dark: str
    accent: str
    background: str
    surface: str
    text: str
    text_secondary: str

    def to_dict(self) -> Dict[str, str]:
        return {
            'primary': self.primary,
            'primaryLight': self.primary_light,
            'primaryDark': self.primary_dark,
            'accent': self.accent,
            'background': self.background,
            'surface': self.surface,
            'text': self.text,
            'textSecondary': self.text_secondary,
        }


VariantLike = Union[AppIconVariant, str]


@dataclass(frozen=True)
class IconChangeLogEntry:
    timestamp: str
    from_variant: Optional[VariantLike]
    to_variant: VariantLike
    budget_percentage: float
    reason: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'timestamp': self.timestamp,
            'fromVariant': _variant_value(self.from_variant),
            'toVariant': _variant_value(self.to_variant),
            'budgetPercentage': _json_number(self.budget_percentage),
            'reason': self.reason,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> 'IconChangeLogEntry':
        from_raw = _pick(data, 'fromVariant', 'from_variant')
        to_raw = _pick(data, 'toVariant', 'to_variant', default='')
        return cls(
            timestamp=str(_pick(data, 'timestamp', default='')),
            from_variant=AppIconVariant.parse(from_raw) or from_raw,
            to_variant=AppIconVariant.parse(to_raw) or to_raw,
            budget_percentage=float(_pick(data, 'budgetPercentage', 'budget_percentage', default=0.0)),
            reason=str(_pick(data, 'reason', default='')),
        )


def _variant_value(variant: Optional[VariantLike]) -> Optional[str]:
    if isinstance(variant, AppIconVariant):
        return variant.value
    return variant


def _json_number(value: float) -> Union[float, str]:
    # JSON has no infinity; keep the marker readable for float() on the way back
    if math.isinf(value):
        return 'Infinity' if value > 0 else '-Infinity'
    if math.isnan(value):
        return 'NaN'
    return value
