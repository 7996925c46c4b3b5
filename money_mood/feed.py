"""Observable holder for the budget and transaction snapshots."""

from __future__ import annotations

import logging
from typing import Any, Callable, Iterable, List, Mapping, Optional, Tuple, Union

from .models import BudgetPeriod, Transaction

logger = logging.getLogger(__name__)

Listener = Callable[['BudgetFeed'], None]


def _as_periods(items: Iterable[Union[BudgetPeriod, Mapping[str, Any]]]) -> Tuple[BudgetPeriod, ...]:
    return tuple(item if isinstance(item, BudgetPeriod) else BudgetPeriod.from_dict(item) for item in items)


def _as_transactions(items: Iterable[Union[Transaction, Mapping[str, Any]]]) -> Tuple[Transaction, ...]:
    return tuple(item if isinstance(item, Transaction) else Transaction.from_dict(item) for item in items)


class BudgetFeed:
    """Latest budget periods and transactions, with change notifications.

    Listeners are called synchronously, in subscription order, after every
    :meth:`update`. A failing listener is logged and skipped.
    """

    def __init__(self, periods=(), transactions=()):
        self._periods: Tuple[BudgetPeriod, ...] = _as_periods(periods)
        self._transactions: Tuple[Transaction, ...] = _as_transactions(transactions)
        self._listeners: List[Listener] = []

    @property
    def periods(self) -> Tuple[BudgetPeriod, ...]:
        return self._periods

    @property
    def transactions(self) -> Tuple[Transaction, ...]:
        return self._transactions

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def update(
        self,
        periods: Optional[Iterable[Union[BudgetPeriod, Mapping[str, Any]]]] = None,
        transactions: Optional[Iterable[Union[Transaction, Mapping[str, Any]]]] = None,
    ) -> None:
        if periods is not None:
            self._periods = _as_periods(periods)
        if transactions is not None:
            self._transactions = _as_transactions(transactions)
        self.notify()

    def notify(self) -> None:
        for listener in list(self._listeners):
            try:
                listener(self)
            except Exception:
                logger.exception("Budget feed listener %r failed", listener)

    def count(self) -> int:
        return len(self._listeners)
