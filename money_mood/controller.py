"""Live budget status and theme, recomputed whenever the inputs change.

Pipeline per recompute:

1. keep transactions dated in the clock's current calendar month that are
   debits (negative amounts)
2. sum absolute spend per category
3. pair each budget period's budgeted amount with its category's spend
4. aggregate into one :class:`BudgetStatus`
5. build the theme and move primary/accent onto the smooth gradient
6. publish ``{'theme': ..., 'status': ...}`` to listeners
"""

from __future__ import annotations

import asyncio
import logging
import threading
from datetime import datetime, tzinfo
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from .config import TRANSITION_MS
from .feed import BudgetFeed
from .icon_store import IconStateStore
from .icons import select_variant
from .models import AppIconVariant, BudgetPeriod, BudgetStatus, DynamicTheme, Transaction
from .status import aggregate_overall, progress_percentage
from .theme import DEFAULT_STATUS, DEFAULT_THEME, apply_smooth_color, generate_theme

logger = logging.getLogger(__name__)

Scheduler = Callable[[float, Callable[[], None]], Any]
UpdateListener = Callable[[Dict[str, Any]], None]


def _local_now() -> datetime:
    return datetime.now()


def default_scheduler(delay: float, callback: Callable[[], None]) -> Any:
    """Run ``callback`` after ``delay`` seconds without blocking the caller.

    Uses the running event loop when there is one, otherwise a daemon timer
    thread.
    """
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        timer = threading.Timer(delay, callback)
        timer.daemon = True
        timer.start()
        return timer
    return loop.call_later(delay, callback)


def _wall_time(value: Any, tz: Optional[tzinfo]) -> pd.Timestamp:
    """Naive timestamp for ``value`` as read on a clock in ``tz``.

    Offset-bearing dates are converted to ``tz``; with no ``tz`` they keep
    their own wall time. Unparseable values become NaT.
    """
    try:
        stamp = pd.Timestamp(value)
    except (TypeError, ValueError):
        return pd.NaT
    if stamp is pd.NaT or stamp.tzinfo is None:
        return stamp
    if tz is not None:
        stamp = stamp.tz_convert(tz)
    return stamp.tz_localize(None)


def current_month_spend(transactions: Sequence[Transaction], now: datetime) -> Dict[str, float]:
    """Absolute debit spend per category for the calendar month of ``now``.

    Dates are compared in the frame of ``now``: an aware clock converts
    every offset-bearing date to its zone, a naive clock compares against
    each date's own wall time.
    """
    if not transactions:
        return {}

    df = pd.DataFrame([
        {'Category': t.category_id, 'Amount': t.amount, 'Transaction Date': t.date}
        for t in transactions
    ])
    df['Transaction Date'] = pd.to_datetime(
        df['Transaction Date'].map(lambda value: _wall_time(value, now.tzinfo))
    )

    in_month = (df['Transaction Date'].dt.year == now.year) & (df['Transaction Date'].dt.month == now.month)
    expense = df[in_month & (df['Amount'] < 0)].copy()
    if expense.empty:
        return {}

    expense['AbsAmount'] = expense['Amount'].abs()
    grouped = expense.groupby('Category')['AbsAmount'].sum()
    return {str(category): float(total) for category, total in grouped.items()}


def periods_with_spend(periods: Iterable[BudgetPeriod], spend: Dict[str, float]) -> List[BudgetPeriod]:
    return [period.with_spent(spend.get(period.category_id, 0.0)) for period in periods]


class ReactiveController:
    def __init__(
        self,
        clock: Optional[Callable[[], datetime]] = None,
        scheduler: Optional[Scheduler] = None,
        transition_ms: int = TRANSITION_MS,
    ):
        self._clock = clock or _local_now
        self._scheduler = scheduler or default_scheduler
        self._transition_seconds = max(0, transition_ms) / 1000.0
        self._status: BudgetStatus = DEFAULT_STATUS
        self._theme: DynamicTheme = DEFAULT_THEME
        self._listeners: List[UpdateListener] = []
        self._pending_transitions = 0
        self._lock = threading.Lock()
        self._periods: Tuple[BudgetPeriod, ...] = ()
        self._transactions: Tuple[Transaction, ...] = ()

    @property
    def status(self) -> BudgetStatus:
        return self._status

    @property
    def theme(self) -> DynamicTheme:
        return self._theme

    @property
    def is_transitioning(self) -> bool:
        return self._pending_transitions > 0

    @property
    def icon_variant(self) -> AppIconVariant:
        return select_variant(self._status.percentage)

    def subscribe(self, listener: UpdateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def bind(self, feed: BudgetFeed) -> Callable[[], None]:
        """Recompute now and on every feed update; returns the unsubscribe hook."""
        unsubscribe = feed.subscribe(self._on_feed_change)
        self._on_feed_change(feed)
        return unsubscribe

    def _on_feed_change(self, feed: BudgetFeed) -> None:
        self.recompute(feed.periods, feed.transactions)

    def recompute(
        self,
        periods: Optional[Iterable[BudgetPeriod]] = None,
        transactions: Optional[Iterable[Transaction]] = None,
    ) -> Tuple[BudgetStatus, DynamicTheme]:
        """Rebuild status and theme from the latest inputs and publish them.

        Arguments left as None reuse the inputs of the previous call.
        """
        if periods is not None:
            self._periods = tuple(periods)
        if transactions is not None:
            self._transactions = tuple(transactions)

        self._begin_transition()

        spend = current_month_spend(self._transactions, self._clock())
        status = aggregate_overall(periods_with_spend(self._periods, spend))
        theme = apply_smooth_color(generate_theme(status), status.percentage)

        self._status = status
        self._theme = theme
        logger.debug("Budget status %s at %.1f%%", status.status, status.percentage)
        self._publish()
        return status, theme

    def _begin_transition(self) -> None:
        with self._lock:
            self._pending_transitions += 1
        self._scheduler(self._transition_seconds, self._end_transition)

    def _end_transition(self) -> None:
        # Each recompute owns one pending slot, so overlapping transitions extend the window
        with self._lock:
            self._pending_transitions = max(0, self._pending_transitions - 1)

    def _publish(self) -> None:
        update = {'theme': self._theme, 'status': self._status}
        for listener in list(self._listeners):
            try:
                listener(update)
            except Exception:
                logger.exception("Theme listener %r failed", listener)

    def status_indicator(self) -> Dict[str, Any]:
        status = self._status
        return {
            'icon': status.icon,
            'color': status.color,
            'message': status.description,
            'percentage': status.percentage,
            'progress_percentage': progress_percentage(status),
            'status': status.status,
        }

    async def sync_icon(self, store: IconStateStore, reason: str = 'Budget status change') -> bool:
        """Push the current percentage to the persisted app icon."""
        return await store.update_for_percentage(self._status.percentage, reason)
