"""Top-level package for Money Mood.

Money Mood turns budget data into a qualitative "financial health" state
and feeds it to two presentation channels: a live color theme and a
persisted app icon variant. The primary modules are:

* ``status`` – five-way status classification and aggregation
* ``colors`` – the continuous budget color gradient and hex helpers
* ``theme`` – theme palettes built from a status
* ``icons`` – icon variants and the percentage -> variant selector
* ``icon_store`` – persisted icon variant plus a bounded change history
* ``controller`` – recomputes status and theme whenever the inputs change

A minimal wiring looks like:

```python
feed = BudgetFeed()
controller = ReactiveController()
controller.bind(feed)
feed.update(periods=periods, transactions=transactions)
await controller.sync_icon(IconStateStore(JsonFileStore()))
```
"""

from .colors import smooth_color
from .controller import ReactiveController
from .feed import BudgetFeed
from .icon_store import IconStateStore
from .icons import APP_ICON_CONFIGS, select_variant
from .models import (
    AppIconVariant,
    BudgetPeriod,
    BudgetStatus,
    DynamicTheme,
    IconChangeLogEntry,
    Transaction,
)
from .status import aggregate_overall, classify
from .storage import JsonFileStore, MemoryStore
from .theme import generate_theme

__all__ = [
    "classify",
    "aggregate_overall",
    "smooth_color",
    "generate_theme",
    "select_variant",
    "APP_ICON_CONFIGS",
    "IconStateStore",
    "ReactiveController",
    "BudgetFeed",
    "JsonFileStore",
    "MemoryStore",
    "AppIconVariant",
    "BudgetPeriod",
    "BudgetStatus",
    "DynamicTheme",
    "IconChangeLogEntry",
    "Transaction",
]
