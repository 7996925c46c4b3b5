"""Persisted app icon variant and its change history.

Icon state is cosmetic, so no method here raises: storage failures are
logged and the call degrades to a no-op (reads return ``None`` or an empty
history). There are no retries; a later read simply misses a failed write.

History appends are read-modify-write without compare-and-swap. Two
concurrent ``append_history`` calls against the same store can lose one
entry, which is acceptable for an informational log.
"""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional

import pandas as pd

from .config import HISTORY_LIMIT, PLATFORM
from .icons import DEFAULT_VARIANT, describe_variant, select_variant, variant_for
from .models import AppIconVariant, IconChangeLogEntry
from .storage import KeyValueStore

logger = logging.getLogger(__name__)

CURRENT_ICON_KEY = 'currentAppIcon'
ICON_HISTORY_KEY = 'iconHistory'

SUPPORTED_PLATFORMS = frozenset({'ios', 'android', 'web'})


def _utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


class IconStateStore:
    def __init__(
        self,
        store: KeyValueStore,
        clock: Optional[Callable[[], datetime]] = None,
        history_limit: int = HISTORY_LIMIT,
        platform: str = PLATFORM,
    ):
        self._store = store
        self._clock = clock or _utc_now
        self._history_limit = max(1, int(history_limit))
        self._platform = (platform or '').lower()

    @property
    def history_limit(self) -> int:
        return self._history_limit

    async def _persist_variant(self, variant: AppIconVariant) -> bool:
        try:
            await self._store.set(CURRENT_ICON_KEY, variant.value)
        except Exception as exc:
            logger.warning("Storing app icon %s failed: %s", variant.value, exc)
            return False
        logger.debug("App icon set to %s", variant.value)
        return True

    async def set_current_variant(self, color: Any, status_label: Any) -> None:
        """Persist the variant matching ``status_label``/``color`` ('good' if neither matches)."""
        await self._persist_variant(variant_for(color, status_label))

    async def get_current_variant(self) -> Optional[AppIconVariant]:
        try:
            raw = await self._store.get(CURRENT_ICON_KEY)
        except Exception as exc:
            logger.warning("Reading app icon failed: %s", exc)
            return None
        if raw is None:
            return None
        variant = AppIconVariant.parse(raw)
        if variant is None:
            logger.warning("Ignoring unrecognised stored app icon %r", raw)
        return variant

    async def initialize(self, budget_percentage: float) -> None:
        """Set the icon straight from a budget percentage, without logging history."""
        try:
            variant = select_variant(float(budget_percentage))
        except (TypeError, ValueError) as exc:
            logger.warning("Cannot initialize app icon from %r: %s", budget_percentage, exc)
            return
        await self._persist_variant(variant)

    async def reset(self) -> None:
        await self._persist_variant(DEFAULT_VARIANT)

    async def _read_history(self) -> List[Dict[str, Any]]:
        try:
            raw = await self._store.get(ICON_HISTORY_KEY)
        except Exception as exc:
            logger.warning("Reading icon history failed: %s", exc)
            return []
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except (TypeError, ValueError) as exc:
            logger.warning("Discarding corrupted icon history: %s", exc)
            return []
        if not isinstance(data, list):
            logger.warning("Discarding icon history of type %s", type(data).__name__)
            return []
        return [item for item in data if isinstance(item, dict)]

    async def append_history(
        self,
        from_variant: Optional[AppIconVariant],
        to_variant: AppIconVariant,
        budget_percentage: float,
        reason: str = 'nightly_update',
    ) -> None:
        """Append one change entry, keeping only the most recent entries."""
        try:
            budget_percentage = float(budget_percentage)
        except (TypeError, ValueError) as exc:
            logger.warning("Cannot log icon change at %r: %s", budget_percentage, exc)
            return
        history = await self._read_history()
        entry = IconChangeLogEntry(
            timestamp=self._clock().isoformat(),
            from_variant=from_variant,
            to_variant=to_variant,
            budget_percentage=budget_percentage,
            reason=reason,
        )
        history.append(entry.to_dict())
        history = history[-self._history_limit:]
        try:
            await self._store.set(ICON_HISTORY_KEY, json.dumps(history))
        except Exception as exc:
            logger.warning("Writing icon history failed: %s", exc)

    async def get_history(self) -> List[IconChangeLogEntry]:
        entries = []
        for item in await self._read_history():
            try:
                entries.append(IconChangeLogEntry.from_dict(item))
            except (TypeError, ValueError) as exc:
                logger.debug("Skipping malformed icon history entry %r: %s", item, exc)
        return entries

    async def clear_history(self) -> None:
        try:
            await self._store.remove(ICON_HISTORY_KEY)
        except Exception as exc:
            logger.warning("Clearing icon history failed: %s", exc)

    async def update_for_percentage(
        self,
        budget_percentage: float,
        reason: str = 'Budget status change',
    ) -> bool:
        """Move the icon to the variant for ``budget_percentage``.

        Returns True when the icon already matched or the new variant was
        stored, False when storing failed.
        """
        try:
            budget_percentage = float(budget_percentage)
        except (TypeError, ValueError) as exc:
            logger.warning("Cannot update app icon from %r: %s", budget_percentage, exc)
            return False
        target = select_variant(budget_percentage)
        current = await self.get_current_variant()
        if current == target:
            logger.debug("App icon already set to %s", target.value)
            return True

        await self.append_history(current, target, budget_percentage, reason)
        stored = await self._persist_variant(target)
        if stored:
            logger.info(
                "App icon changed %s -> %s at %.1f%% (%s)",
                current.value if current else None,
                target.value,
                budget_percentage,
                reason,
            )
        return stored

    async def describe_current(self) -> str:
        return describe_variant(await self.get_current_variant())

    def is_supported(self) -> bool:
        return self._platform in SUPPORTED_PLATFORMS

    async def history_stats(self) -> Dict[str, Any]:
        """Summarise the persisted history by target variant."""
        history = await self.get_history()
        stats: Dict[str, Any] = {
            'total_changes': len(history),
            'distribution': {},
            'most_common': None,
            'least_common': None,
        }
        if not history:
            return stats

        targets = pd.Series(
            [getattr(entry.to_variant, 'value', entry.to_variant) for entry in history],
            dtype=object,
        )
        counts = targets.value_counts()
        stats['distribution'] = {str(k): int(v) for k, v in counts.items()}
        stats['most_common'] = str(counts.idxmax())
        stats['least_common'] = str(counts.idxmin())
        return stats
