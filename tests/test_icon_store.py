"""Tests for the persisted icon state.

Failure paths use small stores whose methods raise, mirroring a storage
backend that is unavailable.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import pytest

from money_mood.icon_store import CURRENT_ICON_KEY, ICON_HISTORY_KEY, IconStateStore
from money_mood.icons import APP_ICON_CONFIGS, UNKNOWN_ICON_DESCRIPTION
from money_mood.models import AppIconVariant
from money_mood.storage import MemoryStore

FIXED_NOW = datetime(2026, 10, 1, 21, 30, tzinfo=timezone.utc)


class RecordingStore(MemoryStore):
    def __init__(self, initial=None):
        super().__init__(initial)
        self.set_calls = []

    async def set(self, key, value):
        self.set_calls.append((key, value))
        await super().set(key, value)


class BrokenStore:
    def __init__(self, fail_get=True, fail_set=True):
        self.fail_get = fail_get
        self.fail_set = fail_set
        self.data = {}

    async def get(self, key):
        if self.fail_get:
            raise OSError('storage unavailable')
        return self.data.get(key)

    async def set(self, key, value):
        if self.fail_set:
            raise OSError('storage unavailable')
        self.data[key] = value

    async def remove(self, key):
        raise OSError('storage unavailable')


def _icon_store(store) -> IconStateStore:
    return IconStateStore(store, clock=lambda: FIXED_NOW, platform='web')


@pytest.mark.asyncio
async def test_set_current_variant_stores_matching_variant():
    store = RecordingStore()
    await _icon_store(store).set_current_variant('#00D4AA', 'excellent')
    assert store.set_calls == [(CURRENT_ICON_KEY, 'excellent')]


@pytest.mark.asyncio
async def test_set_current_variant_unknown_input_stores_good():
    store = RecordingStore()
    await _icon_store(store).set_current_variant('#UNKNOWN', 'unknown')
    assert store.set_calls == [(CURRENT_ICON_KEY, 'good')]


@pytest.mark.asyncio
async def test_set_current_variant_swallows_write_errors(caplog):
    icon_store = _icon_store(BrokenStore())
    await icon_store.set_current_variant('#00D4AA', 'excellent')
    assert 'Storing app icon excellent failed' in caplog.text


@pytest.mark.asyncio
async def test_get_current_variant_round_trip():
    store = MemoryStore({CURRENT_ICON_KEY: 'warning'})
    assert await _icon_store(store).get_current_variant() == AppIconVariant.WARNING


@pytest.mark.asyncio
async def test_get_current_variant_unset_is_none():
    assert await _icon_store(MemoryStore()).get_current_variant() is None


@pytest.mark.asyncio
async def test_get_current_variant_read_failure_is_none():
    assert await _icon_store(BrokenStore()).get_current_variant() is None


@pytest.mark.asyncio
async def test_get_current_variant_garbage_is_none():
    store = MemoryStore({CURRENT_ICON_KEY: 'sparkly'})
    assert await _icon_store(store).get_current_variant() is None


@pytest.mark.asyncio
async def test_initialize_selects_from_percentage():
    store = RecordingStore()
    await _icon_store(store).initialize(80)
    assert store.set_calls == [(CURRENT_ICON_KEY, 'warning')]


@pytest.mark.asyncio
async def test_initialize_swallows_errors():
    await _icon_store(BrokenStore()).initialize(50)
    await _icon_store(MemoryStore()).initialize('not a number')


@pytest.mark.asyncio
async def test_append_history_ignores_non_numeric_percentage():
    store = MemoryStore()
    await _icon_store(store).append_history(AppIconVariant.GOOD, AppIconVariant.WARNING, 'n/a')
    await _icon_store(store).append_history(AppIconVariant.GOOD, AppIconVariant.WARNING, None)
    assert ICON_HISTORY_KEY not in store.snapshot()


@pytest.mark.asyncio
async def test_reset_forces_good():
    store = MemoryStore({CURRENT_ICON_KEY: 'over_budget'})
    icon_store = _icon_store(store)
    await icon_store.reset()
    assert await icon_store.get_current_variant() == AppIconVariant.GOOD


@pytest.mark.asyncio
async def test_append_history_without_prior_key():
    store = MemoryStore()
    await _icon_store(store).append_history(AppIconVariant.GOOD, AppIconVariant.WARNING, 80)

    history = json.loads(store.snapshot()[ICON_HISTORY_KEY])
    assert history == [{
        'timestamp': FIXED_NOW.isoformat(),
        'fromVariant': 'good',
        'toVariant': 'warning',
        'budgetPercentage': 80.0,
        'reason': 'nightly_update',
    }]


@pytest.mark.asyncio
async def test_append_history_caps_at_thirty_most_recent():
    existing = [
        {
            'timestamp': FIXED_NOW.isoformat(),
            'fromVariant': 'good',
            'toVariant': 'warning',
            'budgetPercentage': float(i),
            'reason': 'test',
        }
        for i in range(35)
    ]
    store = MemoryStore({ICON_HISTORY_KEY: json.dumps(existing)})
    await _icon_store(store).append_history(AppIconVariant.WARNING, AppIconVariant.DANGER, 100)

    history = json.loads(store.snapshot()[ICON_HISTORY_KEY])
    assert len(history) == 30
    assert history[0]['budgetPercentage'] == 6.0
    assert history[-1]['toVariant'] == 'danger'
    assert history[-1]['reason'] == 'nightly_update'


@pytest.mark.asyncio
@pytest.mark.parametrize('stored', ['{not json', '{"a": 1}', '42'])
async def test_append_history_replaces_unreadable_log(stored):
    store = MemoryStore({ICON_HISTORY_KEY: stored})
    await _icon_store(store).append_history(None, AppIconVariant.GOOD, 55, reason='first run')

    history = json.loads(store.snapshot()[ICON_HISTORY_KEY])
    assert len(history) == 1
    assert history[0]['fromVariant'] is None


@pytest.mark.asyncio
async def test_append_history_with_failing_read_starts_fresh():
    store = BrokenStore(fail_get=True, fail_set=False)
    await _icon_store(store).append_history(AppIconVariant.GOOD, AppIconVariant.DANGER, 104)
    assert len(json.loads(store.data[ICON_HISTORY_KEY])) == 1


@pytest.mark.asyncio
async def test_append_history_swallows_write_errors():
    await _icon_store(BrokenStore()).append_history(AppIconVariant.GOOD, AppIconVariant.DANGER, 104)


@pytest.mark.asyncio
async def test_append_history_serializes_infinite_percentage():
    store = MemoryStore()
    icon_store = _icon_store(store)
    await icon_store.append_history(AppIconVariant.DANGER, AppIconVariant.OVER_BUDGET, float('inf'))

    entries = await icon_store.get_history()
    assert entries[0].budget_percentage == float('inf')
    assert entries[0].to_variant == AppIconVariant.OVER_BUDGET


@pytest.mark.asyncio
async def test_history_limit_is_configurable():
    store = MemoryStore()
    icon_store = IconStateStore(store, clock=lambda: FIXED_NOW, history_limit=3)
    for pct in range(5):
        await icon_store.append_history(None, AppIconVariant.EXCELLENT, pct)
    entries = await icon_store.get_history()
    assert [e.budget_percentage for e in entries] == [2.0, 3.0, 4.0]


@pytest.mark.asyncio
async def test_describe_current():
    store = MemoryStore({CURRENT_ICON_KEY: 'excellent'})
    description = await _icon_store(store).describe_current()
    assert description == APP_ICON_CONFIGS[AppIconVariant.EXCELLENT].description


@pytest.mark.asyncio
async def test_describe_current_unknown():
    assert await _icon_store(MemoryStore()).describe_current() == UNKNOWN_ICON_DESCRIPTION


def test_is_supported_uses_platform():
    assert IconStateStore(MemoryStore(), platform='web').is_supported()
    assert IconStateStore(MemoryStore(), platform='iOS').is_supported()
    assert not IconStateStore(MemoryStore(), platform='tvos').is_supported()


@pytest.mark.asyncio
async def test_update_for_percentage_records_change():
    store = MemoryStore({CURRENT_ICON_KEY: 'good'})
    icon_store = _icon_store(store)

    assert await icon_store.update_for_percentage(104, reason='sync') is True
    assert await icon_store.get_current_variant() == AppIconVariant.DANGER

    history = await icon_store.get_history()
    assert len(history) == 1
    assert history[0].from_variant == AppIconVariant.GOOD
    assert history[0].to_variant == AppIconVariant.DANGER
    assert history[0].reason == 'sync'


@pytest.mark.asyncio
async def test_update_for_percentage_skips_unchanged_variant():
    store = MemoryStore({CURRENT_ICON_KEY: 'warning'})
    icon_store = _icon_store(store)
    assert await icon_store.update_for_percentage(90) is True
    assert await icon_store.get_history() == []


@pytest.mark.asyncio
async def test_update_for_percentage_reports_failed_write():
    assert await _icon_store(BrokenStore()).update_for_percentage(30) is False


@pytest.mark.asyncio
async def test_clear_history():
    store = MemoryStore({ICON_HISTORY_KEY: '[]'})
    icon_store = _icon_store(store)
    await icon_store.clear_history()
    assert ICON_HISTORY_KEY not in store.snapshot()
    await _icon_store(BrokenStore()).clear_history()


@pytest.mark.asyncio
async def test_history_stats():
    store = MemoryStore()
    icon_store = _icon_store(store)
    for target in ['warning', 'danger', 'warning', 'excellent', 'warning', 'danger']:
        await icon_store.append_history(None, AppIconVariant(target), 0)

    stats = await icon_store.history_stats()
    assert stats['total_changes'] == 6
    assert stats['distribution'] == {'warning': 3, 'danger': 2, 'excellent': 1}
    assert stats['most_common'] == 'warning'
    assert stats['least_common'] == 'excellent'


@pytest.mark.asyncio
async def test_history_stats_empty():
    stats = await _icon_store(MemoryStore()).history_stats()
    assert stats == {'total_changes': 0, 'distribution': {}, 'most_common': None, 'least_common': None}
