"""Configuration loader for mood tables."""

from __future__ import annotations

import json
from functools import lru_cache
from pathlib import Path
from typing import Any, Dict, Mapping

# Configuration directory
CONFIG_DIR = Path(__file__).parent

# Order of the five buckets, least to most severe
THRESHOLD_KEYS = ('EXCELLENT', 'GOOD', 'WARNING', 'DANGER', 'OVER_BUDGET')


def load_config(config_name: str) -> Dict[str, Any]:
    """Read ``<config_name>.json`` from the settings directory.

    Raises:
        FileNotFoundError: If there is no such file
        json.JSONDecodeError: If the file is not valid JSON
    """
    config_path = CONFIG_DIR / f"{config_name}.json"

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, 'r', encoding='utf-8') as f:
        return json.load(f)


@lru_cache(maxsize=1)
def get_mood_config() -> Dict[str, Any]:
    """Parsed ``mood.json``, read once per process. Do not mutate the result."""
    return load_config('mood')


def get_config_value(config_name: str, *keys: str, default: Any = None) -> Any:
    """Walk ``keys`` into a config file, returning ``default`` on any miss.

    A missing file, a missing key, or a key path that runs into a
    non-object value all count as a miss.

    Example:
        >>> get_config_value('mood', 'icons', 'unknown_description')
        'App icon status unknown'
    """
    try:
        value: Any = get_mood_config() if config_name == 'mood' else load_config(config_name)
    except FileNotFoundError:
        return default
    for key in keys:
        if not isinstance(value, Mapping) or key not in value:
            return default
        value = value[key]
    return value


def validate_thresholds(table: Mapping[str, float]) -> Dict[str, float]:
    """Check that a threshold table defines five strictly increasing bounds.

    Args:
        table: Mapping of EXCELLENT..OVER_BUDGET to lower bounds (percent of budget)

    Returns:
        A plain dict copy of the table with float values

    Raises:
        ValueError: If a bucket is missing or the bounds are not strictly increasing
    """
    missing = [key for key in THRESHOLD_KEYS if key not in table]
    if missing:
        raise ValueError(f"Threshold table missing buckets: {', '.join(missing)}")

    bounds = [float(table[key]) for key in THRESHOLD_KEYS]
    for lower, upper in zip(bounds, bounds[1:]):
        if not lower < upper:
            raise ValueError(f"Thresholds must be strictly increasing, got {bounds}")
    return dict(zip(THRESHOLD_KEYS, bounds))
