"""Mood configuration files and loaders.

Threshold tables, status colors, icon variants and theme constants are
stored in JSON so they can be tuned without code changes. The classifier
and the icon selector each read their own threshold table.
"""

from .defaults import (
    get_config_value,
    get_mood_config,
    load_config,
    validate_thresholds,
)

__all__ = ['load_config', 'get_mood_config', 'get_config_value', 'validate_thresholds']
