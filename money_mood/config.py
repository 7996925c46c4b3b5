"""Runtime configuration for the money mood package.

This module centralizes paths and tunables, with environment variable
overrides. Threshold and color tables live in :mod:`money_mood.settings`.
"""

from __future__ import annotations

import os
from pathlib import Path

# Base project root - assumes this file is in money_mood/
_PROJECT_ROOT = Path(__file__).parent.parent.resolve()

# Data directory
DATA_DIR = Path(os.getenv("MONEY_MOOD_DATA_DIR", _PROJECT_ROOT / "data"))

# JSON file backing the icon state key-value store
STORE_PATH = Path(
    os.getenv("MONEY_MOOD_STORE_PATH", DATA_DIR / "icon_state.json")
).resolve()

# Visual transition window for theme changes, in milliseconds
TRANSITION_MS = int(os.getenv("MONEY_MOOD_TRANSITION_MS", "300"))

# Maximum number of persisted icon change entries
HISTORY_LIMIT = int(os.getenv("MONEY_MOOD_HISTORY_LIMIT", "30"))

# Platform the icon is rendered on: ios, android or web
PLATFORM = os.getenv("MONEY_MOOD_PLATFORM", "web").lower()

LOG_LEVEL = os.getenv("MONEY_MOOD_LOG_LEVEL", "INFO")



def ensure_data_directories() -> None:
    """Create the data directory and the store file's parent if missing."""
    for directory in [DATA_DIR, STORE_PATH.parent]:
        directory.mkdir(parents=True, exist_ok=True)
