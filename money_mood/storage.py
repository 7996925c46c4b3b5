"""Async key-value stores backing the icon state.

Any object with ``get``/``set``/``remove`` coroutines satisfies
:class:`KeyValueStore`. Two implementations ship here: an in-memory dict
for tests and short-lived processes, and a single JSON file on disk for
persistent user-facing state.
"""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Dict, Optional, Protocol

from .config import STORE_PATH


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...

    async def remove(self, key: str) -> None:
        ...


class MemoryStore:
    """Dict-backed store; values live as long as the instance."""

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._data: Dict[str, str] = dict(initial or {})

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value

    async def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def snapshot(self) -> Dict[str, str]:
        return dict(self._data)


class JsonFileStore:
    """Store every key as a string entry in one JSON object file.

    A missing or corrupted file reads as empty. Writes rewrite the whole
    file and create the parent directory on demand. File I/O runs in a
    worker thread so the event loop is never blocked.
    """

    def __init__(self, path: Path | None = None):
        self.path = Path(path or STORE_PATH)

    def _load(self) -> Dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            with self.path.open('r', encoding='utf-8') as handle:
                data = json.load(handle)
        except (ValueError, OSError):
            # undecodable bytes and invalid JSON both surface as ValueError
            return {}
        if not isinstance(data, dict):
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def _save(self, data: Dict[str, str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open('w', encoding='utf-8') as handle:
            json.dump(data, handle, indent=2, sort_keys=True)

    def _set(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value
        self._save(data)

    def _remove(self, key: str) -> None:
        data = self._load()
        if data.pop(key, None) is not None:
            self._save(data)

    async def get(self, key: str) -> Optional[str]:
        data = await asyncio.to_thread(self._load)
        return data.get(key)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._set, key, value)

    async def remove(self, key: str) -> None:
        await asyncio.to_thread(self._remove, key)
