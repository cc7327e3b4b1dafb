"""In-memory key-value backend for development and tests."""
from __future__ import annotations

from asyncio import Lock
from typing import Dict

from .base import KeyValueBackend


class MemoryBackend(KeyValueBackend):
    """Store entries in a process-local dictionary."""

    name = "memory"

    def __init__(self, initial: Dict[str, str] | None = None) -> None:
        self._entries: Dict[str, str] = dict(initial or {})
        self._lock = Lock()

    async def get(self, key: str) -> str | None:
        async with self._lock:
            return self._entries.get(key)

    async def set(self, key: str, value: str) -> None:
        async with self._lock:
            self._entries[key] = value

    async def delete(self, key: str) -> int:
        async with self._lock:
            return 1 if self._entries.pop(key, None) is not None else 0

    async def keys(self) -> list[str]:
        async with self._lock:
            return list(self._entries)


__all__ = ["MemoryBackend"]
