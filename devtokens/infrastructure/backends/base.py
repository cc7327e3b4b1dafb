"""Abstract interface for key-value backends."""
from __future__ import annotations

from abc import ABC, abstractmethod


class KeyValueBackend(ABC):
    """Minimal string key-value store used by the token registry.

    Implementations raise :class:`~devtokens.exceptions.BackendError` for any
    failure of the underlying store.
    """

    name: str = "abstract"

    @abstractmethod
    async def get(self, key: str) -> str | None:
        """Return the value stored for ``key`` or ``None`` when absent."""

    @abstractmethod
    async def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""

    @abstractmethod
    async def delete(self, key: str) -> int:
        """Remove ``key`` and return the number of entries removed."""

    @abstractmethod
    async def keys(self) -> list[str]:
        """Return every key currently stored."""

    async def close(self) -> None:
        """Release connections held by the backend."""


__all__ = ["KeyValueBackend"]
