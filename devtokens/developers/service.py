"""Token registry service backed by a key-value store."""
from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable
from typing import TypeVar

from ..exceptions import BackendError, InvalidRequestError, NotFoundError, TokenMismatchError
from ..infrastructure.backends.base import KeyValueBackend
from .constants import (
    ARTIFACT_THRESHOLD,
    DELETED_TOKEN,
    MISSING_USERNAME_MESSAGE,
    RESTRICTED_TOKEN,
    TOKEN_LENGTH,
    TOKEN_MISMATCH_MESSAGE,
    USER_NOT_FOUND_MESSAGE,
)
from .models import TokenRecord, TokenStatus, generate_token

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


class TokenRegistry:
    """Map usernames to developer tokens.

    Every public operation performs a single backend round trip, except
    :meth:`get_all` which enumerates keys and then reads them concurrently.
    Backend failures are never retried.
    """

    def __init__(
        self,
        backend: KeyValueBackend,
        *,
        operation_timeout: float | None = None,
        token_length: int = TOKEN_LENGTH,
        artifact_threshold: int = ARTIFACT_THRESHOLD,
    ) -> None:
        self.backend = backend
        self.operation_timeout = operation_timeout
        self.token_length = token_length
        self.artifact_threshold = artifact_threshold

    async def _call(self, operation: Awaitable[T]) -> T:
        try:
            return await asyncio.wait_for(operation, timeout=self.operation_timeout)
        except asyncio.TimeoutError as exc:
            raise BackendError(
                f"Backend operation timed out after {self.operation_timeout} seconds", cause=exc
            ) from exc
        except BackendError as exc:
            LOGGER.warning("Backend operation failed | backend=%s error=%s", self.backend.name, exc.message)
            raise

    def _record(self, username: str, token: str) -> TokenRecord:
        return TokenRecord(username=username, token=token, artifact_threshold=self.artifact_threshold)

    @staticmethod
    def _require_username(username: str | None) -> str:
        if not username:
            raise InvalidRequestError(MISSING_USERNAME_MESSAGE)
        return username

    async def get_one(self, username: str | None, token: str = "") -> TokenRecord:
        """Return the stored token, verifying ``token`` against it when given."""

        username = self._require_username(username)
        stored = await self._call(self.backend.get(username))
        if stored is None:
            LOGGER.info("Token lookup missed | username=%s", username)
            raise NotFoundError(USER_NOT_FOUND_MESSAGE)
        if token and token != stored:
            LOGGER.info("Token verification failed | username=%s", username)
            raise TokenMismatchError(TOKEN_MISMATCH_MESSAGE)
        return self._record(username, stored)

    async def _read_entry(self, key: str) -> TokenRecord | None:
        value = await self._call(self.backend.get(key))
        if value is None:
            return None
        return self._record(key, value)

    async def get_all(self, *, include_artifacts: bool = True) -> list[TokenRecord]:
        """Return every stored record.

        Reads are issued concurrently and the first failure fails the whole
        call. Keys removed between enumeration and their read are skipped.
        """

        keys = await self._call(self.backend.keys())
        entries = await asyncio.gather(*(self._read_entry(key) for key in keys))
        records = [entry for entry in entries if entry is not None]
        if not include_artifacts:
            records = [
                record
                for record in records
                if record.status is not TokenStatus.artifact
            ]
        LOGGER.info("Token registry enumerated | keys=%d returned=%d", len(keys), len(records))
        return records

    async def create(self, username: str | None, token: str) -> TokenRecord:
        """Store ``token`` for ``username``, replacing any previous value."""

        username = self._require_username(username)
        await self._call(self.backend.set(username, token))
        LOGGER.info("Token stored | username=%s", username)
        return self._record(username, token)

    async def delete(self, username: str | None) -> TokenRecord:
        """Remove the token for ``username``; absent usernames succeed silently."""

        username = self._require_username(username)
        removed = await self._call(self.backend.delete(username))
        LOGGER.info("Token deleted | username=%s removed=%d", username, removed)
        return self._record(username, DELETED_TOKEN)

    async def issue(self, username: str | None, length: int | None = None) -> TokenRecord:
        """Mint a fresh random token for ``username`` and store it."""

        return await self.create(username, generate_token(length or self.token_length))

    async def restrict(self, username: str | None) -> TokenRecord:
        return await self.create(username, RESTRICTED_TOKEN)


__all__ = ["TokenRegistry"]
