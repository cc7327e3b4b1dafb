"""SQLAlchemy backed key-value store."""
from __future__ import annotations

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from ...exceptions import BackendError
from ..database import AsyncSessionFactory, DeveloperToken
from .base import KeyValueBackend

_UPSERT_INSERTS = {
    "postgresql": postgresql.insert,
    "sqlite": sqlite.insert,
}


def _upsert_statement(dialect_name: str, key: str, value: str):
    """Build a single-statement insert that overwrites an existing username."""

    insert = _UPSERT_INSERTS.get(dialect_name)
    if insert is None:
        raise BackendError(f"Unsupported database dialect '{dialect_name}' for token upserts")
    stmt = insert(DeveloperToken).values(username=key, token=value)
    return stmt.on_conflict_do_update(
        index_elements=[DeveloperToken.username],
        set_={"token": stmt.excluded.token},
    )


class SQLBackend(KeyValueBackend):
    """Persist entries in the ``developer_tokens`` table.

    Each call runs in its own session so the backend can be shared across
    concurrent requests. Writes are atomic upserts, so concurrent writers for
    the same username never collide on the primary key.
    """

    name = "postgres"

    def __init__(self, session_factory: AsyncSessionFactory, *, engine: AsyncEngine | None = None) -> None:
        self._session_factory = session_factory
        self._engine = engine

    async def get(self, key: str) -> str | None:
        try:
            async with self._session_factory() as session:  # type: ignore[call-arg]
                entry = await session.get(DeveloperToken, key)
                return entry.token if entry is not None else None
        except SQLAlchemyError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def set(self, key: str, value: str) -> None:
        try:
            async with self._session_factory() as session:  # type: ignore[call-arg]
                dialect_name = session.get_bind().dialect.name
                await session.execute(_upsert_statement(dialect_name, key, value))
                await session.commit()
        except SQLAlchemyError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def delete(self, key: str) -> int:
        try:
            async with self._session_factory() as session:  # type: ignore[call-arg]
                result = await session.execute(delete(DeveloperToken).where(DeveloperToken.username == key))
                await session.commit()
                return result.rowcount or 0
        except SQLAlchemyError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def keys(self) -> list[str]:
        try:
            async with self._session_factory() as session:  # type: ignore[call-arg]
                result = await session.execute(select(DeveloperToken.username))
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            raise BackendError(str(exc), cause=exc) from exc

    async def close(self) -> None:
        if self._engine is not None:
            await self._engine.dispose()


__all__ = ["SQLBackend"]
