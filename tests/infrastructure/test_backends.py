"""Key-value backend adapter tests."""
from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from types import SimpleNamespace

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError
from sqlalchemy import create_engine
from sqlalchemy.dialects import postgresql
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from devtokens.config import Settings
from devtokens.developers.models import TokenRecord
from devtokens.developers.service import TokenRegistry
from devtokens.exceptions import BackendError
from devtokens.infrastructure.backends.factory import create_backend
from devtokens.infrastructure.backends.memory import MemoryBackend
from devtokens.infrastructure.backends.redis_backend import RedisBackend
from devtokens.infrastructure.backends.sql_backend import SQLBackend, _upsert_statement
from devtokens.infrastructure.database import Base


class AsyncSessionWrapper:
    """Minimal async-compatible wrapper around a synchronous SQLAlchemy session."""

    def __init__(self, sync_session: Session) -> None:
        self._sync = sync_session

    async def get(self, entity, ident):
        return self._sync.get(entity, ident)

    def get_bind(self):
        return self._sync.get_bind()

    async def execute(self, statement, *args, **kwargs):
        await asyncio.sleep(0)
        return self._sync.execute(statement, *args, **kwargs)

    async def commit(self) -> None:
        self._sync.commit()


class AsyncSessionContext:
    def __init__(self, factory: sessionmaker) -> None:
        self._factory = factory
        self._sync: Session | None = None

    async def __aenter__(self) -> AsyncSessionWrapper:
        self._sync = self._factory()
        return AsyncSessionWrapper(self._sync)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        assert self._sync is not None
        if exc_type is not None:
            self._sync.rollback()
        self._sync.close()


class AsyncSessionFactory:
    def __init__(self, factory: sessionmaker) -> None:
        self._factory = factory

    def __call__(self) -> AsyncSessionContext:
        return AsyncSessionContext(self._factory)


class FailingSessionFactory:
    """Session factory whose sessions fail every statement."""

    def __call__(self) -> "FailingSessionFactory":
        return self

    async def __aenter__(self) -> "FailingSessionFactory":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def _fail(self, *args, **kwargs):
        raise OperationalError("SELECT 1", {}, Exception("database is locked"))

    def get_bind(self):
        return SimpleNamespace(dialect=SimpleNamespace(name="sqlite"))

    get = execute = commit = _fail


class FakeRedis:
    """In-process stand-in for ``redis.asyncio.Redis`` with decoded responses."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.closed = False

    async def get(self, key: str) -> str | None:
        return self.data.get(key)

    async def set(self, key: str, value: str) -> bool:
        self.data[key] = value
        return True

    async def delete(self, *keys: str) -> int:
        return sum(1 for key in keys if self.data.pop(key, None) is not None)

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        for key in list(self.data):
            yield key

    async def aclose(self) -> None:
        self.closed = True


class DownRedis(FakeRedis):
    async def get(self, key: str) -> str | None:
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    async def set(self, key: str, value: str) -> bool:
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    async def delete(self, *keys: str) -> int:
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")

    async def scan_iter(self, match: str | None = None) -> AsyncIterator[str]:
        raise RedisConnectionError("Error 111 connecting to localhost:6379. Connection refused.")
        yield  # pragma: no cover


@pytest.fixture
def sql_backend():
    engine = create_engine(
        "sqlite://",
        future=True,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    factory = AsyncSessionFactory(sessionmaker(bind=engine, expire_on_commit=False))
    try:
        yield SQLBackend(factory)  # type: ignore[arg-type]
    finally:
        engine.dispose()


async def _exercise(backend) -> None:
    assert await backend.get("alice") is None

    await backend.set("alice", "tok1")
    await backend.set("bob", "tok2")
    await backend.set("alice", "tok3")
    assert await backend.get("alice") == "tok3"
    assert sorted(await backend.keys()) == ["alice", "bob"]

    assert await backend.delete("alice") == 1
    assert await backend.delete("alice") == 0
    assert await backend.get("alice") is None
    assert await backend.keys() == ["bob"]


def test_memory_backend_contract() -> None:
    asyncio.run(_exercise(MemoryBackend()))


def test_sql_backend_contract(sql_backend: SQLBackend) -> None:
    asyncio.run(_exercise(sql_backend))


def test_sql_concurrent_creates_of_new_username_both_succeed(sql_backend: SQLBackend) -> None:
    registry = TokenRegistry(sql_backend)

    async def _run() -> None:
        results = await asyncio.gather(
            registry.create("alice", "t1"),
            registry.create("alice", "t2"),
            return_exceptions=True,
        )
        assert results == [
            TokenRecord(username="alice", token="t1"),
            TokenRecord(username="alice", token="t2"),
        ]
        stored = await registry.get_one("alice")
        assert stored.token in {"t1", "t2"}
        assert await sql_backend.keys() == ["alice"]

    asyncio.run(_run())


def test_sql_upsert_uses_on_conflict_update() -> None:
    statement = _upsert_statement("postgresql", "alice", "tok")
    compiled = str(statement.compile(dialect=postgresql.dialect()))
    assert "ON CONFLICT (username) DO UPDATE SET token = excluded.token" in compiled

    with pytest.raises(BackendError):
        _upsert_statement("oracle", "alice", "tok")


def test_redis_backend_contract() -> None:
    client = FakeRedis()
    backend = RedisBackend(client)  # type: ignore[arg-type]

    async def _run() -> None:
        await _exercise(backend)
        await backend.close()

    asyncio.run(_run())
    assert client.closed


def test_redis_errors_become_backend_errors() -> None:
    backend = RedisBackend(DownRedis())  # type: ignore[arg-type]

    async def _run() -> None:
        for operation in (backend.get("a"), backend.set("a", "b"), backend.delete("a"), backend.keys()):
            with pytest.raises(BackendError) as excinfo:
                await operation
            assert "Connection refused" in excinfo.value.message
            assert isinstance(excinfo.value.cause, RedisConnectionError)

    asyncio.run(_run())


def test_sql_errors_become_backend_errors() -> None:
    backend = SQLBackend(FailingSessionFactory())  # type: ignore[arg-type]

    async def _run() -> None:
        for operation in (backend.get("a"), backend.set("a", "b"), backend.delete("a"), backend.keys()):
            with pytest.raises(BackendError) as excinfo:
                await operation
            assert "database is locked" in excinfo.value.message

    asyncio.run(_run())


def test_factory_selects_configured_backend() -> None:
    settings = Settings()
    settings.registry.backend = "memory"
    assert isinstance(create_backend(settings), MemoryBackend)

    settings.registry.backend = "redis"
    settings.redis.password = "secret"
    backend = create_backend(settings)
    assert isinstance(backend, RedisBackend)
    asyncio.run(backend.close())


def test_redis_url_includes_password() -> None:
    settings = Settings()
    assert settings.redis.url == "redis://localhost:6379/0"
    settings.redis.password = "secret"
    settings.redis.db = 2
    assert settings.redis.url == "redis://:secret@localhost:6379/2"
