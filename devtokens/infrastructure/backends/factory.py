"""Backend selection based on configuration."""
from __future__ import annotations

import logging

from ...config import Settings
from ..database import configure_engine, get_engine
from .base import KeyValueBackend
from .memory import MemoryBackend
from .redis_backend import RedisBackend
from .sql_backend import SQLBackend

LOGGER = logging.getLogger(__name__)


def create_backend(settings: Settings) -> KeyValueBackend:
    """Instantiate the key-value backend named in ``settings.registry.backend``."""

    kind = settings.registry.backend
    if kind == "redis":
        backend: KeyValueBackend = RedisBackend.from_settings(settings)
    elif kind == "postgres":
        session_factory = configure_engine(settings)
        backend = SQLBackend(session_factory, engine=get_engine())
    elif kind == "memory":
        backend = MemoryBackend()
    else:  # pragma: no cover - guarded by the settings Literal
        raise ValueError(f"Unsupported registry backend '{kind}'")
    LOGGER.info("Token registry backend selected | backend=%s", backend.name)
    return backend


__all__ = ["create_backend"]
