"""Common dependency helpers."""
from __future__ import annotations

from functools import lru_cache

from fastapi import Request

from .config import Settings, load_settings
from .exceptions import BackendUnavailableError
from .infrastructure.backends.base import KeyValueBackend

BACKEND_UNAVAILABLE_MESSAGE = "Token backend is not configured."


@lru_cache()
def get_settings() -> Settings:
    """Return cached settings instance."""

    return load_settings()


def get_backend(request: Request) -> KeyValueBackend:
    """Return the process-wide backend created by the application factory."""

    backend = getattr(request.app.state, "backend", None)
    if backend is None:
        raise BackendUnavailableError(BACKEND_UNAVAILABLE_MESSAGE)
    return backend
