"""Dependencies for the developers module."""
from __future__ import annotations

from fastapi import Depends

from .. import dependencies
from ..config import Settings
from ..infrastructure.backends.base import KeyValueBackend
from .service import TokenRegistry


def _current_settings() -> Settings:
    return dependencies.get_settings()


async def get_token_registry(
    backend: KeyValueBackend = Depends(dependencies.get_backend),
    settings: Settings = Depends(_current_settings),
) -> TokenRegistry:
    return TokenRegistry(
        backend,
        operation_timeout=settings.registry.operation_timeout,
        token_length=settings.registry.token_length,
        artifact_threshold=settings.registry.artifact_threshold,
    )


__all__ = ["get_token_registry"]
