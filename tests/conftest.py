from __future__ import annotations

from collections.abc import Iterator
from pathlib import Path
import sys

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import pytest
from fastapi import FastAPI

from devtokens import dependencies
from devtokens.config import Settings
from devtokens.infrastructure.backends.memory import MemoryBackend


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at the in-memory backend and a temporary log directory."""

    settings = Settings()
    settings.registry.backend = "memory"
    settings.registry.operation_timeout = 2.0
    settings.logging.log_dir = tmp_path / "logs"
    return settings


@pytest.fixture
def backend() -> MemoryBackend:
    return MemoryBackend()


@pytest.fixture
def app(monkeypatch: pytest.MonkeyPatch, settings: Settings, backend: MemoryBackend) -> Iterator[FastAPI]:
    """Provide a FastAPI app wired to an in-memory token backend."""

    if hasattr(dependencies.get_settings, "cache_clear"):
        dependencies.get_settings.cache_clear()

    def _get_settings() -> Settings:
        return settings

    monkeypatch.setattr(dependencies, "get_settings", _get_settings)

    from devtokens.main import create_app

    app = create_app(backend=backend)
    try:
        yield app
    finally:
        app.dependency_overrides.clear()
