"""Seeding script tests."""
from __future__ import annotations

import asyncio
import json
from pathlib import Path

import pytest

from devtokens.config import Settings
from devtokens.exceptions import InvalidRequestError
from devtokens.infrastructure.backends.memory import MemoryBackend
from scripts.seed_tokens import read_tokens, seed


def test_seed_stores_every_token_in_backend(settings: Settings) -> None:
    backend = MemoryBackend({"alice": "old"})
    tokens = {"alice": "tok1", "bob": "tok2"}

    async def _run() -> None:
        count = await seed(settings, tokens, backend=backend)
        assert count == 2
        assert sorted(await backend.keys()) == ["alice", "bob"]
        assert await backend.get("alice") == "tok1"
        assert await backend.get("bob") == "tok2"

    asyncio.run(_run())


def test_seed_rejects_empty_username(settings: Settings) -> None:
    backend = MemoryBackend()

    async def _run() -> None:
        with pytest.raises(InvalidRequestError):
            await seed(settings, {"": "tok"}, backend=backend)
        assert await backend.keys() == []

    asyncio.run(_run())


def test_read_tokens_loads_mapping(tmp_path: Path) -> None:
    source = tmp_path / "tokens.json"
    source.write_text(json.dumps({"alice": "tok1"}), encoding="utf-8")

    assert read_tokens(source) == {"alice": "tok1"}


@pytest.mark.parametrize(
    "content",
    ["[1, 2]", '{"alice": 3}', "{not json"],
)
def test_read_tokens_rejects_malformed_files(tmp_path: Path, content: str) -> None:
    source = tmp_path / "tokens.json"
    source.write_text(content, encoding="utf-8")

    with pytest.raises(ValueError):
        read_tokens(source)
