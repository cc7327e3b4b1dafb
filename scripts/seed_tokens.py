#!/usr/bin/env python
"""Load developer tokens from a JSON file into the configured backend."""
from __future__ import annotations

import argparse
import asyncio
import json
from pathlib import Path
from typing import Dict
import sys

ROOT_DIR = Path(__file__).resolve().parents[1]
if str(ROOT_DIR) not in sys.path:
    sys.path.append(str(ROOT_DIR))

from devtokens.config import Settings, load_settings
from devtokens.developers.service import TokenRegistry
from devtokens.infrastructure.backends.base import KeyValueBackend
from devtokens.infrastructure.backends.factory import create_backend
from devtokens.infrastructure.database import Base, configure_engine, get_engine


def read_tokens(path: Path) -> Dict[str, str]:
    """Return the ``{username: token}`` mapping stored in ``path``."""

    data = json.loads(path.read_text(encoding="utf-8"))
    if not isinstance(data, dict) or not all(
        isinstance(key, str) and isinstance(value, str) for key, value in data.items()
    ):
        raise ValueError(f"{path} must contain a JSON object mapping usernames to tokens")
    return data


async def create_schema(settings: Settings) -> None:
    """Create the developer_tokens table when it does not exist yet."""

    configure_engine(settings)
    engine = get_engine()
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.create_all)


async def seed(
    settings: Settings,
    tokens: Dict[str, str],
    *,
    with_schema: bool = False,
    backend: KeyValueBackend | None = None,
) -> int:
    """Store every pair in ``tokens``. A backend passed in is left open."""

    if with_schema:
        await create_schema(settings)
    owns_backend = backend is None
    if backend is None:
        backend = create_backend(settings)
    registry = TokenRegistry(backend, operation_timeout=settings.registry.operation_timeout)
    try:
        for username, token in tokens.items():
            await registry.create(username, token)
    finally:
        if owns_backend:
            await backend.close()
    return len(tokens)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("source", type=Path, help="JSON file with a username to token mapping")
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="create the developer_tokens table first (postgres backend only)",
    )
    args = parser.parse_args(argv)

    settings = load_settings()
    tokens = read_tokens(args.source)
    if args.create_schema and settings.registry.backend != "postgres":
        parser.error("--create-schema requires REGISTRY__BACKEND=postgres")
    count = asyncio.run(seed(settings, tokens, with_schema=args.create_schema))
    print(f"Seeded {count} developer tokens into the {settings.registry.backend} backend.")


if __name__ == "__main__":
    main()
