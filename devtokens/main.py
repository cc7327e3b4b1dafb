"""FastAPI application factory."""
from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from . import dependencies
from .developers.router import router as developers_router
from .exceptions import RegistryError
from .infrastructure.backends.base import KeyValueBackend
from .infrastructure.backends.factory import create_backend
from .logging import setup_logging

LOGGER = logging.getLogger(__name__)


async def _registry_error_handler(request: Request, exc: RegistryError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


def create_app(backend: KeyValueBackend | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    ``backend`` overrides the configured key-value store, mainly for tests.
    The application owns whichever backend it ends up with and closes it on
    shutdown.
    """

    settings = dependencies.get_settings()
    setup_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        app.state.backend = backend if backend is not None else create_backend(settings)
        LOGGER.info("Token registry started | backend=%s", app.state.backend.name)
        try:
            yield
        finally:
            await app.state.backend.close()
            app.state.backend = None
            LOGGER.info("Token registry stopped")

    app = FastAPI(
        title=settings.fastapi.title,
        description=settings.fastapi.description,
        version=settings.fastapi.version,
        docs_url=settings.fastapi.docs_url,
        redoc_url=settings.fastapi.redoc_url,
        openapi_url=settings.fastapi.openapi_url,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.fastapi.cors_allow_origins,
        allow_credentials=settings.fastapi.cors_allow_credentials,
        allow_methods=settings.fastapi.cors_allow_methods,
        allow_headers=settings.fastapi.cors_allow_headers,
    )
    app.add_middleware(GZipMiddleware, minimum_size=settings.fastapi.gzip_minimum_size)
    app.add_exception_handler(RegistryError, _registry_error_handler)

    app.include_router(developers_router, prefix="/developers", tags=["developers"])

    return app


def run() -> None:
    """Serve the application with uvicorn."""

    uvicorn.run("devtokens.main:create_app", factory=True, host="0.0.0.0", port=8000)


__all__ = ["create_app", "run"]
