"""Developer token API routes."""
from __future__ import annotations

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from ..exceptions import RegistryError
from .dependencies import get_token_registry
from .schemas import DeveloperCreate, DeveloperListResponse, DeveloperResponse, ErrorResponse
from .service import TokenRegistry

_ERROR_RESPONSES = {
    404: {"model": ErrorResponse, "description": "The token backend failed"},
    500: {"model": ErrorResponse, "description": "Unknown username, token mismatch or missing argument"},
    503: {"model": ErrorResponse, "description": "The token backend has not been created"},
}

router = APIRouter(responses=_ERROR_RESPONSES)


def _error_response(exc: RegistryError) -> JSONResponse:
    return JSONResponse(status_code=exc.status_code, content={"error": exc.message})


@router.get("", response_model=DeveloperResponse | DeveloperListResponse)
async def read_developers(
    query_all: str | None = Query(default=None, alias="queryAll"),
    hide_artifacts: bool = Query(default=False, alias="hideArtifacts"),
    username: str | None = Query(default=None),
    token: str = Query(default=""),
    registry: TokenRegistry = Depends(get_token_registry),
) -> DeveloperResponse | DeveloperListResponse | JSONResponse:
    """Enumerate every token, or look up (and optionally verify) a single one."""

    try:
        if query_all:
            records = await registry.get_all(include_artifacts=not hide_artifacts)
            return DeveloperListResponse(ret=[DeveloperResponse.from_record(record) for record in records])
        record = await registry.get_one(username, token)
    except RegistryError as exc:
        return _error_response(exc)
    return DeveloperResponse.from_record(record)


@router.post("", response_model=DeveloperResponse)
async def create_developer(
    payload: DeveloperCreate,
    registry: TokenRegistry = Depends(get_token_registry),
) -> DeveloperResponse | JSONResponse:
    try:
        record = await registry.create(payload.developer.username, payload.developer.token)
    except RegistryError as exc:
        return _error_response(exc)
    return DeveloperResponse.from_record(record)


@router.delete("", response_model=DeveloperResponse)
async def delete_without_username(
    registry: TokenRegistry = Depends(get_token_registry),
) -> DeveloperResponse | JSONResponse:
    try:
        record = await registry.delete(None)
    except RegistryError as exc:
        return _error_response(exc)
    return DeveloperResponse.from_record(record)


@router.delete("/{username}", response_model=DeveloperResponse)
async def delete_developer(
    username: str,
    registry: TokenRegistry = Depends(get_token_registry),
) -> DeveloperResponse | JSONResponse:
    try:
        record = await registry.delete(username)
    except RegistryError as exc:
        return _error_response(exc)
    return DeveloperResponse.from_record(record)


@router.post("/{username}/issue", response_model=DeveloperResponse)
async def issue_token(
    username: str,
    length: int | None = Query(default=None, ge=1, le=256),
    registry: TokenRegistry = Depends(get_token_registry),
) -> DeveloperResponse | JSONResponse:
    """Mint a random token for the user, replacing the current one."""

    try:
        record = await registry.issue(username, length)
    except RegistryError as exc:
        return _error_response(exc)
    return DeveloperResponse.from_record(record)


@router.post("/{username}/restrict", response_model=DeveloperResponse)
async def restrict_developer(
    username: str,
    registry: TokenRegistry = Depends(get_token_registry),
) -> DeveloperResponse | JSONResponse:
    """Replace the user's token with the restricted-access marker."""

    try:
        record = await registry.restrict(username)
    except RegistryError as exc:
        return _error_response(exc)
    return DeveloperResponse.from_record(record)


__all__ = ["router"]
