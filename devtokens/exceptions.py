"""Shared exception hierarchy for the token registry."""
from __future__ import annotations

from typing import Optional

from fastapi import status


class RegistryError(Exception):
    """Base exception for registry failures surfaced to callers."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class BackendError(RegistryError):
    """Raised when the key-value backend is unreachable or rejects an operation."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, message: str, *, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.cause = cause


class NotFoundError(RegistryError):
    """Raised when no token is stored for the requested username."""


class TokenMismatchError(RegistryError):
    """Raised when the supplied token differs from the stored one."""


class InvalidRequestError(RegistryError):
    """Raised when a caller omits a required argument."""


class BackendUnavailableError(RegistryError):
    """Raised when a request arrives before the backend has been created."""

    status_code = status.HTTP_503_SERVICE_UNAVAILABLE


__all__ = [
    "RegistryError",
    "BackendError",
    "NotFoundError",
    "TokenMismatchError",
    "InvalidRequestError",
    "BackendUnavailableError",
]
