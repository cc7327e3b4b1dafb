"""Pydantic schemas for developer token endpoints."""
from __future__ import annotations

from pydantic import BaseModel, Field

from .models import TokenRecord


class DeveloperPayload(BaseModel):
    username: str = Field(..., min_length=1)
    token: str


class DeveloperCreate(BaseModel):
    developer: DeveloperPayload


class DeveloperResponse(BaseModel):
    username: str
    token: str

    @classmethod
    def from_record(cls, record: TokenRecord) -> "DeveloperResponse":
        return cls(username=record.username, token=record.token)


class DeveloperListResponse(BaseModel):
    ret: list[DeveloperResponse] = Field(default_factory=list)


class ErrorResponse(BaseModel):
    error: str


__all__ = [
    "DeveloperPayload",
    "DeveloperCreate",
    "DeveloperResponse",
    "DeveloperListResponse",
    "ErrorResponse",
]
