"""Domain objects for developer tokens."""
from __future__ import annotations

import secrets
import string
from dataclasses import dataclass, field
from enum import Enum

from .constants import ARTIFACT_THRESHOLD, PENDING_TOKEN, RESTRICTED_TOKEN, TOKEN_LENGTH

_TOKEN_ALPHABET = string.ascii_letters + string.digits


class TokenStatus(str, Enum):
    """How consumers should treat a stored token value."""

    active = "active"
    restricted = "restricted"
    pending = "pending"
    artifact = "artifact"


def classify_token(token: str, *, artifact_threshold: int = ARTIFACT_THRESHOLD) -> TokenStatus:
    if token == RESTRICTED_TOKEN:
        return TokenStatus.restricted
    if token == PENDING_TOKEN:
        return TokenStatus.pending
    if len(token) > artifact_threshold:
        return TokenStatus.artifact
    return TokenStatus.active


def generate_token(length: int = TOKEN_LENGTH) -> str:
    """Return a random alphanumeric token of ``length`` characters."""

    if length <= 0:
        raise ValueError("Token length must be positive")
    return "".join(secrets.choice(_TOKEN_ALPHABET) for _ in range(length))


@dataclass(frozen=True, slots=True)
class TokenRecord:
    """A username with the token currently stored for it."""

    username: str
    token: str
    artifact_threshold: int = field(default=ARTIFACT_THRESHOLD, compare=False, repr=False)

    @property
    def status(self) -> TokenStatus:
        return classify_token(self.token, artifact_threshold=self.artifact_threshold)


__all__ = ["TokenRecord", "TokenStatus", "classify_token", "generate_token"]
