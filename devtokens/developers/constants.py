"""Constants used across the developers package."""

TOKEN_LENGTH = 30
ARTIFACT_THRESHOLD = 30
RESTRICTED_TOKEN = "~"
PENDING_TOKEN = "!"
DELETED_TOKEN = "TokenWasDeleted"

USER_NOT_FOUND_MESSAGE = (
    "The username provided does not match any username. Please make sure that you are signed up "
    "as an authorized developer before requesting a token."
)
TOKEN_MISMATCH_MESSAGE = "The token submitted does not match the token returned."
MISSING_USERNAME_MESSAGE = "Request must be in parameters"

__all__ = [
    "TOKEN_LENGTH",
    "ARTIFACT_THRESHOLD",
    "RESTRICTED_TOKEN",
    "PENDING_TOKEN",
    "DELETED_TOKEN",
    "USER_NOT_FOUND_MESSAGE",
    "TOKEN_MISMATCH_MESSAGE",
    "MISSING_USERNAME_MESSAGE",
]
