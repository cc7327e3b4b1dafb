"""Key-value backend exports."""

from .base import KeyValueBackend
from .factory import create_backend
from .memory import MemoryBackend
from .redis_backend import RedisBackend
from .sql_backend import SQLBackend

__all__ = ["KeyValueBackend", "MemoryBackend", "RedisBackend", "SQLBackend", "create_backend"]
