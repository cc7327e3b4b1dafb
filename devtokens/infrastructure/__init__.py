"""Infrastructure package exports."""

from . import backends, database

__all__ = ["backends", "database"]
