"""Storage layer for renqing."""

from renqing.database.base import Storage
from renqing.database.factories import create_sqlite_storage

__all__ = ["Storage", "create_sqlite_storage"]
