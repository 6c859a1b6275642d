# Path: core/store/__init__.py
# Purpose: Package initializer for image persistence.
# Layer: core/store.
# Details: Exposes the store interfaces and the SQLite implementation.

from .base import ImageStore, StoreSnapshot
from .sqlite_store import SqliteImageStore, SqliteSnapshot

__all__ = ["ImageStore", "SqliteImageStore", "SqliteSnapshot", "StoreSnapshot"]
