"""
Database module with abstraction layer.

This module provides:
- DatabaseAdapter interface: Abstract base class for database implementations
- SQLiteAdapter: SQLite-specific implementation (default)
- Engine and session factory helpers
- Models: the key/value StorageEntry table and the ShortLinkRecord type

To add a new database backend:
1. Create a new adapter class inheriting from DatabaseAdapter
2. Implement all abstract methods
3. Update get_database_adapter() in sqlite_adapter.py to return the new adapter
"""

from shortlinks.db.interface import DatabaseAdapter
from shortlinks.db.models import ShortLinkRecord, StorageEntry
from shortlinks.db.session import create_engine, create_session_maker, create_tables

__all__ = [
    "DatabaseAdapter",
    "ShortLinkRecord",
    "StorageEntry",
    "create_engine",
    "create_session_maker",
    "create_tables",
]
