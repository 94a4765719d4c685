"""
Record source layer.

The analytics engine reads orders and catalog counts through the
RecordSource contract. DuckDB backs local development and tests.
"""

from functools import lru_cache

from salespulse.config import get_settings

from .base import FetchError, RecordSource, StorageError
from .duckdb_storage import DuckDBStorage


@lru_cache
def get_storage() -> RecordSource:
    """
    Get cached record source instance (singleton).

    Returns the appropriate implementation based on configuration.
    Currently supports DuckDB.

    Returns:
        RecordSource implementation instance
    """
    settings = get_settings()
    return DuckDBStorage(db_path=settings.db_path)


__all__ = [
    "DuckDBStorage",
    "FetchError",
    "RecordSource",
    "StorageError",
    "get_storage",
]
