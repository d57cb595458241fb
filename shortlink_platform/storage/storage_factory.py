"""
Storage factory – switch storage backend from config (lazy env version)
======================================================================

This module centralizes selection of the storage backend so the rest of the
app can stay ignorant of where data lives.

- Reads environment **at call time** to avoid stale values in tests.
- Creates the `urls` table on PostgreSQL, as SQLiteStorage does on open.
- Imports the PostgreSQL backend **only if** it is selected.

Environment variables
---------------------
- SHORTLINK_STORAGE_BACKEND: "sqlite" (default), "memory" or "postgres"
- SHORTLINK_DB_PATH:         SQLite file if backend == "sqlite"
- SHORTLINK_DB_DSN:          DSN string if backend == "postgres"
"""

from typing import Optional
import logging
import os

from shortlink_platform.storage.base import BaseStorage
from shortlink_platform.storage.storage import Storage
from shortlink_platform.storage.sqlite_storage import SQLiteStorage

logger = logging.getLogger(__name__)


def get_storage(backend: Optional[str] = None, **kwargs) -> BaseStorage:
    """
    Return a storage backend based on configuration.

    Parameters
    ----------
    backend : str, optional
        "sqlite", "memory" or "postgres". If omitted, reads SHORTLINK_STORAGE_BACKEND.
    kwargs : dict
        Extra args for the backend: path="..." for sqlite, dsn="..." for postgres.

    Raises
    ------
    ValueError
        Unknown backend, or postgres selected without a DSN.
    """
    be = (backend or os.getenv("SHORTLINK_STORAGE_BACKEND", "sqlite")).strip().lower()
    logger.info("Selected storage backend: %r", be)

    if be == "memory":
        return Storage()

    if be == "sqlite":
        path = kwargs.get("path") or os.getenv("SHORTLINK_DB_PATH", "urlshortener.db")
        return SQLiteStorage(path=path)

    if be == "postgres":
        dsn = kwargs.get("dsn") or os.getenv("SHORTLINK_DB_DSN", "")
        if not dsn:
            raise ValueError("DB_DSN is required for postgres backend (env SHORTLINK_DB_DSN)")
        # Local import to avoid hard dependency when not using postgres
        from shortlink_platform.storage.db_storage import DBStorage
        storage = DBStorage(dsn=dsn)
        storage.ensure_schema()
        return storage

    raise ValueError(f"Unknown storage backend: {be!r}")
