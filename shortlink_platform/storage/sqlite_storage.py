"""
SQLiteStorage – SQLite-backed storage for Shortlink Platform
===========================================================

Default durable backend. Same contract as the in-memory `Storage` (see
`storage.py`), so backends can be switched without touching business logic.

Key Design Points
-----------------
- **Uniqueness**: `short_code` is the PRIMARY KEY. `put` issues
  `INSERT ... ON CONFLICT (short_code) DO NOTHING` and reports a conflict when
  no row was written, so concurrent writers (threads or processes sharing
  the file) get exactly one winner per code.
- **Connections**: one short-lived connection per call. `timeout` is the
  busy wait for SQLite's write lock; writers queue instead of failing.
- **Timestamps**: `created_at` is written by the application in UTC ISO-8601
  with microseconds, so lexical order is chronological. `rowid` breaks ties.
- **Errors**: every `sqlite3.Error` becomes `StorageError` with the original
  exception chained.

Schema
------
    CREATE TABLE IF NOT EXISTS urls (
        short_code   TEXT PRIMARY KEY,
        original_url TEXT NOT NULL,
        created_at   TIMESTAMP NOT NULL
    )
"""

import contextlib
import logging
import sqlite3
from datetime import datetime, timezone
from typing import List, Optional

from ..errors import StorageError
from .base import BaseStorage, LinkMapping

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS urls (
    short_code   TEXT PRIMARY KEY,
    original_url TEXT NOT NULL,
    created_at   TIMESTAMP NOT NULL
)
"""


class SQLiteStorage(BaseStorage):
    """SQLite implementation of the storage contract.

    Parameters
    ----------
    path : str
        Database file path (or a `file:` URI).
    timeout : float
        Seconds to wait on a locked database before giving up.
    """

    def __init__(self, path: str, timeout: float = 10.0) -> None:
        self.path = path
        self.timeout = timeout
        self.ensure_schema()

    # ---- Internal helpers -------------------------------------------------

    @contextlib.contextmanager
    def _conn(self):
        """Yield a connection; commits on success, rolls back on error."""
        try:
            con = sqlite3.connect(self.path, timeout=self.timeout, uri=self.path.startswith("file:"))
        except sqlite3.Error as exc:
            logger.error("Cannot open SQLite database %s: %s", self.path, exc)
            raise StorageError(f"Cannot open database: {exc}") from exc
        try:
            with con:
                yield con
        except sqlite3.Error as exc:
            logger.error("SQLite error on %s: %s", self.path, exc)
            raise StorageError(f"Database error: {exc}") from exc
        finally:
            con.close()

    def ensure_schema(self) -> None:
        with self._conn() as con:
            con.execute(SCHEMA)

    # ---- Contract methods -------------------------------------------------

    def put(self, code: str, url: str) -> bool:
        created_at = datetime.now(timezone.utc).isoformat(timespec="microseconds")
        with self._conn() as con:
            cur = con.execute(
                """
                INSERT INTO urls (short_code, original_url, created_at)
                VALUES (?, ?, ?)
                ON CONFLICT (short_code) DO NOTHING
                """,
                (code, url, created_at),
            )
            return cur.rowcount == 1

    def get(self, code: str) -> Optional[str]:
        with self._conn() as con:
            row = con.execute("SELECT original_url FROM urls WHERE short_code = ?", (code,)).fetchone()
            return row[0] if row else None

    def list(self, limit: int) -> List[LinkMapping]:
        if limit <= 0:
            return []
        with self._conn() as con:
            rows = con.execute(
                "SELECT short_code, original_url, created_at FROM urls "
                "ORDER BY created_at DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [
            LinkMapping(code=code, original_url=url, created_at=datetime.fromisoformat(created_at))
            for code, url, created_at in rows
        ]
