"""
Base storage interface for Shortlink Platform.

Purpose:
    Define a small, stable contract that multiple storage backends
    (in-memory, SQLite, PostgreSQL) can implement without requiring
    changes to business logic.

Contract:
    - put(code, url)  -> bool   atomic insert-if-absent; False means the code is taken
    - get(code)       -> url or None
    - list(limit)     -> newest mappings first, at most `limit`

    The uniqueness of `code` is the backend's job. SQL backends delegate it to
    the primary key so it holds across processes and restarts; callers must
    never emulate it with a separate existence check before `put`.

    Backends raise `StorageError` for engine failures. They do not validate
    URLs; that happens before `put` is called.

Testing & Coverage:
    These are abstract methods and are not executed directly in tests.
    We annotate them with `# pragma: no cover` so coverage tools don't
    penalize the project for un-runnable abstract declarations.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import List, Optional


@dataclass(frozen=True)
class LinkMapping:
    """A persisted (code, original_url, created_at) record."""
    code: str
    original_url: str
    created_at: datetime


class BaseStorage(ABC):
    """Abstract base class for storage backends."""

    @abstractmethod  # pragma: no cover
    def put(self, code: str, url: str) -> bool:
        """
        Insert a new mapping unless `code` already exists.

        Returns:
            bool: True if inserted, False on conflict (existing row untouched).

        Raises:
            StorageError: If the engine fails.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def get(self, code: str) -> Optional[str]:
        """
        Exact, case-sensitive lookup.

        Returns:
            Optional[str]: The original URL, or None if the code was never stored.
        """
        raise NotImplementedError

    @abstractmethod  # pragma: no cover
    def list(self, limit: int) -> List[LinkMapping]:
        """
        Most recently created mappings first, at most `limit` of them.
        A non-positive limit yields an empty list.
        """
        raise NotImplementedError
