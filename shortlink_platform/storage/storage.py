"""
Storage module for Shortlink Platform (in-memory implementation).

Responsibilities:
    - Save short codes and their original URLs
    - Refuse a second insert for an existing code
    - Provide lookup by code and a newest-first listing

Design:
    - Reference implementation of the BaseStorage contract, used by the unit
      and integration tests and by `SHORTLINK_STORAGE_BACKEND=memory`.
    - A lock makes check-and-insert atomic inside one process. That is the
      only scope it covers: data is lost on restart and two processes do not
      see each other's codes. Use the SQLite or PostgreSQL backend for
      anything that runs more than one worker.
"""

import itertools
import threading
from datetime import datetime, timezone
from typing import Dict, List, Optional, Tuple

from .base import BaseStorage, LinkMapping


class Storage(BaseStorage):
    def __init__(self):
        """
        Initialize empty storage.

        Internal schema:
            self.mappings = {
                code: (sequence, LinkMapping)
            }

        `sequence` records insertion order so listings stay stable when two
        mappings share a timestamp.
        """
        self.mappings: Dict[str, Tuple[int, LinkMapping]] = {}
        self._lock = threading.Lock()
        self._sequence = itertools.count()

    def put(self, code: str, url: str) -> bool:
        """
        Insert a mapping if the code is free.

        Returns:
            bool: True on insert, False if the code is already taken.
        """
        with self._lock:
            if code in self.mappings:
                return False
            mapping = LinkMapping(code=code, original_url=url, created_at=datetime.now(timezone.utc))
            self.mappings[code] = (next(self._sequence), mapping)
            return True

    def get(self, code: str) -> Optional[str]:
        entry = self.mappings.get(code)
        return entry[1].original_url if entry else None

    def list(self, limit: int) -> List[LinkMapping]:
        if limit <= 0:
            return []
        with self._lock:
            entries = list(self.mappings.values())
        entries.sort(key=lambda entry: (entry[1].created_at, entry[0]), reverse=True)
        return [mapping for _, mapping in entries[:limit]]

    def __len__(self) -> int:
        return len(self.mappings)
