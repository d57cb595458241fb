"""
Global pytest fixtures for the Shortlink Platform test suite.

Responsibilities:
    - Provide a fresh FastAPI TestClient via the app factory for integration tests
    - Provide isolated in-memory and SQLite Storage fixtures for direct testing
    - Provide a ShortLinkManager fixture wired to the Storage fixture
    - Provide a scripted strategy for deterministic collision scenarios

Importing `main` builds a module-level app, so the backend is pinned to
memory before that import to keep the suite from creating a database file
in the working directory.
"""

import os
import threading

os.environ["SHORTLINK_STORAGE_BACKEND"] = "memory"

import pytest
from fastapi.testclient import TestClient

from main import create_app
from shortlink_platform.manager.code_generator import CodeGenerator
from shortlink_platform.manager.shortlink_manager import ShortLinkManager
from shortlink_platform.manager.strategies import BaseStrategy
from shortlink_platform.storage.sqlite_storage import SQLiteStorage
from shortlink_platform.storage.storage import Storage


class ScriptedStrategy(BaseStrategy):
    """Returns the given codes in order; raises once they run out."""

    def __init__(self, codes):
        self._codes = list(codes)
        self._lock = threading.Lock()
        self.calls = 0

    def generate(self) -> str:
        with self._lock:
            self.calls += 1
            if not self._codes:
                raise AssertionError("ScriptedStrategy ran out of codes")
            return self._codes.pop(0)


@pytest.fixture
def storage() -> Storage:
    """Provide a fresh in-memory Storage backend."""
    return Storage()


@pytest.fixture
def sqlite_storage(tmp_path) -> SQLiteStorage:
    """Provide a SQLite backend on a throwaway file."""
    return SQLiteStorage(str(tmp_path / "shortlinks.db"))


@pytest.fixture
def manager(storage: Storage) -> ShortLinkManager:
    """Provide a ShortLinkManager wired to the storage fixture."""
    return ShortLinkManager(storage=storage)


@pytest.fixture
def scripted():
    """Factory for ScriptedStrategy instances."""
    return ScriptedStrategy


@pytest.fixture
def client(storage: Storage) -> TestClient:
    """
    Provide a fresh TestClient with a new app instance over the storage fixture.

    Redirects are not followed so tests can assert the 302 itself.
    """
    app = create_app(storage=storage, generator=CodeGenerator(storage))
    return TestClient(app, follow_redirects=False)
