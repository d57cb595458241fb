"""
Contract tests run against every available storage backend.

PostgreSQL joins the matrix only when SHORTLINK_DB_DSN points at a live
database; the table is created if missing and the test codes are random, so
reruns do not collide with earlier data.
"""

import os
import uuid

import pytest

from shortlink_platform.storage.storage_factory import get_storage


@pytest.fixture(params=["memory", "sqlite"] + (["postgres"] if os.getenv("SHORTLINK_DB_DSN") else []))
def storage(request, tmp_path):
    backend = request.param
    if backend == "sqlite":
        return get_storage("sqlite", path=str(tmp_path / "contract.db"))
    return get_storage(backend)


def _code():
    return uuid.uuid4().hex[:10]


def test_put_then_get(storage):
    code = _code()
    assert storage.put(code, "https://example.com/contract") is True
    assert storage.get(code) == "https://example.com/contract"


def test_second_put_is_conflict(storage):
    code = _code()
    assert storage.put(code, "https://one.example") is True
    assert storage.put(code, "https://two.example") is False
    assert storage.get(code) == "https://one.example"


def test_unknown_code_is_none(storage):
    assert storage.get("zz" + _code()[:8]) is None


def test_store_does_not_validate_urls(storage):
    code = _code()
    assert storage.put(code, "not-a-url") is True
    assert storage.get(code) == "not-a-url"


def test_list_contains_newest_first(storage):
    older, newer = _code(), _code()
    storage.put(older, "https://older.example")
    storage.put(newer, "https://newer.example")
    recent = storage.list(2)
    assert [m.code for m in recent] == [newer, older]
