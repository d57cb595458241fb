"""
Concurrent creation against the in-memory and SQLite backends.

Goal:
    - N concurrent creates produce N distinct stored codes, all resolvable
    - Two creators that draw the same first candidate both succeed: the store
      accepts one insert, the other sees a conflict and retries
    - Concurrent `put` calls for one code have exactly one winner
"""

import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from shortlink_platform.manager.code_generator import CodeGenerator
from shortlink_platform.manager.shortlink_manager import ShortLinkManager
from shortlink_platform.manager.strategies import BaseStrategy, RandomStrategy
from shortlink_platform.storage.sqlite_storage import SQLiteStorage
from shortlink_platform.storage.storage import Storage


@pytest.fixture(params=["memory", "sqlite"])
def backend(request, tmp_path):
    if request.param == "memory":
        return Storage()
    return SQLiteStorage(str(tmp_path / "concurrent.db"), timeout=30.0)


class SameFirstCandidate(BaseStrategy):
    """Every thread's first draw is `first`; later draws are random."""

    def __init__(self, first: str):
        self.first = first
        self._local = threading.local()
        self._random = RandomStrategy()

    def generate(self) -> str:
        if not getattr(self._local, "drawn", False):
            self._local.drawn = True
            return self.first
        return self._random.generate()


def test_concurrent_creates_yield_distinct_codes(backend):
    manager = ShortLinkManager(backend)
    n = 64

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda i: manager.create_short_link(f"https://example.com/{i}"), range(n)))

    codes = [r["code"] for r in results]
    assert len(set(codes)) == n
    for i, result in enumerate(results):
        assert manager.resolve_short_link(result["code"]) == f"https://example.com/{i}"
    assert len(backend.list(n + 10)) == n


def test_two_creators_same_first_candidate(backend):
    gen = CodeGenerator(backend, strategy=SameFirstCandidate("k7x9qtb2mn"))
    manager = ShortLinkManager(backend, generator=gen)
    barrier = threading.Barrier(2)

    def create(url):
        barrier.wait()
        return manager.create_short_link(url)

    with ThreadPoolExecutor(max_workers=2) as pool:
        a, b = pool.map(create, ["https://a.example", "https://b.example"])

    assert "k7x9qtb2mn" in {a["code"], b["code"]}
    assert a["code"] != b["code"]
    assert manager.resolve_short_link(a["code"]) == "https://a.example"
    assert manager.resolve_short_link(b["code"]) == "https://b.example"


def test_racing_puts_on_one_code_have_single_winner(backend):
    workers = 8
    barrier = threading.Barrier(workers)

    def put(i):
        barrier.wait()
        return backend.put("k7x9qtb2mn", f"https://example.com/{i}")

    with ThreadPoolExecutor(max_workers=workers) as pool:
        outcomes = list(pool.map(put, range(workers)))

    assert outcomes.count(True) == 1
    winner = outcomes.index(True)
    assert backend.get("k7x9qtb2mn") == f"https://example.com/{winner}"
