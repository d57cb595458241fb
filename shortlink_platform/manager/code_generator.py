"""
CodeGenerator: turn a URL into a stored, unique short code.

The generator never asks the store whether a candidate exists before writing
it. Two concurrent callers could both see "free" for the same candidate and
both proceed. Instead each candidate is written straight away with
`storage.put`, and the store's insert-if-absent is the only authority: a
False result means another writer owns the code and a fresh candidate is
drawn.

The loop is capped at `max_attempts`. Reaching the cap raises
`GenerationExhausted`, which points at an undersized alphabet/length rather
than at a transient condition.

Codes that coincide with a fixed route of the HTTP app (`health`, `debug`,
...) would be shadowed by that route and never redirect, so they are skipped
before reaching the store. A skipped candidate still counts as an attempt.
"""

import logging
from typing import FrozenSet, Iterable, Optional

from ..errors import GenerationExhausted
from ..storage.base import BaseStorage
from .strategies import BaseStrategy, get_strategy_from_config

logger = logging.getLogger(__name__)

DEFAULT_MAX_ATTEMPTS = 10

# Single-segment paths served by main.py (and FastAPI's docs) ahead of the redirect route.
RESERVED_CODES: FrozenSet[str] = frozenset({"health", "debug", "shorten", "docs", "redoc"})


class CodeGenerator:
    def __init__(
        self,
        storage: BaseStorage,
        strategy: Optional[BaseStrategy] = None,
        max_attempts: int = DEFAULT_MAX_ATTEMPTS,
        reserved: Iterable[str] = RESERVED_CODES,
    ):
        """
        Args:
            storage (BaseStorage): Backend whose `put` arbitrates uniqueness.
            strategy (Optional[BaseStrategy]): Candidate source; defaults to the
                configured RandomStrategy.
            max_attempts (int): Candidates tried before giving up (>= 1).
            reserved (Iterable[str]): Codes never handed out.
        """
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        self.storage = storage
        self.strategy = strategy or get_strategy_from_config()
        self.max_attempts = max_attempts
        self.reserved = frozenset(reserved)

    def generate(self, url: str) -> str:
        """
        Claim a fresh code for `url` and return it.

        Raises:
            GenerationExhausted: Every candidate within the budget was taken.
            StorageError: Propagated from the backend on the first failure.
        """
        for attempt in range(1, self.max_attempts + 1):
            code = self.strategy.generate()
            if code in self.reserved:
                logger.info("Skipping reserved short code %r (attempt %d/%d)", code, attempt, self.max_attempts)
                continue
            if self.storage.put(code, url):
                return code
            logger.info("Short code conflict on %r (attempt %d/%d)", code, attempt, self.max_attempts)

        logger.error("Short code generation exhausted after %d attempts", self.max_attempts)
        raise GenerationExhausted(self.max_attempts)
