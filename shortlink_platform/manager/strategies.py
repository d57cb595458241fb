"""
Short-code strategies for shortlink_platform.

RandomStrategy draws every character independently and uniformly from a
36-symbol alphabet (a-z, 0-9). With the default length of 10 there are
36**10 ~= 3.6e15 codes, so even tens of millions of stored links keep the
chance of a single collision below 1e-6. Length 6 (~2.2e9 codes) is the
floor and only suits small corpora.

Strategies only propose candidates. Whether a candidate is free is decided
by the storage backend's insert, never here.
"""

import random
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, Optional

from shortlink_platform.config import settings

ALPHABET = "abcdefghijklmnopqrstuvwxyz0123456789"
DEFAULT_CODE_LENGTH = 10
MIN_CODE_LENGTH = 6
MAX_CODE_LENGTH = 32

CODE_PATTERN = re.compile(r"\A[a-z0-9]+\Z")


def resolve_length(length: Optional[int]) -> int:
    """
    Resolve desired code length from arg or config, clamped to [6, 32].
    """
    L = int(length) if length is not None else int(getattr(settings, "CODE_LENGTH", DEFAULT_CODE_LENGTH))
    return max(MIN_CODE_LENGTH, min(MAX_CODE_LENGTH, L))


class BaseStrategy(ABC):
    """Abstract base for code generation strategies."""

    @abstractmethod
    def generate(self) -> str:
        """Return a new candidate code."""
        raise NotImplementedError


@dataclass(frozen=True)
class RandomStrategy(BaseStrategy):
    """
    Uniform random codes over ALPHABET.

    `rng` is anything with a `choice(seq)` method; defaults to
    `random.SystemRandom` so candidates are not predictable from earlier ones.
    """
    length: int = DEFAULT_CODE_LENGTH
    rng: Any = field(default=None, compare=False, repr=False)

    def __post_init__(self):
        if self.rng is None:
            object.__setattr__(self, "rng", random.SystemRandom())
        object.__setattr__(self, "length", resolve_length(self.length))

    def generate(self) -> str:
        return "".join(self.rng.choice(ALPHABET) for _ in range(self.length))


def get_strategy_from_config() -> BaseStrategy:
    """Build the default strategy from settings.CODE_LENGTH."""
    return RandomStrategy(length=resolve_length(None))
