"""
Error taxonomy for Shortlink Platform.

    ShortLinkError
    ├── InvalidURLError      bad input, rejected before a code is drawn
    ├── GenerationExhausted  retry cap reached; alphabet/length too small for the load
    ├── ShortLinkNotFound    normal negative result of a lookup
    └── StorageError         persistence engine failure, never retried here

A code conflict is not an exception: `BaseStorage.put` returns False and the
code generator retries with a fresh candidate.
"""


class ShortLinkError(Exception):
    """Base class for all domain errors raised by the core."""


class InvalidURLError(ShortLinkError, ValueError):
    """URL is not an absolute http(s) URL."""


class GenerationExhausted(ShortLinkError):
    """Every candidate drawn within the retry budget was already taken."""

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"No free short code after {attempts} attempts")


class ShortLinkNotFound(ShortLinkError, LookupError):
    def __init__(self, code: str):
        self.code = code
        super().__init__(f"Short code not found: {code!r}")


class StorageError(ShortLinkError):
    """Wraps the underlying engine error (available as __cause__)."""
