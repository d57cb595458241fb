"""
ShortLinkManager module for Shortlink Platform.

Responsibilities:
    - Validate URLs before any code is drawn
    - Create short links through the CodeGenerator
    - Resolve codes back to their original URL
    - List the most recent mappings for inspection

Design notes:
    - Every create draws a fresh random code; the same URL submitted twice
      gets two codes. There is no dedupe by long URL.
    - Code uniqueness is owned by the storage backend. The manager never
      checks for an existing code itself.
    - Storage and generator are injected, so tests can use the in-memory
      backend or a scripted strategy without touching routes.
"""

import logging
from typing import Dict, List, Optional
from urllib.parse import urlparse

from ..errors import InvalidURLError, ShortLinkNotFound
from ..storage.base import BaseStorage
from .code_generator import CodeGenerator

logger = logging.getLogger(__name__)

ALLOWED_PREFIXES = ("http://", "https://")
DEFAULT_LIST_LIMIT = 100


class ShortLinkManager:
    """Coordinates creation, resolution and listing of short links."""

    def __init__(self, storage: BaseStorage, generator: Optional[CodeGenerator] = None):
        """
        Args:
            storage (BaseStorage): Backend storage instance.
            generator (Optional[CodeGenerator]): Code generator bound to the same
                storage; built with defaults when omitted.
        """
        self.storage = storage
        self.generator = generator or CodeGenerator(storage)

    # ---------------------------------------------------------------------
    # Validation Helpers
    # ---------------------------------------------------------------------
    def _validate_url(self, url: str) -> None:
        """
        Require a literal "http://" or "https://" prefix and a host.

        Raises:
            InvalidURLError: If the URL is malformed.
        """
        if not isinstance(url, str) or not url.startswith(ALLOWED_PREFIXES):
            raise InvalidURLError("URL must start with http:// or https://")
        if not urlparse(url).netloc:
            raise InvalidURLError("URL must include a host")

    # ---------------------------------------------------------------------
    # Public API
    # ---------------------------------------------------------------------
    def create_short_link(self, url: str) -> Dict[str, str]:
        """
        Create a short link for `url`.

        Returns:
            dict: {"code": <short code>, "url": <original url>}

        Raises:
            InvalidURLError: Before generation, on a malformed URL.
            GenerationExhausted: If no free code was found within the retry cap.
            StorageError: On backend failure.
        """
        self._validate_url(url)
        code = self.generator.generate(url)
        logger.debug("Created short link %s -> %s", code, url)
        return {"code": code, "url": url}

    def resolve_short_link(self, code: str) -> str:
        """
        Return the original URL for `code` (exact, case-sensitive match).

        Raises:
            ShortLinkNotFound: If the code was never stored.
            StorageError: On backend failure.
        """
        url = self.storage.get(code)
        if url is None:
            logger.info("Short code not found: %r", code)
            raise ShortLinkNotFound(code)
        return url

    def list_recent(self, limit: int = DEFAULT_LIST_LIMIT) -> List[Dict[str, str]]:
        """Newest mappings first, at most `limit` entries."""
        return [{"code": m.code, "url": m.original_url} for m in self.storage.list(limit)]
