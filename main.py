"""
Main API module for Shortlink Platform.

Responsibilities:
    - Expose REST endpoints for creating short links and redirecting
    - Expose a debug listing of the most recent mappings
    - Map domain errors to HTTP status codes
    - Apply CORS for the configured front-end origins

Architecture:
    - App Factory pattern (create_app) for test isolation and DI.
    - Storage backend chosen from the environment (SQLite by default).
    - ShortLinkManager owns validation, generation and lookup; routes only
      translate between HTTP and the manager.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import FastAPI, HTTPException, Query, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import RedirectResponse
from pydantic import BaseModel

from shortlink_platform.config import settings
from shortlink_platform.errors import GenerationExhausted, InvalidURLError, ShortLinkNotFound, StorageError
from shortlink_platform.manager.code_generator import CodeGenerator
from shortlink_platform.manager.shortlink_manager import ShortLinkManager
from shortlink_platform.storage.base import BaseStorage
from shortlink_platform.storage.storage_factory import get_storage


class ShortenRequest(BaseModel):
    """Request payload for creating a new short link."""
    url: str


def create_app(storage: Optional[BaseStorage] = None, generator: Optional[CodeGenerator] = None) -> FastAPI:
    """
    Factory function to build and configure a new FastAPI app instance.

    Args:
        storage (Optional[BaseStorage]): Backend to use; chosen from the
            environment when omitted.
        generator (Optional[CodeGenerator]): Code generator bound to `storage`;
            built from settings when omitted.

    Returns:
        FastAPI: A fully configured application instance.
    """
    app = FastAPI(
        title="Shortlink Platform",
        description="URL shortener with collision-free random short codes",
        docs_url="/docs",
    )
    log = logging.getLogger("shortlink")

    if not logging.getLogger().handlers:
        logging.basicConfig(level=settings.LOG_LEVEL)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["GET", "POST", "PUT", "DELETE", "OPTIONS"],
        allow_headers=["*"],
    )

    # ----------------------------------------------------------------
    # Per-app instances (isolated for tests, swappable for production)
    # ----------------------------------------------------------------
    if storage is None:
        storage = get_storage()
    if generator is None:
        generator = CodeGenerator(storage, max_attempts=settings.MAX_ATTEMPTS)
    manager = ShortLinkManager(storage=storage, generator=generator)
    log.info("Shortlink storage backend: %s", type(storage).__name__)
    log.info("Allowed origins: %s", ", ".join(settings.ALLOWED_ORIGINS))

    def _short_url(request: Request, code: str) -> str:
        if settings.BASE_URL:
            return f"{settings.BASE_URL}/{code}"
        return str(request.url_for("redirect_short_link", short_code=code))

    # ----------------------------------------------------------------
    # Routes
    # ----------------------------------------------------------------
    @app.get("/")
    def index() -> Dict[str, str]:
        return {"message": "Welcome to the URL shortener API"}

    @app.get("/health")
    def health() -> Dict[str, str]:
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.post("/shorten")
    def shorten(req: ShortenRequest, request: Request) -> Dict[str, Any]:
        """
        Create a short link for a given URL.

        Returns:
            dict: original_url, short_url and short_code.

        Raises:
            HTTPException: 400 on an invalid URL, 503 when no free code could be
                drawn, 500 on storage failure.
        """
        try:
            created = manager.create_short_link(req.url)
        except InvalidURLError as exc:
            raise HTTPException(status_code=400, detail=str(exc))
        except GenerationExhausted as exc:
            raise HTTPException(status_code=503, detail=str(exc))
        except StorageError as exc:
            log.exception("Failed to save URL")
            raise HTTPException(status_code=500, detail=f"Failed to save URL: {exc}")

        code = created["code"]
        log.info("Shortened %s -> %s", req.url, code)
        return {
            "original_url": created["url"],
            "short_url": _short_url(request, code),
            "short_code": code,
        }

    @app.get("/debug")
    def debug(limit: int = Query(100, ge=1, le=1000, description="Maximum mappings to return.")) -> Dict[str, Any]:
        """Most recent mappings, newest first. `count` is the number returned, not the table size."""
        try:
            recent = manager.list_recent(limit)
        except StorageError as exc:
            log.exception("Failed to query URLs")
            raise HTTPException(status_code=500, detail=f"Failed to query URLs: {exc}")
        return {
            "count": len(recent),
            "mappings": {item["code"]: item["url"] for item in recent},
        }

    # Catch-all single segment route; keep it last so it does not shadow the others.
    @app.get("/{short_code}")
    def redirect_short_link(short_code: str) -> RedirectResponse:
        """
        Redirect to the original URL for `short_code`.

        Raises:
            HTTPException: 404 if the code is unknown, 500 on storage failure.
        """
        try:
            url = manager.resolve_short_link(short_code)
        except ShortLinkNotFound:
            raise HTTPException(status_code=404, detail="Short URL not found")
        except StorageError as exc:
            log.exception("Failed to resolve %r", short_code)
            raise HTTPException(status_code=500, detail=f"Database Error: {exc}")
        return RedirectResponse(url=url, status_code=302)

    return app


# `uvicorn main:app` and `from main import app` keep working.
app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.PORT)
