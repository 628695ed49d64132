"""FastAPI application factory.

Lifespan
--------
On startup the app builds a single :class:`LinkChecker` (shared across all
requests via ``request.app.state.checker``) so its status cache lives for the
whole process.  On shutdown the checker's HTTP client is closed.

Routers
-------
    /check    : link checking for raw text and batches of posts
    /health   : liveness probe
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Any, AsyncIterator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from linkcheck.api.routers import check as check_router
from linkcheck.scanner.checker import LinkChecker

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Build the checker on startup and release it on shutdown."""
    checker = LinkChecker.from_settings()
    app.state.checker = checker
    logger.info("Link checker ready (%d worker(s) per document).", checker.max_workers)
    try:
        yield
    finally:
        app.state.checker.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="Link Checker API",
        description=(
            "Finds the links in blog posts and reports whether each one is "
            "reachable, where it redirects and what its page title is."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    # Allow browser frontends on any origin (tighten for production).
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(check_router.router, prefix="/check", tags=["check"])

    @app.get("/health", tags=["health"])
    def health(request: Request) -> dict[str, Any]:
        return {"status": "ok", "cached": len(request.app.state.checker.cache)}

    return app


# Module-level instance used by uvicorn:
#   uvicorn linkcheck.api.app:app --reload
app = create_app()
