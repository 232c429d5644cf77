"""FastAPI application factory.

Lifespan
--------
On startup the app creates a single :class:`StationSession` (shared across
all requests via ``request.app.state.session``) configured from
``settings.base_url``.  On shutdown it stops the session's worker pool.

Routers
-------
    /session   — configure the directory-listing URL
    /status    — loading flag + last error
    /stations  — discovery, candidate lookup and document resolution
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from stationfeed.api.routers import stations as stations_router
from stationfeed.config import settings
from stationfeed.errors import MalformedUrl
from stationfeed.session import StationSession

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the shared session on startup and close it on shutdown."""
    session = StationSession()
    if settings.base_url:
        try:
            session.set_base_url(settings.base_url)
        except MalformedUrl as exc:
            logger.error("Ignoring configured base URL: %s", exc)
    app.state.session = session
    try:
        yield
    finally:
        session.close()


def create_app() -> FastAPI:
    """Return a fully-configured FastAPI application instance."""
    app = FastAPI(
        title="stationfeed API",
        description=(
            "Lists the stations found in a file-server directory listing and "
            "returns the newest document for a chosen station."
        ),
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(stations_router.router, tags=["stations"])

    return app


# Module-level instance used by uvicorn:
#   uvicorn stationfeed.api.app:app --reload
app = create_app()
