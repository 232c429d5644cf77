"""Station endpoints.

Routes
------
POST /session                      Set (or clear) the directory-listing URL
GET  /status                       Loading flag, base URL and last error
GET  /stations?refresh=false       Sorted station names (discovers on demand)
GET  /stations/candidates?name=    Candidate paths for a station, no fetch
GET  /stations/document?name=      Newest document for a station
"""

from __future__ import annotations

from typing import Any, Optional

from fastapi import APIRouter, HTTPException, Request
from pydantic import BaseModel

from stationfeed.errors import (
    ConfigurationError,
    EmptyResult,
    FetchTimeout,
    FileNotFound,
    MalformedUrl,
    NetworkError,
    NoMatchingFile,
    StationFeedError,
)
from stationfeed.session import StationSession

router = APIRouter()


# ---------------------------------------------------------------------------
# Pydantic schemas
# ---------------------------------------------------------------------------

class SessionConfig(BaseModel):
    base_url: Optional[str] = None


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

_STATUS_CODES = [
    (ConfigurationError, 400),
    (MalformedUrl, 400),
    (EmptyResult, 404),
    (NoMatchingFile, 404),
    (FileNotFound, 404),
    (FetchTimeout, 504),
    (NetworkError, 502),
]


def _http_error(exc: StationFeedError) -> HTTPException:
    status = next((code for cls, code in _STATUS_CODES if isinstance(exc, cls)), 502)
    return HTTPException(status_code=status, detail={"kind": exc.kind, "message": exc.message})


def _session(request: Request) -> StationSession:
    return request.app.state.session


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post("/session")
def configure_session(body: SessionConfig, request: Request) -> dict[str, Any]:
    """Point the session at a new listing URL; discovered stations are dropped."""
    try:
        base = _session(request).set_base_url(body.base_url)
    except StationFeedError as exc:
        raise _http_error(exc) from exc
    return {"base_url": base}


@router.get("/status")
def get_status(request: Request) -> dict[str, Any]:
    """Return the base URL, the loading flag and the last reported failure."""
    session = _session(request)
    status = session.status
    return {
        "base_url": session.base_url,
        "loading": session.is_loading,
        "kind": status.kind if status else None,
        "message": status.message if status else None,
    }


@router.get("/stations")
def list_stations(request: Request, refresh: bool = False) -> dict[str, Any]:
    """Return the station list, running discovery first if needed."""
    session = _session(request)
    if refresh or not session.state.discovered:
        try:
            session.discover()
        except StationFeedError as exc:
            raise _http_error(exc) from exc
    names = session.station_names
    return {"stations": names, "count": len(names)}


@router.get("/stations/candidates")
def station_candidates(request: Request, name: str) -> dict[str, Any]:
    """List the paths that belong to *name* and the one resolution would pick."""
    candidates, chosen = _session(request).candidates(name)
    return {"station": name, "candidates": candidates, "chosen": chosen}


@router.get("/stations/document")
def station_document(request: Request, name: str) -> dict[str, Any]:
    """Resolve *name* against the last discovery and return the file's text."""
    try:
        doc = _session(request).resolve(name)
    except StationFeedError as exc:
        raise _http_error(exc) from exc
    return {
        "station": doc.station_name,
        "source_url": doc.source_url,
        "content": doc.content,
    }
