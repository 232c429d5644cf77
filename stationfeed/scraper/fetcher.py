"""Plain HTTP GET primitive shared by discovery and resolution.

One request per call, no retries.  The ``httpx.Client`` is always used as a
context manager so the connection is released on every exit path, and every
``httpx`` failure is translated into the :mod:`stationfeed.errors` taxonomy.
"""

from __future__ import annotations

import logging
from urllib.parse import urlsplit

import httpx

from stationfeed.config import settings
from stationfeed.errors import (
    FetchTimeout,
    FileNotFound,
    HttpError,
    MalformedUrl,
    NetworkError,
)

logger = logging.getLogger(__name__)

_ALLOWED_SCHEMES = ("http", "https")


def _default_headers() -> dict[str, str]:
    return {"User-Agent": settings.user_agent}


def _timeout() -> httpx.Timeout:
    return httpx.Timeout(settings.request_timeout, connect=settings.connect_timeout)


def validate_url(url: str) -> str:
    """Return *url* stripped of surrounding whitespace, or raise :class:`MalformedUrl`."""
    candidate = (url or "").strip()
    if not candidate:
        raise MalformedUrl(url, "empty URL")
    try:
        parts = urlsplit(candidate)
    except ValueError as exc:
        raise MalformedUrl(url, str(exc)) from exc
    if parts.scheme.lower() not in _ALLOWED_SCHEMES:
        raise MalformedUrl(url, "only http and https are supported")
    if not parts.netloc:
        raise MalformedUrl(url, "missing host")
    return candidate


def normalise_base_url(url: str) -> str:
    """Validate *url* and make sure it ends with exactly one path slash."""
    base = validate_url(url)
    if not base.endswith("/"):
        base += "/"
    return base


def _get(client: httpx.Client, url: str) -> str:
    try:
        response = client.get(url)
    except httpx.TimeoutException as exc:
        logger.error("Timed out fetching %s: %s", url, exc)
        raise FetchTimeout(f"Timed out fetching {url}") from exc
    except (httpx.InvalidURL, httpx.UnsupportedProtocol) as exc:
        raise MalformedUrl(url, str(exc)) from exc
    except httpx.TransportError as exc:
        logger.error("Network error fetching %s: %s", url, exc)
        raise NetworkError(f"Network error or cannot access {url}: {exc}") from exc
    except httpx.RequestError as exc:
        # Redirect loops, undecodable bodies and the like.
        logger.error("Request to %s failed: %s", url, exc)
        raise NetworkError(f"Request to {url} failed: {exc}") from exc

    if response.status_code == 404:
        logger.error("File not found: %s", url)
        raise FileNotFound(url)
    if response.status_code != 200:
        logger.error("HTTP %s from %s", response.status_code, url)
        raise HttpError(response.status_code, url)
    return response.text


def fetch_text(url: str, *, client: httpx.Client | None = None) -> str:
    """GET *url* and return the decoded response body.

    A caller-owned *client* is used as-is (and left open); otherwise a
    short-lived client is created and closed before returning.

    Raises:
        MalformedUrl: *url* is not an absolute http(s) URL.
        FetchTimeout: connect or read timeout.
        NetworkError: any other request failure (transport, redirect loop,
            undecodable body).
        FileNotFound: the server answered 404.
        HttpError: any other non-200 status.
    """
    url = validate_url(url)
    logger.debug("GET %s", url)

    if client is not None:
        return _get(client, url)

    with httpx.Client(
        headers=_default_headers(),
        timeout=_timeout(),
        follow_redirects=True,
    ) as owned:
        return _get(owned, url)


def fetch_listing(url: str, *, client: httpx.Client | None = None) -> str:
    """Fetch the HTML of a directory-listing page.

    Same contract as :func:`fetch_text`, except that every non-200 status,
    404 included, is reported as a plain :class:`HttpError`.
    """
    try:
        return fetch_text(url, client=client)
    except HttpError as exc:
        raise HttpError(
            exc.status, exc.url, f"Failed to fetch directory listing: HTTP {exc.status}"
        ) from exc
