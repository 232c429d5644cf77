"""Discovery: directory-listing URL → sorted station names + raw paths.

Stateless.  :class:`~stationfeed.session.StationSession` owns the result
once it comes back.
"""

from __future__ import annotations

import logging

import httpx

from stationfeed.errors import ConfigurationError, EmptyResult, ParseError
from stationfeed.scraper.fetcher import fetch_listing, normalise_base_url
from stationfeed.scraper.listing import parse_listing
from stationfeed.scraper.models import ListingResult
from stationfeed.scraper.normalizer import filter_listing

logger = logging.getLogger(__name__)


def discover(base_url: str | None, *, client: httpx.Client | None = None) -> ListingResult:
    """Fetch the listing at *base_url* and derive its stations.

    Args:
        base_url: Directory-listing URL.  A trailing ``/`` is added when
            missing.
        client: Optional caller-owned ``httpx.Client``.

    Returns:
        A :class:`ListingResult` with at least one station name.

    Raises:
        ConfigurationError: *base_url* is empty.
        EmptyResult: the page was fetched but nothing qualified.
        MalformedUrl, NetworkError, FetchTimeout, HttpError: from the fetcher.
    """
    if not base_url or not base_url.strip():
        raise ConfigurationError()

    base = normalise_base_url(base_url)
    logger.debug("Fetching directory listing from %s", base)
    html = fetch_listing(base, client=client)

    try:
        entries = parse_listing(html)
    except ParseError as exc:
        logger.warning("Could not parse listing at %s: %s", base, exc)
        entries = []

    result = filter_listing(entries)
    if not result.station_names:
        logger.warning(
            "No station identifiers in %s (%d anchors, %d kept paths)",
            base,
            len(entries),
            len(result.raw_paths),
        )
        raise EmptyResult(result)

    logger.info(
        "Extracted %d unique stations from %s: %s",
        len(result.station_names),
        base,
        result.station_names,
    )
    return result
