"""Resolution: station name + raw paths → the single best file's text.

Candidate selection is a pure function of ``(station, raw_paths)``; only
:func:`resolve` touches the network.
"""

from __future__ import annotations

import logging
import re
from typing import List, Optional, Sequence, Tuple
from urllib.parse import unquote, urljoin, urlsplit

import httpx

from stationfeed.config import DATE_ORDERS, settings
from stationfeed.errors import NoMatchingFile
from stationfeed.scraper.fetcher import fetch_text, normalise_base_url
from stationfeed.scraper.models import ResolvedDocument
from stationfeed.scraper.normalizer import identifier_for_path, strip_date_tokens

logger = logging.getLogger(__name__)

_FILE_SUFFIXES = (".txt", ".config")
_DATE_RE = re.compile(r"(\d{4})/(\d{2})/(\d{1,2})")


# ---------------------------------------------------------------------------
# Candidate selection
# ---------------------------------------------------------------------------

def _looks_like_document(decoded: str) -> bool:
    return decoded.lower().endswith(_FILE_SUFFIXES) or _DATE_RE.search(decoded) is not None


def find_candidates(station: str, raw_paths: Sequence[str]) -> List[str]:
    """Return the raw paths that belong to *station*, in their original order.

    A path belongs to a station when its URL-decoded form contains the
    station name (case-insensitively), either verbatim or once the path has
    been scrubbed the same way listing text is, and it names a
    ``.txt``/``.config`` file or carries a ``YYYY/MM/DD`` date.
    """
    needle = strip_date_tokens(station).lower()
    if not needle:
        return []

    candidates = []
    for path in raw_paths:
        decoded = unquote(path)
        if not _looks_like_document(decoded):
            continue
        if needle in decoded.lower() or needle in identifier_for_path(decoded).lower():
            candidates.append(path)
    return candidates


def extract_date(path: str) -> Optional[str]:
    """Return the first ``YYYY/MM/DD`` substring of the decoded *path*, if any."""
    match = _DATE_RE.search(unquote(path))
    return match.group(0) if match else None


def _numeric_key(path: str) -> Tuple[int, int, int]:
    match = _DATE_RE.search(unquote(path))
    if match is None:
        return (-1, -1, -1)
    year, month, day = match.groups()
    return (int(year), int(month), int(day))


def select_latest(candidates: Sequence[str], date_order: str = "lexical") -> str:
    """Pick the most recent candidate by its embedded date.

    ``"lexical"`` compares the date substrings as strings, so an unpadded
    day (``2025/06/9``) outranks ``2025/06/10``.  ``"numeric"`` compares
    ``(year, month, day)`` integers instead.  Candidates without a date rank
    lowest; among equals the earliest candidate wins, so with no dates at
    all the first candidate is returned.
    """
    if not candidates:
        raise ValueError("select_latest() needs at least one candidate")
    if date_order not in DATE_ORDERS:
        raise ValueError(f"Unknown date order {date_order!r}")

    if date_order == "numeric":
        return max(candidates, key=_numeric_key)
    return max(candidates, key=lambda path: extract_date(path) or "")


def build_file_url(base_url: str, path: str) -> str:
    """Join a listing href onto the (slash-terminated) base URL.

    Absolute URLs are returned untouched, and server-absolute hrefs that
    already live under the base URL's path (IIS emits ``/vdir/file.txt``)
    are joined against the origin instead of being duplicated.
    """
    if urlsplit(path).scheme:
        return path
    base_path = urlsplit(base_url).path
    if path.startswith("/") and base_path != "/" and path.startswith(base_path):
        return urljoin(base_url, path)
    return base_url + (path[1:] if path.startswith("/") else path)


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def resolve(
    station: str,
    base_url: str,
    raw_paths: Sequence[str],
    *,
    client: httpx.Client | None = None,
    date_order: str | None = None,
) -> ResolvedDocument:
    """Fetch the most relevant file for *station*.

    Raises:
        NoMatchingFile: no raw path belongs to *station*.
        FileNotFound: the chosen file answered 404.
        MalformedUrl, NetworkError, FetchTimeout, HttpError: from the fetcher.
    """
    if not station or not station.strip():
        raise NoMatchingFile(station)

    base = normalise_base_url(base_url)
    candidates = find_candidates(station, raw_paths)
    logger.debug(
        "Found %d relevant files for station %r: %s", len(candidates), station, candidates
    )
    if not candidates:
        logger.warning("No relevant file path found for station %r", station)
        raise NoMatchingFile(station)

    chosen = select_latest(candidates, date_order or settings.date_order)
    url = build_file_url(base, chosen)
    logger.debug("Downloading content for %r from %s", station, url)

    content = fetch_text(url, client=client)
    logger.info("Downloaded %d characters for %r", len(content), station)
    return ResolvedDocument(station_name=station, source_url=url, content=content)
