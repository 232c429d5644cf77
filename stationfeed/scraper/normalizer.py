"""Listing filter and station-name heuristics.

Everything here is pure string work with no I/O, so it can be exercised
directly against arbitrary anchor text.

A listing anchor becomes a station in three stages:

1. **Filter** (:func:`is_listing_candidate`): drop navigation and sorting
   links, keep text that looks like a ``.txt`` / ``.config`` file, a
   ``YYYY/MM/DD`` directory, or anything carrying a four-digit run.
2. **Derive** (:func:`derive_identifier`): cut the visible text down to the
   part before ``.txt`` (or the trailing ``/`` of a directory).
3. **Scrub** (:func:`normalize_station_name`): drop bare number tokens,
   dates, clock times and file sizes, then cap the result at
   :data:`~stationfeed.config.STATION_NAME_MAX_LEN` characters.
"""

from __future__ import annotations

import re
from typing import Iterable, List, Optional

from stationfeed.config import STATION_NAME_MAX_LEN
from stationfeed.scraper.models import ListingEntry, ListingResult

# ---------------------------------------------------------------------------
# Patterns
# ---------------------------------------------------------------------------
_NAVIGATION_HREFS = ("../", "./")
_SORT_MARKERS = ("?C=", "?M=", "?S=", "?D=")
_FILE_SUFFIXES = (".txt", ".config")

_DATE_DIR_RE = re.compile(r"\d{4}/\d{2}/\d{1,2}/?")
_YEAR_RUN_RE = re.compile(r"\d{4}")

_NUMBER_TOKEN_RE = re.compile(r"\d{2,4}")
_TIME_TOKEN_RE = re.compile(r"\d{1,2}:\d{2}(?:AM|PM)", re.IGNORECASE)

# Order matters: dates before times before sizes.
_NOISE_RES = [
    re.compile(r"\s*\d{4}/\d{2}/\d{1,2}\s*"),
    re.compile(r"\s*\d{4}-\d{2}-\d{1,2}\s*"),
    re.compile(r"\s*\d{1,2}:\d{2}\s*(?:AM|PM)\s*", re.IGNORECASE),
    re.compile(r"\s*\d+(?:\.\d+)?\s*(?:KB|MB|GB)\b\s*", re.IGNORECASE),
]

_IGNORED_NAMES = ("web.config",)


# ---------------------------------------------------------------------------
# Filter
# ---------------------------------------------------------------------------

def is_sort_link(href: str) -> bool:
    """Return ``True`` for IIS column-sorting links (``?C=N;O=D`` and friends)."""
    return any(marker in href for marker in _SORT_MARKERS)


def is_listing_candidate(entry: ListingEntry) -> bool:
    """Return ``True`` if *entry* looks like a file or dated record."""
    if entry.href in _NAVIGATION_HREFS or is_sort_link(entry.href):
        return False

    text = entry.text
    if text.lower().endswith(_FILE_SUFFIXES):
        return True
    if _DATE_DIR_RE.fullmatch(text):
        return True
    return _YEAR_RUN_RE.search(text) is not None


# ---------------------------------------------------------------------------
# Derive / scrub
# ---------------------------------------------------------------------------

def derive_identifier(text: str) -> str:
    """Return the part of an anchor's text that names the station.

    ``"station 1 2025/06/01.txt"`` → ``"station 1 2025/06/01"``,
    ``"archive/"`` → ``"archive"``.
    """
    cut = text.lower().rfind(".txt")
    if cut != -1:
        return text[:cut].strip()
    if text.endswith("/"):
        return text[:-1].strip()
    return text.strip()


def strip_date_tokens(identifier: str) -> str:
    """Drop whitespace-separated tokens that are bare 2-4 digit numbers or clock times."""
    kept = [
        token
        for token in identifier.split()
        if not _NUMBER_TOKEN_RE.fullmatch(token) and not _TIME_TOKEN_RE.fullmatch(token)
    ]
    return " ".join(kept)


def _strip_noise(text: str) -> str:
    for pattern in _NOISE_RES:
        text = pattern.sub(" ", text).strip()
    return " ".join(text.split())


def _scrub(text: str) -> str:
    # A removal can splice two fragments into a new date or leave a bare
    # number behind, so repeat until nothing changes.  Every pass is
    # non-lengthening, so this terminates.
    current = " ".join(text.split())
    while True:
        cleaned = _strip_noise(strip_date_tokens(current))
        if cleaned == current:
            return cleaned
        current = cleaned


def normalize_station_name(text: str) -> Optional[str]:
    """Turn an anchor's visible text into a canonical station name.

    Returns ``None`` when nothing usable is left (empty, or the IIS
    ``web.config`` file).
    """
    name = _scrub(derive_identifier(text))
    if not name or name.lower() in _IGNORED_NAMES:
        return None

    # Cutting mid-token can expose a bare number, so scrub the cut again.
    name = _scrub(name[:STATION_NAME_MAX_LEN])
    if not name or name.lower() in _IGNORED_NAMES:
        return None
    return name


def identifier_for_path(path: str) -> str:
    """Scrubbed identifier for a (decoded) path, without the length cap."""
    return _scrub(derive_identifier(path))


# ---------------------------------------------------------------------------
# Whole page
# ---------------------------------------------------------------------------

def filter_listing(entries: Iterable[ListingEntry]) -> ListingResult:
    """Apply filter + normaliser to a whole listing page.

    ``raw_paths`` keeps every accepted href in page order; station names are
    deduplicated exactly (case-sensitive) and sorted by code point.
    """
    raw_paths: List[str] = []
    stations: set[str] = set()

    for entry in entries:
        if not is_listing_candidate(entry):
            continue
        raw_paths.append(entry.href)
        name = normalize_station_name(entry.text)
        if name is not None:
            stations.add(name)

    return ListingResult(station_names=sorted(stations), raw_paths=raw_paths)
