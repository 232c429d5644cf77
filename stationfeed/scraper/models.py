"""Data models for the listing / resolution pipeline."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True)
class ListingEntry:
    """One anchor of a directory-listing page."""

    href: str
    text: str


@dataclass
class ListingResult:
    """Outcome of filtering one listing page.

    ``station_names`` is sorted and unique; ``raw_paths`` keeps the hrefs of
    every accepted anchor in page order (duplicates allowed).
    """

    station_names: List[str] = field(default_factory=list)
    raw_paths: List[str] = field(default_factory=list)


@dataclass
class ResolvedDocument:
    """The text of the file chosen for a station."""

    station_name: str
    source_url: str
    content: str
