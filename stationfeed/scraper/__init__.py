"""Scraper package — listing fetch, parsing & station-name heuristics."""

from stationfeed.scraper.fetcher import fetch_listing, fetch_text, normalise_base_url
from stationfeed.scraper.listing import parse_listing
from stationfeed.scraper.models import ListingEntry, ListingResult, ResolvedDocument
from stationfeed.scraper.normalizer import filter_listing, normalize_station_name

__all__ = [
    "fetch_listing",
    "fetch_text",
    "normalise_base_url",
    "parse_listing",
    "filter_listing",
    "normalize_station_name",
    "ListingEntry",
    "ListingResult",
    "ResolvedDocument",
]
