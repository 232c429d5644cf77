"""Failure taxonomy shared by discovery and resolution.

Every failure carries a machine-readable ``kind`` and a human-readable
message (``str(exc)``) so callers can drive both logic and a status line
from the same object.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from stationfeed.scraper.models import ListingResult


class StationFeedError(Exception):
    """Base class for every failure raised by stationfeed."""

    kind = "error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(StationFeedError):
    """No base URL has been configured."""

    kind = "configuration"

    def __init__(self, message: str = "Base URL is not set. Configure STATIONFEED_BASE_URL.") -> None:
        super().__init__(message)


class MalformedUrl(StationFeedError):
    kind = "malformed_url"

    def __init__(self, url: str, reason: str = "") -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Invalid URL format {url!r}{detail}")
        self.url = url


class NetworkError(StationFeedError):
    """Connectivity failure (DNS, refused connection, reset, ...)."""

    kind = "network"


class FetchTimeout(NetworkError):
    kind = "timeout"


class HttpError(StationFeedError):
    """The server answered with a non-200 status."""

    kind = "http"

    def __init__(self, status: int, url: str, message: str | None = None) -> None:
        super().__init__(message or f"Request to {url} failed: HTTP {status}")
        self.status = status
        self.url = url


class FileNotFound(HttpError):
    kind = "file_not_found"

    def __init__(self, url: str) -> None:
        super().__init__(404, url, f"File not found at {url}. HTTP 404.")


class EmptyResult(StationFeedError):
    """The listing parsed fine but nothing in it looked like a station.

    ``result`` keeps whatever raw paths survived filtering (e.g. a lone
    ``web.config``) so callers can still publish them.
    """

    kind = "empty_result"

    def __init__(
        self,
        result: ListingResult | None = None,
        message: str = "No relevant files found in directory listing. Check URL and file naming.",
    ) -> None:
        super().__init__(message)
        self.result = result


class NoMatchingFile(StationFeedError):
    kind = "no_matching_file"

    def __init__(self, station: str) -> None:
        super().__init__(
            f"No relevant file path found in listing for station: {station!r}. "
            "Check file naming on server."
        )
        self.station = station


class ParseError(StationFeedError):
    """Markup could not be interpreted as a listing."""

    kind = "parse"
