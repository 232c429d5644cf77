"""Directory-listing HTML → :class:`ListingEntry` sequence.

File servers rarely emit valid markup (IIS puts bare ``<a>`` tags inside a
``<pre>`` block separated by ``<br>``), so parsing goes through
BeautifulSoup's forgiving ``html.parser`` backend.
"""

from __future__ import annotations

from typing import List

from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup

from stationfeed.errors import ParseError
from stationfeed.scraper.models import ListingEntry


def _visible_text(tag) -> str:  # type: ignore[no-untyped-def]
    return " ".join(tag.get_text(separator=" ").split())


def parse_listing(html: str) -> List[ListingEntry]:
    """Return every ``(href, visible text)`` pair of the listing.

    Anchors inside ``<pre>`` win; pages without one (Apache tables, custom
    indexes) fall back to every ``a[href]`` in the document.

    Raises:
        ParseError: the parser rejected the markup outright.
    """
    if not html or not html.strip():
        return []
    try:
        soup = BeautifulSoup(html, "html.parser")
    except ParserRejectedMarkup as exc:
        raise ParseError(f"Unsupported listing markup: {exc}") from exc

    anchors = soup.select("pre a[href]") or soup.select("a[href]")
    return [ListingEntry(href=a["href"], text=_visible_text(a)) for a in anchors]
