"""stationfeed CLI — entry-point for discovery and resolution.

Usage:
    python cli/main.py --help

Commands:
    stations    → list the stations found in the directory listing
    candidates  → show which files a station maps to (no download)
    show        → download and print the newest file for a station
"""

from __future__ import annotations

import sys
from pathlib import Path

# Ensure the project root is on sys.path so that `from stationfeed.xxx import
# ...` works when the CLI is invoked as `python cli/main.py` from any
# working directory.
_ROOT = Path(__file__).resolve().parent.parent
if str(_ROOT) not in sys.path:
    sys.path.insert(0, str(_ROOT))

import logging
from typing import Optional

import typer

from stationfeed.config import settings
from stationfeed.errors import StationFeedError
from stationfeed.session import StationSession

app = typer.Typer(
    name="stationfeed",
    help="Browse stations published through a file-server directory listing.",
    no_args_is_help=True,
)


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug output to stderr."),
) -> None:
    """Configure logging before any command runs."""
    level = logging.DEBUG if verbose else getattr(logging, settings.log_level.upper(), logging.WARNING)
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _discovered_session(tag: str, url: Optional[str]) -> StationSession:
    """Return a session that has completed discovery, or exit 1 with the reason."""
    session = StationSession()
    try:
        session.set_base_url(url or settings.base_url)
        typer.echo(f"[{tag}] Fetching listing from {session.base_url or '(unset)'} …")
        session.discover()
    except StationFeedError as exc:
        session.close()
        typer.echo(f"❌ {exc.message}")
        raise typer.Exit(code=1)
    return session


# ---------------------------------------------------------------------------
# Commands
# ---------------------------------------------------------------------------

@app.command("stations")
def stations(
    url: Optional[str] = typer.Option(None, "--url", help="Directory-listing URL (defaults to STATIONFEED_BASE_URL)."),
) -> None:
    """List every station found in the directory listing."""
    with _discovered_session("stations", url) as session:
        names = session.station_names
        typer.echo(f"[stations] {len(names)} station(s):")
        for name in names:
            typer.echo(f"  {name}")


@app.command("candidates")
def candidates(
    station: str = typer.Argument(..., help="Station name as printed by `stations`."),
    url: Optional[str] = typer.Option(None, "--url", help="Directory-listing URL (defaults to STATIONFEED_BASE_URL)."),
) -> None:
    """Show the files that belong to STATION and the one `show` would pick."""
    with _discovered_session("candidates", url) as session:
        found, chosen = session.candidates(station)
        if not found:
            typer.echo(f"[candidates] No files match {station!r}.")
            raise typer.Exit(code=1)
        for path in found:
            marker = "*" if path == chosen else " "
            typer.echo(f" {marker} {path}")


@app.command("show")
def show(
    station: str = typer.Argument(..., help="Station name as printed by `stations`."),
    url: Optional[str] = typer.Option(None, "--url", help="Directory-listing URL (defaults to STATIONFEED_BASE_URL)."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the text here instead of stdout."),
) -> None:
    """Download the newest file for STATION and print it."""
    with _discovered_session("show", url) as session:
        try:
            doc = session.resolve(station)
        except StationFeedError as exc:
            typer.echo(f"❌ {exc.message}")
            raise typer.Exit(code=1)

        typer.echo(f"[show] {doc.source_url} ({len(doc.content)} chars)")
        if output is not None:
            output.write_text(doc.content, encoding="utf-8")
            typer.echo(f"[show] Written to {output}")
        else:
            typer.echo("")
            typer.echo(doc.content)


# ---------------------------------------------------------------------------
# Entry-point
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    app()
