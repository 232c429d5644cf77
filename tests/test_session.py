"""Tests for StationSession: snapshot publishing, status channel and overlap.

Network-level tests use ``respx``; the overlap tests swap the discovery
engine for a controllable fake so ordering is deterministic.
"""

from __future__ import annotations

import threading
from urllib.parse import quote

import httpx
import pytest
import respx

from stationfeed.errors import (
    ConfigurationError,
    EmptyResult,
    HttpError,
    MalformedUrl,
    NetworkError,
    NoMatchingFile,
)
from stationfeed.scraper.models import ListingResult
from stationfeed.session import SessionState, StationSession, StatusMessage

_BASE = "http://files.test/stations/"


def _listing(*texts: str) -> str:
    links = "<br>".join(f'<a href="{quote(t)}">{t}</a>' for t in texts)
    return f"<html><body><pre>{links}</pre></body></html>"


_REFERENCE = _listing(
    "../", "web.config", "station 1 2025/06/01.txt", "station 1 2025/06/09.txt", "station 2.txt"
)


@pytest.fixture()
def session():
    with StationSession(_BASE) as s:
        yield s


# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

class TestConfiguration:
    def test_new_session_is_empty(self) -> None:
        with StationSession() as s:
            assert s.state == SessionState()
            assert s.station_names == []
            assert s.is_loading is False
            assert s.status is None

    def test_base_url_is_normalised(self) -> None:
        with StationSession("  http://files.test/stations ") as s:
            assert s.base_url == _BASE

    def test_changing_base_url_clears_stations(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            session.discover()

        session.set_base_url("http://other.test/")
        assert session.state == SessionState(base_url="http://other.test/")

    def test_malformed_url_keeps_previous_config(self, session) -> None:
        with pytest.raises(MalformedUrl):
            session.set_base_url("nonsense")

        assert session.base_url == _BASE
        assert session.status.kind == "malformed_url"

    def test_unconfigured_discover(self) -> None:
        with StationSession() as s:
            with pytest.raises(ConfigurationError):
                s.discover()
            assert s.status.kind == "configuration"
            assert s.is_loading is False


# ---------------------------------------------------------------------------
# Discovery / resolution through the session
# ---------------------------------------------------------------------------

class TestDiscoverAndResolve:
    def test_reference_scenario(self, session) -> None:
        url = "http://files.test/stations/station%201%202025/06/09.txt"
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            respx.get(url).mock(return_value=httpx.Response(200, text="latest"))

            assert session.discover() == ["station 1", "station 2"]
            doc = session.resolve("station 1")

        assert doc.source_url == url
        assert doc.content == "latest"
        assert session.status is None
        assert session.state.discovered is True

    def test_empty_listing_publishes_empty_list(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            session.discover()
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text="<html></html>"))
            with pytest.raises(EmptyResult):
                session.discover()

        assert session.station_names == []
        assert session.status == StatusMessage(
            kind="empty_result",
            message="No relevant files found in directory listing. Check URL and file naming.",
        )

    def test_redirect_loop_is_reported_as_network_failure(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(
                return_value=httpx.Response(302, headers={"Location": _BASE})
            )
            with pytest.raises(NetworkError):
                session.discover()

        assert session.status.kind == "network"
        assert session.is_loading is False

    def test_missing_listing_reports_http_kind(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(404))
            with pytest.raises(HttpError):
                session.discover()

        assert session.status == StatusMessage(
            kind="http", message="Failed to fetch directory listing: HTTP 404"
        )

    def test_first_failure_leaves_list_empty(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(side_effect=httpx.ConnectError("down"))
            with pytest.raises(NetworkError):
                session.discover()

        assert session.station_names == []
        assert session.status.kind == "network"

    def test_repeat_failure_keeps_previous_list(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            session.discover()
        with respx.mock:
            respx.get(_BASE).mock(side_effect=httpx.ConnectError("down"))
            with pytest.raises(NetworkError):
                session.discover()

        assert session.station_names == ["station 1", "station 2"]
        assert len(session.state.raw_paths) == 4

    def test_successful_call_clears_previous_error(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(side_effect=httpx.ConnectError("down"))
            with pytest.raises(NetworkError):
                session.discover()
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            session.discover()

        assert session.status is None

    def test_resolve_before_discovery_finds_nothing(self, session) -> None:
        with pytest.raises(NoMatchingFile):
            session.resolve("station 1")
        assert session.status.kind == "no_matching_file"

    def test_candidates(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            session.discover()

        found, chosen = session.candidates("station 1")
        assert found == ["station%201%202025/06/01.txt", "station%201%202025/06/09.txt"]
        assert chosen == "station%201%202025/06/09.txt"
        assert session.candidates("nowhere") == ([], None)


# ---------------------------------------------------------------------------
# Background work and overlapping calls
# ---------------------------------------------------------------------------

class _BlockingDiscover:
    """Fake ``discovery.discover``: the first call blocks until released."""

    def __init__(self) -> None:
        self.started = threading.Event()
        self.release = threading.Event()
        self.calls = 0
        self._lock = threading.Lock()

    def __call__(self, base_url, *, client=None):
        with self._lock:
            self.calls += 1
            call = self.calls
        if call == 1:
            self.started.set()
            assert self.release.wait(timeout=5)
            return ListingResult(station_names=["old"], raw_paths=["old.txt"])
        return ListingResult(station_names=["new"], raw_paths=["new.txt"])


class TestBackgroundWork:
    def test_submit_discover_returns_future(self, session) -> None:
        with respx.mock:
            respx.get(_BASE).mock(return_value=httpx.Response(200, text=_REFERENCE))
            future = session.submit_discover()
            assert future.result(timeout=5) == ["station 1", "station 2"]

    def test_submit_resolve_propagates_failure(self, session) -> None:
        future = session.submit_resolve("station 1")
        with pytest.raises(NoMatchingFile):
            future.result(timeout=5)
        assert session.is_loading is False

    def test_loading_flag_tracks_running_work(self, session, monkeypatch) -> None:
        fake = _BlockingDiscover()
        monkeypatch.setattr("stationfeed.session.discovery.discover", fake)

        future = session.submit_discover()
        assert fake.started.wait(timeout=5)
        assert session.is_loading is True

        fake.release.set()
        future.result(timeout=5)
        assert session.is_loading is False

    def test_last_completed_discovery_wins(self, session, monkeypatch) -> None:
        fake = _BlockingDiscover()
        monkeypatch.setattr("stationfeed.session.discovery.discover", fake)

        slow = session.submit_discover()
        assert fake.started.wait(timeout=5)
        assert session.discover() == ["new"]
        assert session.station_names == ["new"]

        fake.release.set()
        assert slow.result(timeout=5) == ["old"]
        assert session.state.station_names == ("old",)
        assert session.state.raw_paths == ("old.txt",)

    def test_discovery_for_replaced_base_url_is_dropped(self, session, monkeypatch) -> None:
        fake = _BlockingDiscover()
        monkeypatch.setattr("stationfeed.session.discovery.discover", fake)

        slow = session.submit_discover()
        assert fake.started.wait(timeout=5)
        session.set_base_url("http://other.test/")

        fake.release.set()
        slow.result(timeout=5)
        assert session.state == SessionState(base_url="http://other.test/")
