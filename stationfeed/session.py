"""Session state shared between discovery and resolution.

A :class:`StationSession` holds the configured base URL plus the result of
the last successful discovery as one immutable :class:`SessionState`
snapshot.  Snapshots are swapped whole under a lock, so readers never see a
station list paired with another run's raw paths.

Concurrency contract
--------------------
Discoveries and resolutions may overlap freely; nothing is queued or
cancelled.  When two discoveries overlap, the one that *completes* last
wins.  A discovery that completes after :meth:`StationSession.set_base_url`
changed the configuration is dropped instead of resurrecting the old URL's
stations.  Callers that need strict ordering should wait on each call (or
its ``Future``) before issuing the next.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

from stationfeed import discovery, resolution
from stationfeed.config import settings
from stationfeed.errors import ConfigurationError, EmptyResult, StationFeedError
from stationfeed.scraper.fetcher import normalise_base_url
from stationfeed.scraper.models import ListingResult, ResolvedDocument

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionState:
    base_url: str = ""
    raw_paths: Tuple[str, ...] = ()
    station_names: Tuple[str, ...] = ()
    discovered: bool = False


@dataclass(frozen=True)
class StatusMessage:
    """Last failure reported to the user (``kind`` mirrors the exception's)."""

    kind: str
    message: str


class StationSession:
    """Discovery/resolution front-end for one configured listing URL."""

    def __init__(self, base_url: str | None = None, *, max_workers: int | None = None) -> None:
        self._lock = threading.Lock()
        self._state = SessionState()
        self._generation = 0
        self._busy = 0
        self._status: Optional[StatusMessage] = None
        self._max_workers = max_workers or settings.max_workers
        self._executor: Optional[ThreadPoolExecutor] = None
        if base_url:
            self.set_base_url(base_url)

    # ------------------------------------------------------------------
    # Observable state
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        with self._lock:
            return self._state

    @property
    def base_url(self) -> str:
        return self.state.base_url

    @property
    def station_names(self) -> List[str]:
        return list(self.state.station_names)

    @property
    def is_loading(self) -> bool:
        with self._lock:
            return self._busy > 0

    @property
    def status(self) -> Optional[StatusMessage]:
        with self._lock:
            return self._status

    # ------------------------------------------------------------------
    # Configuration
    # ------------------------------------------------------------------
    def set_base_url(self, url: str | None) -> str:
        """Replace the base URL and forget everything discovered so far.

        An empty *url* leaves the session unconfigured.

        Raises:
            MalformedUrl: *url* is not an absolute http(s) URL; the previous
                configuration is kept.
        """
        base = ""
        if url and url.strip():
            try:
                base = normalise_base_url(url)
            except StationFeedError as exc:
                self._report(exc)
                raise

        with self._lock:
            self._generation += 1
            self._state = SessionState(base_url=base)
            self._status = None
        logger.debug("Base URL set to: %r", base)
        return base

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def discover(self) -> List[str]:
        """Run discovery against the configured URL and publish the result.

        On failure the previously published stations stay in place, except
        for :class:`EmptyResult`, which publishes the (empty) outcome.
        """
        with self._busy_scope():
            with self._lock:
                base = self._state.base_url
                generation = self._generation
                self._status = None

            try:
                if not base:
                    raise ConfigurationError()
                result = discovery.discover(base)
            except EmptyResult as exc:
                self._publish(generation, base, exc.result or ListingResult())
                self._report(exc)
                raise
            except StationFeedError as exc:
                self._report(exc)
                raise

            self._publish(generation, base, result)
            return list(result.station_names)

    def resolve(self, station: str) -> ResolvedDocument:
        """Fetch the newest file for *station* from the current snapshot."""
        with self._busy_scope():
            with self._lock:
                state = self._state
                self._status = None
            try:
                if not state.base_url:
                    raise ConfigurationError()
                return resolution.resolve(station, state.base_url, state.raw_paths)
            except StationFeedError as exc:
                self._report(exc)
                raise

    def candidates(self, station: str) -> Tuple[List[str], Optional[str]]:
        """Return ``(candidates, chosen)`` for *station* without fetching anything."""
        found = resolution.find_candidates(station, self.state.raw_paths)
        chosen = resolution.select_latest(found, settings.date_order) if found else None
        return found, chosen

    def submit_discover(self) -> "Future[List[str]]":
        """Run :meth:`discover` on the session's worker pool."""
        return self._pool().submit(self.discover)

    def submit_resolve(self, station: str) -> "Future[ResolvedDocument]":
        """Run :meth:`resolve` on the session's worker pool."""
        return self._pool().submit(self.resolve, station)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def close(self) -> None:
        with self._lock:
            executor, self._executor = self._executor, None
        if executor is not None:
            executor.shutdown(wait=True)

    def __enter__(self) -> "StationSession":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _pool(self) -> ThreadPoolExecutor:
        with self._lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="stationfeed"
                )
            return self._executor

    @contextmanager
    def _busy_scope(self) -> Iterator[None]:
        with self._lock:
            self._busy += 1
        try:
            yield
        finally:
            with self._lock:
                self._busy -= 1

    def _publish(self, generation: int, base: str, result: ListingResult) -> None:
        with self._lock:
            if generation != self._generation:
                logger.warning(
                    "Dropping discovery of %s: base URL changed while it was running", base
                )
                return
            self._state = SessionState(
                base_url=base,
                raw_paths=tuple(result.raw_paths),
                station_names=tuple(result.station_names),
                discovered=True,
            )

    def _report(self, exc: StationFeedError) -> None:
        with self._lock:
            self._status = StatusMessage(kind=exc.kind, message=exc.message)
