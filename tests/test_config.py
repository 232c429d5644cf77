"""Tests for environment-driven settings."""

from __future__ import annotations

import pytest

from stationfeed.config import Settings


def test_defaults(monkeypatch):
    for var in ("STATIONFEED_BASE_URL", "STATIONFEED_DATE_ORDER", "REQUEST_TIMEOUT", "STATIONFEED_MAX_WORKERS"):
        monkeypatch.delenv(var, raising=False)

    s = Settings()
    assert s.base_url == ""
    assert s.date_order == "lexical"
    assert s.request_timeout == 30.0
    assert s.max_workers == 4


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("STATIONFEED_BASE_URL", "http://files.test/stations/")
    monkeypatch.setenv("STATIONFEED_DATE_ORDER", "numeric")
    monkeypatch.setenv("CONNECT_TIMEOUT", "2.5")

    s = Settings()
    assert s.base_url == "http://files.test/stations/"
    assert s.date_order == "numeric"
    assert s.connect_timeout == 2.5


def test_unknown_date_order_rejected(monkeypatch):
    monkeypatch.setenv("STATIONFEED_DATE_ORDER", "newest-first")
    with pytest.raises(ValueError):
        Settings()
