"""stationfeed — station catalogue for plain file-server directory listings."""

from stationfeed.discovery import discover
from stationfeed.resolution import resolve
from stationfeed.session import SessionState, StationSession, StatusMessage

__all__ = ["discover", "resolve", "StationSession", "SessionState", "StatusMessage"]
