"""Centralised settings for stationfeed.

All runtime configuration is resolved here in one place.  Values can be
overridden via environment variables or a `.env` file in the project root
(loaded automatically when this module is imported).
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

# Load .env from the project root (one level up from this package)
_env_path = Path(__file__).resolve().parent.parent / ".env"
load_dotenv(_env_path, override=False)

# Station names are capped to this many characters before deduplication.
STATION_NAME_MAX_LEN = 20

DATE_ORDERS = ("lexical", "numeric")


@dataclass
class Settings:
    # ------------------------------------------------------------------
    # Directory listing source
    # ------------------------------------------------------------------
    base_url: str = field(
        default_factory=lambda: os.environ.get("STATIONFEED_BASE_URL", "")
    )

    # ------------------------------------------------------------------
    # HTTP
    # ------------------------------------------------------------------
    request_timeout: float = field(
        default_factory=lambda: float(os.environ.get("REQUEST_TIMEOUT", "30.0"))
    )
    connect_timeout: float = field(
        default_factory=lambda: float(os.environ.get("CONNECT_TIMEOUT", "10.0"))
    )
    user_agent: str = field(
        default_factory=lambda: os.environ.get(
            "STATIONFEED_USER_AGENT", "stationfeed/0.1 (+directory-listing reader)"
        )
    )

    # ------------------------------------------------------------------
    # Resolution
    # ------------------------------------------------------------------
    date_order: str = field(
        default_factory=lambda: os.environ.get("STATIONFEED_DATE_ORDER", "lexical")
    )

    # ------------------------------------------------------------------
    # Background work / logging
    # ------------------------------------------------------------------
    max_workers: int = field(
        default_factory=lambda: int(os.environ.get("STATIONFEED_MAX_WORKERS", "4"))
    )
    log_level: str = field(
        default_factory=lambda: os.environ.get("LOG_LEVEL", "WARNING")
    )

    def __post_init__(self) -> None:
        if self.date_order not in DATE_ORDERS:
            raise ValueError(
                f"STATIONFEED_DATE_ORDER must be one of {DATE_ORDERS}, "
                f"got {self.date_order!r}"
            )


# Module-level singleton — import this everywhere:
#   from stationfeed.config import settings
settings = Settings()
