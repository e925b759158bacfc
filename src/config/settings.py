"""Global configuration and constants for the clan lookup client."""

from __future__ import annotations

import os
from typing import Final, Tuple
from urllib.parse import urlsplit

API_BASE_URL: Final = os.environ.get("CLANCHECK_API_BASE_URL", "https://api.clashofclans.com/v1")
API_TOKEN: Final = os.environ.get("CLANCHECK_API_TOKEN", "")
DEFAULT_USER_AGENT: Final = "ClanCheck/0.1 (+https://github.com/clancheck)"
DEFAULT_TIMEOUT: Final = float(os.environ.get("CLANCHECK_TIMEOUT", "15"))  # seconds


def host_and_port(url: str) -> Tuple[str, int]:
    """Host and TCP port a URL connects to (scheme default when no port is given)."""
    parts = urlsplit(url)
    if not parts.hostname:
        raise ValueError(f"No host in URL: {url!r}")
    return parts.hostname, parts.port or (80 if parts.scheme == "http" else 443)


_API_HOST, _API_PORT = host_and_port(API_BASE_URL)

# Connectivity probe target; plain TCP connect, no payload exchanged
CONNECTIVITY_HOST: Final = os.environ.get("CLANCHECK_CONNECTIVITY_HOST", _API_HOST)
CONNECTIVITY_PORT: Final = int(os.environ.get("CLANCHECK_CONNECTIVITY_PORT", _API_PORT))
CONNECTIVITY_TIMEOUT: Final = 3.0

DATA_DIR: Final = os.environ.get("CLANCHECK_DATA_DIR", "data")
DB_FILENAME: Final = "clancheck.sqlite"
SESSION_LOG_FILENAME: Final = "session-log.jsonl"  # WARNING+ records, written at shutdown

# Error banner timing (milliseconds)
TOAST_TIMEOUT_MS: Final = 3000
TOAST_FADE_MS: Final = 500
