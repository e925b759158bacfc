"""Failure taxonomy for clan lookups and favorite writes.

Every failure carries a string ``code``. Remote failures use the HTTP status
as their code ("400", "404", ...); local failures use symbolic codes. The GUI
maps codes to user-facing messages, so the code is the only thing callers
need to inspect.
"""

from __future__ import annotations

__all__ = [
    "NO_CONNECTION",
    "UNKNOWN",
    "FAVORITE_WRITE_FAILED",
    "LookupFailure",
    "NoConnection",
    "ClientError",
    "UnknownError",
    "FavoriteWriteError",
]

NO_CONNECTION = "NO_CONNECTION"
UNKNOWN = "UNKNOWN"
FAVORITE_WRITE_FAILED = "FAVORITE_WRITE_FAILED"


class LookupFailure(RuntimeError):
    """Base class for recoverable failures surfaced as an error banner."""

    code: str = UNKNOWN

    def __init__(self, message: str | None = None, *, code: str | None = None) -> None:
        if code is not None:
            self.code = code
        super().__init__(message or self.code)


class NoConnection(LookupFailure):
    code = NO_CONNECTION


class ClientError(LookupFailure):
    """Categorized failure reported by the clan directory (status code)."""

    def __init__(self, code: str | int, message: str | None = None) -> None:
        super().__init__(message, code=str(code))


class UnknownError(LookupFailure):
    code = UNKNOWN


class FavoriteWriteError(LookupFailure):
    code = FAVORITE_WRITE_FAILED
