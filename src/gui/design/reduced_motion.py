"""Reduced motion preference.

Single source of truth for whether animations (error banner fade, loader
sweep) should be skipped, e.g. for users who prefer reduced motion or for
headless test runs.

- Environment variable bootstrap: ``CLANCHECK_PREFER_REDUCED_MOTION=1`` (or
  "true"/"yes"/"on") enables reduced motion at import time.
- ``adjust_duration(ms)`` returns ``minimum_ms`` when reduced, else ``ms``.
"""

from __future__ import annotations

import os
import contextlib
from typing import Iterator

__all__ = [
    "set_reduced_motion",
    "is_reduced_motion",
    "adjust_duration",
    "temporarily_reduced_motion",
]

_reduced_motion_enabled: bool = (
    os.getenv("CLANCHECK_PREFER_REDUCED_MOTION", "").strip().lower() in {"1", "true", "yes", "on"}
)


def set_reduced_motion(enabled: bool) -> None:
    global _reduced_motion_enabled
    _reduced_motion_enabled = bool(enabled)


def is_reduced_motion() -> bool:
    return _reduced_motion_enabled


def adjust_duration(ms: int, minimum_ms: int = 0) -> int:
    """Animation duration honoring the preference; negatives clamp to 0."""
    minimum_ms = max(0, minimum_ms)
    return minimum_ms if _reduced_motion_enabled else max(0, ms)


@contextlib.contextmanager
def temporarily_reduced_motion(force: bool = True) -> Iterator[None]:
    """Override the preference within a block, restoring it afterwards."""
    prev = _reduced_motion_enabled
    try:
        set_reduced_motion(force)
        yield
    finally:
        set_reduced_motion(prev)
