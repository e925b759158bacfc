"""Session log.

Keeps the most recent log records of the running process in memory. When
the application shuts down, ``shutdown_app`` writes the WARNING-and-above
part of it to ``<data_dir>/session-log.jsonl`` so failed lookups and store
errors can be attached to a bug report after the window is gone.

No Qt import here; the CLI and headless tests use it as is.
"""

from __future__ import annotations

import json
import logging
from collections import deque
from dataclasses import asdict, dataclass
from pathlib import Path
from threading import Lock
from typing import Deque, List, Optional

from .service_locator import services

__all__ = [
    "LogEntry",
    "LoggingService",
    "get_logging_service",
    "configure_logging",
]

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"


@dataclass(frozen=True)
class LogEntry:
    level: str
    levelno: int
    name: str
    message: str
    created: float


class _CaptureHandler(logging.Handler):
    def __init__(self, sink: "LoggingService") -> None:
        super().__init__(logging.DEBUG)
        self._sink = sink

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self._sink.capture(record)
        except Exception:  # noqa: BLE001 - logging must never raise into callers
            self.handleError(record)


class LoggingService:
    """Bounded in-memory copy of the root logger's output."""

    def __init__(self, capacity: int = 500) -> None:
        self._lock = Lock()
        self._entries: Deque[LogEntry] = deque(maxlen=capacity)
        self._handler = _CaptureHandler(self)
        self.attached = False

    def attach_root(self) -> None:
        if self.attached:
            return
        root = logging.getLogger()
        root.addHandler(self._handler)
        if root.level > logging.DEBUG:
            root.setLevel(logging.DEBUG)
        self.attached = True

    def detach_root(self) -> None:
        if self.attached:
            logging.getLogger().removeHandler(self._handler)
            self.attached = False

    def capture(self, record: logging.LogRecord) -> None:
        entry = LogEntry(
            level=record.levelname,
            levelno=record.levelno,
            name=record.name,
            message=record.getMessage(),
            created=record.created,
        )
        with self._lock:
            self._entries.append(entry)

    def recent(self, limit: Optional[int] = None) -> List[LogEntry]:
        with self._lock:
            data = list(self._entries)
        return data[-limit:] if limit is not None else data

    def filter(
        self, *, min_level: int | str = logging.NOTSET, name_contains: str | None = None
    ) -> List[LogEntry]:
        """Entries at or above ``min_level`` whose logger name contains ``name_contains``."""
        threshold = _level_number(min_level)
        return [
            e
            for e in self.recent()
            if e.levelno >= threshold and (not name_contains or name_contains in e.name)
        ]

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def export_jsonl(self, path: str | Path, *, min_level: int | str = logging.NOTSET) -> int:
        """Write matching entries as JSON Lines; returns the number written.

        Nothing is written (and no file created) when no entry matches.
        """
        entries = self.filter(min_level=min_level)
        if not entries:
            return 0
        with open(path, "w", encoding="utf-8") as f:
            for e in entries:
                f.write(json.dumps(asdict(e), sort_keys=True) + "\n")
        return len(entries)


def _level_number(level: int | str) -> int:
    if isinstance(level, int):
        return level
    number = logging.getLevelName(level.upper())
    if not isinstance(number, int):
        raise ValueError(f"Unknown log level: {level}")
    return number


def configure_logging(level: int | str = logging.INFO) -> None:
    """Console logging for interactive runs (idempotent).

    ``level`` accepts a number or a level name such as ``"WARNING"``.
    """
    root = logging.getLogger()
    if any(type(h) is logging.StreamHandler for h in root.handlers):
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.setLevel(_level_number(level))
    root.addHandler(handler)
    if root.getEffectiveLevel() > handler.level:
        root.setLevel(handler.level)


def get_logging_service() -> LoggingService:
    return services.get_typed("logging_service", LoggingService)
