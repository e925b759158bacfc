"""Application bootstrap utilities for the ClanCheck GUI.

Responsibilities:
 - Optional headless bootstrap (for tests / CLI without a display)
 - Opening the SQLite favorites database and applying the schema
 - Registering core services (event bus, logging, store, client, probe)
 - Providing a single returned context object with references
 - Best-effort single-instance guard for interactive launches

The bootstrap avoids importing PyQt6 at module import time so the CLI and
unit tests can run in environments without a GUI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
import atexit
import logging
import os
import sqlite3
import sys
import tempfile
import time
from contextlib import contextmanager
from typing import Any, Iterator, Optional

import psutil

from config import settings
from core.connectivity import ConnectivityProbe
from core.http_client import ClanDirectoryClient
from db.schema import apply_schema
from gui.app.config_store import AppConfig, load_config, save_config
from gui.repositories.sqlite_impl import SqliteFavoritesStore
from gui.services.event_bus import EventBus, GUIEvent
from gui.services.logging_service import LoggingService
from gui.services.service_locator import services, ServiceLocator

try:  # Lazy / optional Qt import
    from PyQt6.QtWidgets import QApplication  # type: ignore

    _QT_AVAILABLE = True
except ImportError:
    QApplication = None  # type: ignore
    _QT_AVAILABLE = False

log = logging.getLogger(__name__)


@dataclass
class AppContext:
    """Container with references created during bootstrap.

    Attributes
    ----------
    qt_app: The underlying QApplication instance (None if headless or Qt missing)
    headless: Whether headless bootstrap was used
    data_dir: Directory holding the database and persisted app state
    services: Global service locator (post-initialization state)
    app_config: Persisted UI state loaded from ``data_dir``
    duration_s: Total elapsed seconds for bootstrap
    metadata: Free-form dict for diagnostics
    """

    qt_app: Optional[Any]
    headless: bool
    data_dir: str
    services: ServiceLocator
    app_config: AppConfig
    duration_s: float
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def favorites_store(self) -> SqliteFavoritesStore:
        return self.services.get_typed("favorites_store", SqliteFavoritesStore)


def open_database(data_dir: str, *, db_path: str | None = None) -> sqlite3.Connection:
    """Open (creating if needed) the favorites database and apply the schema."""
    path = db_path or os.path.join(data_dir, settings.DB_FILENAME)
    if path != ":memory:":
        os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)
    # Shared with background worker threads; the store serializes access
    conn = sqlite3.connect(path, check_same_thread=False)
    apply_schema(conn)
    log.debug("Favorites database ready at %s", path)
    return conn


def create_app(
    *,
    headless: bool | None = None,
    data_dir: str | None = None,
    db_path: str | None = None,
    client: Any | None = None,
    probe: Any | None = None,
    attach_logging: bool = True,
) -> AppContext:
    """Create and initialize the application context.

    Parameters
    ----------
    headless: Force headless (no QApplication). If None, inferred by Qt availability.
    data_dir: Directory for the database and app state (defaults to settings.DATA_DIR).
    db_path: Explicit database path (``":memory:"`` for tests).
    client / probe: Override the clan directory client / connectivity probe.
    """
    started = time.perf_counter()
    if headless is None:
        headless = not _QT_AVAILABLE
    data_dir = data_dir or settings.DATA_DIR

    qt_app = None
    if not headless and _QT_AVAILABLE:
        qt_app = QApplication.instance() or QApplication(sys.argv[:1])

    bus = EventBus()
    services.register("event_bus", bus, allow_override=True)
    logging_service = LoggingService()
    if attach_logging:
        logging_service.attach_root()
    services.register("logging_service", logging_service, allow_override=True)

    conn = open_database(data_dir, db_path=db_path)
    services.register("sqlite_conn", conn, allow_override=True)
    services.register(
        "favorites_store", SqliteFavoritesStore(conn, event_bus=bus), allow_override=True
    )
    services.register("clan_client", client or ClanDirectoryClient(), allow_override=True)
    services.register("connectivity_probe", probe or ConnectivityProbe(), allow_override=True)

    app_config = load_config(data_dir)
    services.register("app_config", app_config, allow_override=True)

    duration = time.perf_counter() - started
    bus.publish(GUIEvent.STARTUP_COMPLETE, {"duration_s": duration, "headless": headless})
    log.info("Bootstrap complete in %.3fs (headless=%s)", duration, headless)
    return AppContext(
        qt_app=qt_app,
        headless=headless,
        data_dir=data_dir,
        services=services,
        app_config=app_config,
        duration_s=duration,
        metadata={"qt_available": _QT_AVAILABLE, "api_token_set": bool(settings.API_TOKEN)},
    )


def shutdown_app(ctx: AppContext) -> None:
    """Persist app state and release resources registered by ``create_app``.

    Callers running background workers must let them exit first; the GUI
    launcher does so through ``gui.workers.wait_for_workers``.
    """
    save_config(ctx.app_config, ctx.data_dir)
    client = services.try_get("clan_client")
    if isinstance(client, ClanDirectoryClient):
        client.close()
    conn = services.try_get("sqlite_conn")
    if conn is not None:
        conn.close()
    logging_service = services.try_get("logging_service")
    if isinstance(logging_service, LoggingService):
        logging_service.detach_root()
        path = os.path.join(ctx.data_dir, settings.SESSION_LOG_FILENAME)
        written = logging_service.export_jsonl(path, min_level=logging.WARNING)
        if written:
            log.info("Wrote %d warning(s) to %s", written, path)


# --------------------------------------------------------------------------------------
# Single-instance guard (file lock) utilities
# --------------------------------------------------------------------------------------

_LOCK_FD: int | None = None
_LOCK_PATH: str | None = None


def _default_lock_path(name: str = "clancheck.lock") -> str:
    return os.path.join(tempfile.gettempdir(), name)


def _write_pid_lock(path: str) -> int:
    fd = os.open(path, os.O_CREAT | os.O_EXCL | os.O_RDWR, 0o644)
    os.write(fd, str(os.getpid()).encode("utf-8"))
    return fd


def acquire_single_instance(
    lock_name: str = "clancheck.lock", *, force_reclaim_stale: bool = True
) -> bool:
    """Attempt to acquire a coarse single-instance file lock.

    Returns True if this process acquired the lock, False if another live
    instance holds it. A lock file left behind by a dead process (checked
    with ``psutil.pid_exists``) is reclaimed.
    """
    global _LOCK_FD, _LOCK_PATH
    if _LOCK_FD is not None:
        return True
    path = _default_lock_path(lock_name)
    try:
        _LOCK_FD = _write_pid_lock(path)
        _LOCK_PATH = path
        return True
    except FileExistsError:
        pass
    try:
        with open(path, "r", encoding="utf-8") as f:
            contents = f.read().strip()
    except OSError:
        return False
    stale_pid = int(contents) if contents.isdigit() else None
    if stale_pid is None or psutil.pid_exists(stale_pid) or not force_reclaim_stale:
        return False
    log.info("Reclaiming stale instance lock held by pid %s", stale_pid)
    try:
        os.unlink(path)
        _LOCK_FD = _write_pid_lock(path)
    except OSError:
        return False
    _LOCK_PATH = path
    return True


def release_single_instance() -> None:
    global _LOCK_FD, _LOCK_PATH
    if _LOCK_FD is None:
        return
    try:
        os.close(_LOCK_FD)
        if _LOCK_PATH and os.path.exists(_LOCK_PATH):
            os.unlink(_LOCK_PATH)
    finally:
        _LOCK_FD = None
        _LOCK_PATH = None


@contextmanager
def single_instance(lock_name: str = "clancheck.lock") -> Iterator[bool]:
    """Yield True if the lock was acquired; release it on exit."""
    acquired = acquire_single_instance(lock_name)
    try:
        yield acquired
    finally:
        if acquired:
            release_single_instance()


def create_application(*, data_dir: str | None = None) -> AppContext:
    """High-level wrapper for interactive launches.

    Creates the (non-headless) context and records whether the
    single-instance lock was acquired in ``metadata['single_instance_acquired']``.
    """
    ctx = create_app(headless=False, data_dir=data_dir)
    acquired = acquire_single_instance()
    ctx.metadata["single_instance_acquired"] = acquired
    if acquired:
        atexit.register(release_single_instance)
    return ctx


__all__ = [
    "AppContext",
    "create_app",
    "create_application",
    "open_database",
    "shutdown_app",
    "single_instance",
    "acquire_single_instance",
    "release_single_instance",
]
