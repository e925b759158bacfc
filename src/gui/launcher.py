"""Dedicated launcher module for `python -m gui` or external callers.

Delegates to the unified bootstrap (`create_application`) so database
creation, service registration and the single-instance guard run the same
way for every interactive launch.
"""

from __future__ import annotations

import logging
import os
import sys

from config import settings
from gui.app.bootstrap import create_application, shutdown_app
from gui.main_window import MainWindow
from gui.services.logging_service import configure_logging
from gui.workers import wait_for_workers

log = logging.getLogger(__name__)


def main(data_dir: str | None = None) -> int:  # pragma: no cover - runtime
    configure_logging(os.environ.get("CLANCHECK_LOG_LEVEL", "INFO"))
    ctx = create_application(data_dir=data_dir or settings.DATA_DIR)
    if ctx.metadata.get("single_instance_acquired") is False:
        print("Another ClanCheck instance is already running.")  # noqa: T201
        return 0
    if not settings.API_TOKEN:
        log.warning("CLANCHECK_API_TOKEN is not set; lookups will be rejected")
    app = ctx.qt_app
    win = MainWindow(app_config=ctx.app_config)
    win.show()
    code = app.exec()
    # Lookups blocked on the network are bounded by the HTTP timeout
    if not wait_for_workers(int(settings.DEFAULT_TIMEOUT * 1000) + 1000):
        log.warning("Closing with background workers still running")
    shutdown_app(ctx)
    return code


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
