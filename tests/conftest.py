# Shared pytest configuration.
#
# Provides a fallback 'qtbot' fixture if pytest-qt is not installed so widget
# tests still exercise basic lifecycle operations; when pytest-qt is present
# its fixture wins. Every test runs on the offscreen Qt platform and starts
# with an empty service locator.

import os
import sys
import time

import pytest

os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

try:  # If pytest-qt present, do nothing (its fixture will be used)
    import pytestqt  # type: ignore  # noqa: F401
except ImportError:  # pragma: no cover
    try:
        from PyQt6.QtWidgets import QApplication
    except ImportError:  # pragma: no cover
        QApplication = None  # type: ignore

    @pytest.fixture
    def qtbot():  # type: ignore
        if QApplication is None:
            pytest.skip("PyQt6 not available")
        app = QApplication.instance() or QApplication(sys.argv)  # type: ignore
        widgets = []

        class Bot:
            def addWidget(self, w):  # mimic pytest-qt API subset
                widgets.append(w)

            def wait(self, ms):
                deadline = time.monotonic() + ms / 1000.0
                while time.monotonic() < deadline:
                    app.processEvents()
                    time.sleep(0.005)

            def waitUntil(self, callback, timeout=5000):
                deadline = time.monotonic() + timeout / 1000.0
                while time.monotonic() < deadline:
                    app.processEvents()
                    try:
                        if callback() is not False:
                            return
                    except AssertionError:
                        pass
                    time.sleep(0.005)
                callback()

        yield Bot()
        for w in widgets:
            w.close()
            w.deleteLater()


@pytest.fixture(autouse=True)
def _clean_services():
    from gui.design import reduced_motion
    from gui.services.service_locator import services

    services.clear()
    yield
    try:
        from gui.workers import wait_for_workers
    except ImportError:  # pragma: no cover - PyQt6 missing
        pass
    else:
        wait_for_workers(5000)
    conn = services.try_get("sqlite_conn")
    if conn is not None:
        conn.close()
    logging_service = services.try_get("logging_service")
    if logging_service is not None:
        logging_service.detach_root()
    services.clear()
    reduced_motion.set_reduced_motion(False)
