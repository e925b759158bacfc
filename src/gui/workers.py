"""Background worker threads for clan lookups and favorite writes.

Workers only call the worker-safe view model methods (``fetch`` and
``write_favorite``) and report back through ``finished``; the GUI thread
applies results when the queued signal is delivered.

Cancellation: the owner calls ``requestInterruption()`` on a lookup, which then
drops its result instead of emitting it. Favorite writes always run to the
end. Threads still running when their owner goes away are handed to
``retire`` so the Python reference outlives the OS thread;
``wait_for_workers`` blocks until all retired threads have exited.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from PyQt6.QtCore import QDeadlineTimer, QThread, pyqtSignal

from domain.errors import FavoriteWriteError
from gui.viewmodels.clan_lookup_viewmodel import ClanLookupViewModel, FavoriteWrite

__all__ = [
    "ClanLookupWorker",
    "FavoriteWriteWorker",
    "retire",
    "retired_count",
    "wait_for_workers",
]

log = logging.getLogger(__name__)

_retired: List[QThread] = []


class ClanLookupWorker(QThread):
    finished = pyqtSignal(object)  # LookupResult

    def __init__(self, viewmodel: ClanLookupViewModel, query: str, generation: int):
        super().__init__()
        self.viewmodel = viewmodel
        self.query = query
        self.generation = generation

    def run(self) -> None:  # type: ignore[override]
        if self.isInterruptionRequested():
            return
        result = self.viewmodel.fetch(self.query, self.generation)
        if self.isInterruptionRequested():
            log.debug("Lookup for %r cancelled; result dropped", self.query)
            return
        self.finished.emit(result)


class FavoriteWriteWorker(QThread):
    finished = pyqtSignal(str, bool, str)  # tag, now_favorite, error

    def __init__(self, viewmodel: ClanLookupViewModel, plan: FavoriteWrite):
        super().__init__()
        self.viewmodel = viewmodel
        self.plan = plan

    def run(self) -> None:  # type: ignore[override]
        try:
            now_favorite = self.viewmodel.write_favorite(self.plan)
        except FavoriteWriteError as e:
            log.error("Favorite write failed: %s", e)
            self.finished.emit(self.plan.tag, False, str(e))
            return
        self.finished.emit(self.plan.tag, now_favorite, "")


def _prune() -> None:
    _retired[:] = [w for w in _retired if not w.isFinished()]


def retire(worker: QThread) -> None:
    """Keep a still-running worker referenced until its thread exits."""
    _prune()
    if not worker.isFinished():
        _retired.append(worker)


def retired_count() -> int:
    _prune()
    return len(_retired)


def wait_for_workers(timeout_ms: Optional[int] = None) -> bool:
    """Block until every retired worker has exited; False if the timeout hit."""
    deadline = QDeadlineTimer(timeout_ms) if timeout_ms is not None else None
    for worker in list(_retired):
        finished = worker.wait() if deadline is None else worker.wait(deadline)
        if not finished:
            log.warning("Worker %s still running after %s ms", type(worker).__name__, timeout_ms)
            return False
    _prune()
    return True
