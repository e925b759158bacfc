"""Clan Lookup View.

Search field, loader, result panel with the clan's stats, a favorite /
not-favorite toggle and an auto-dismissing error banner. All decisions live
in ``ClanLookupViewModel``; this widget wires Qt input to it, renders every
state it publishes and moves blocking work onto ``QThread`` workers.

Public API:
- submit_query(query) -> bool
- toggle_favorite()
- shutdown(): cancel the favorites subscription, timers and pending workers
"""

from __future__ import annotations

import logging
from typing import Dict, List, Optional

from PyQt6.QtCore import QThread, pyqtSignal
from PyQt6.QtWidgets import (
    QFormLayout,
    QGroupBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QToolButton,
    QVBoxLayout,
    QWidget,
)

from gui.components.progress_indicator import IndeterminateProgress
from gui.components.toast_host import ErrorToast
from gui.i18n import t
from gui.services.service_locator import services
from gui.viewmodels.clan_lookup_viewmodel import (
    ClanLookupViewModel,
    LookupResult,
    LookupState,
    Phase,
)
from gui import workers as _workers
from gui.workers import ClanLookupWorker, FavoriteWriteWorker

__all__ = ["ClanLookupView", "FIELD_ORDER"]

log = logging.getLogger(__name__)

# (ClanFields attribute, label key)
FIELD_ORDER = [
    ("name", "field.name"),
    ("tag", "field.tag"),
    ("location", "field.location"),
    ("members", "field.members"),
    ("points", "field.points"),
    ("wars_won", "field.wars_won"),
    ("war_frequency", "field.war_frequency"),
    ("type", "field.type"),
    ("required_trophies", "field.required_trophies"),
]

_WRITE_WAIT_MS = 2000


def _viewmodel_from_services() -> ClanLookupViewModel:
    return ClanLookupViewModel(
        services.get("clan_client"),
        services.get("connectivity_probe"),
        services.try_get("favorites_store"),
        event_bus=services.try_get("event_bus"),
    )


class ClanLookupView(QWidget):
    # Store notifications may arrive on a worker thread; re-emitting through a
    # signal bound to this widget queues them onto the GUI thread.
    _snapshot_received = pyqtSignal(object)

    def __init__(
        self,
        viewmodel: Optional[ClanLookupViewModel] = None,
        parent: Optional[QWidget] = None,
        *,
        run_async: bool = True,
    ):
        super().__init__(parent)
        self.viewmodel = viewmodel or _viewmodel_from_services()
        self._run_async = run_async
        self._workers: List[QThread] = []
        self._last_state = LookupState()
        self._closed = False
        self._build_ui()
        self.viewmodel.listen(self._render)
        self._snapshot_received.connect(self._apply_snapshot)  # type: ignore[attr-defined]
        self.viewmodel.start(self._snapshot_received.emit)
        self._render(self.viewmodel.state)

    # UI -----------------------------------------------------------------
    def _build_ui(self):
        root = QVBoxLayout(self)
        self.search_field = QLineEdit()
        self.search_field.setObjectName("searchView")
        self.search_field.setPlaceholderText(t("search.placeholder"))
        self.search_field.setClearButtonEnabled(True)
        self.search_field.returnPressed.connect(self._on_return_pressed)  # type: ignore[attr-defined]
        root.addWidget(self.search_field)

        self.loader = IndeterminateProgress()
        root.addWidget(self.loader)

        self.clan_panel = QGroupBox()
        self.clan_panel.setObjectName("clanView")
        panel_layout = QVBoxLayout(self.clan_panel)
        header = QHBoxLayout()
        header.addStretch(1)
        self.favorite_button = QToolButton()
        self.favorite_button.setObjectName("favoriteIcon")
        self.favorite_button.setText("★")
        self.favorite_button.setToolTip(t("favorite.remove"))
        self.favorite_button.clicked.connect(self.toggle_favorite)  # type: ignore[attr-defined]
        self.not_favorite_button = QToolButton()
        self.not_favorite_button.setObjectName("notFavoriteIcon")
        self.not_favorite_button.setText("☆")
        self.not_favorite_button.setToolTip(t("favorite.add"))
        self.not_favorite_button.clicked.connect(self.toggle_favorite)  # type: ignore[attr-defined]
        header.addWidget(self.favorite_button)
        header.addWidget(self.not_favorite_button)
        panel_layout.addLayout(header)

        form = QFormLayout()
        self.field_labels: Dict[str, QLabel] = {}
        for attr, key in FIELD_ORDER:
            value = QLabel("")
            value.setObjectName(f"clanField_{attr}")
            self.field_labels[attr] = value
            form.addRow(t(key), value)
        panel_layout.addLayout(form)
        root.addWidget(self.clan_panel)
        root.addStretch(1)

        self.toast = ErrorToast(self)
        self.toast.dismissed.connect(self._on_toast_dismissed)  # type: ignore[attr-defined]
        root.addWidget(self.toast)

    # Input --------------------------------------------------------------
    def _on_return_pressed(self):
        self.submit_query(self.search_field.text())

    def submit_query(self, query: Optional[str]) -> bool:
        if not self.viewmodel.submit_query(query):
            return False
        generation = self.viewmodel.state.generation
        if self._run_async:
            worker = ClanLookupWorker(self.viewmodel, query, generation)  # type: ignore[arg-type]
            worker.finished.connect(self._on_lookup_finished)  # type: ignore[attr-defined]
            self._start_worker(worker)
        else:
            self.viewmodel.apply_result(self.viewmodel.fetch(query, generation))  # type: ignore[arg-type]
        return True

    def toggle_favorite(self):
        if not self._run_async:
            self.viewmodel.toggle_favorite()
            return
        # None while nothing is displayed or a write for this clan is in flight
        plan = self.viewmodel.plan_toggle()
        if plan is None:
            return
        worker = FavoriteWriteWorker(self.viewmodel, plan)
        worker.finished.connect(self._on_favorite_written)  # type: ignore[attr-defined]
        self._start_worker(worker)

    # Worker plumbing ----------------------------------------------------
    def _start_worker(self, worker: QThread) -> None:
        self._workers = [w for w in self._workers if not w.isFinished()]
        self._workers.append(worker)
        worker.start()

    def _on_lookup_finished(self, result: LookupResult):
        if not self._closed:
            self.viewmodel.apply_result(result)

    def _on_favorite_written(self, tag: str, now_favorite: bool, error: str):
        if self._closed:
            return
        if error:
            self.viewmodel.apply_favorite_failed(tag)
        else:
            self.viewmodel.apply_favorite_written(tag, now_favorite)

    def _apply_snapshot(self, snapshot):
        if not self._closed:
            self.viewmodel.on_favorites_snapshot(snapshot)

    def _on_toast_dismissed(self):
        if not self._closed:
            self.viewmodel.dismiss_error()

    # Rendering ----------------------------------------------------------
    def _render(self, state: LookupState):
        prev = self._last_state
        self._last_state = state
        if state.loader_visible:
            self.loader.start()
        else:
            self.loader.stop()
        if prev.phase is Phase.LOADING and state.phase is not Phase.LOADING:
            self.search_field.clearFocus()
        fields = self.viewmodel.render_fields() if state.clan_visible else None
        if fields is not None:
            for attr, label in self.field_labels.items():
                label.setText(getattr(fields, attr))
            self.favorite_button.setVisible(state.is_favorite)
            self.not_favorite_button.setVisible(not state.is_favorite)
            self.favorite_button.setEnabled(not state.writing)
            self.not_favorite_button.setEnabled(not state.writing)
        self.clan_panel.setVisible(fields is not None)
        if state.message is not None and state.error_seq != prev.error_seq:
            self.toast.show_message(state.message)

    # Accessors for tests -----------------------------------------------
    def panel_shown(self) -> bool:
        return not self.clan_panel.isHidden()

    def field_text(self, attr: str) -> str:
        return self.field_labels[attr].text()

    def favorite_shown(self) -> bool:
        return not self.favorite_button.isHidden() and self.not_favorite_button.isHidden()

    def pending_workers(self) -> int:
        return sum(1 for w in self._workers if not w.isFinished())

    # Lifecycle ----------------------------------------------------------
    def shutdown(self):
        if self._closed:
            return
        self._closed = True
        self.viewmodel.shutdown()
        self.toast.shutdown()
        self.loader.stop()
        # Lookups are abandoned; store writes are short and allowed to land
        for worker in self._workers:
            if isinstance(worker, ClanLookupWorker):
                worker.requestInterruption()
        self.viewmodel.cancel_lookups()
        for worker in self._workers:
            if isinstance(worker, FavoriteWriteWorker):
                worker.wait(_WRITE_WAIT_MS)
        for worker in self._workers:
            _workers.retire(worker)
        if _workers.retired_count():
            log.info("%d worker(s) still finishing after shutdown", _workers.retired_count())
        self._workers = []

    def closeEvent(self, event):  # type: ignore[override]
        self.shutdown()
        super().closeEvent(event)
