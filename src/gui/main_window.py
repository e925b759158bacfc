"""Main window hosting the clan lookup view."""

from __future__ import annotations

from typing import Optional

from PyQt6.QtWidgets import QMainWindow

from gui.app.config_store import AppConfig
from gui.i18n import t
from gui.viewmodels.clan_lookup_viewmodel import ClanLookupViewModel
from gui.views.clan_lookup_view import ClanLookupView

_QSS = """
#errorToast { background: #b3261e; border-radius: 6px; }
#errorToastText { color: white; }
#favoriteIcon, #notFavoriteIcon { font-size: 20px; border: none; }
"""


class MainWindow(QMainWindow):
    def __init__(
        self,
        app_config: Optional[AppConfig] = None,
        viewmodel: Optional[ClanLookupViewModel] = None,
    ):
        super().__init__()
        self.setWindowTitle(t("app.title"))
        self.setStyleSheet(_QSS)
        self.app_config = app_config or AppConfig()
        self.lookup_view = ClanLookupView(viewmodel)
        self.setCentralWidget(self.lookup_view)
        self._restore_state()

    def _restore_state(self):
        cfg = self.app_config
        if cfg.is_geometry_complete():
            self.setGeometry(cfg.window_x, cfg.window_y, cfg.window_w, cfg.window_h)  # type: ignore[arg-type]
        else:
            self.resize(420, 560)
        if cfg.last_query:
            self.lookup_view.search_field.setText(cfg.last_query)

    def _capture_state(self):
        geo = self.geometry()
        self.app_config.window_x = geo.x()
        self.app_config.window_y = geo.y()
        self.app_config.window_w = geo.width()
        self.app_config.window_h = geo.height()
        self.app_config.last_query = self.lookup_view.search_field.text() or None

    def closeEvent(self, event):  # type: ignore[override]
        self._capture_state()
        self.lookup_view.shutdown()
        super().closeEvent(event)
