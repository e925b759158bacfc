"""Indeterminate progress indicator used as the search loader.

Looping bar segment driven by a ``QTimer``. When reduced motion is active the
animation is disabled and a static centered segment is painted instead.

Usage::
    loader = IndeterminateProgress(); loader.start(); loader.stop()
"""

from __future__ import annotations
from typing import Optional
from PyQt6.QtCore import QRectF, QTimer
from PyQt6.QtGui import QColor, QPainter
from PyQt6.QtWidgets import QWidget

from gui.design import reduced_motion as _rm

__all__ = ["IndeterminateProgress"]


class IndeterminateProgress(QWidget):
    """Looping animated bar segment; visible only while started."""

    def __init__(self, parent: Optional[QWidget] = None, *, interval_ms: int = 64):
        super().__init__(parent)
        self.setObjectName("indeterminateProgress")
        self.setFixedHeight(6)
        self._interval = max(16, min(interval_ms, 500))
        self._timer: Optional[QTimer] = None
        self._phase: float = 0.0
        self._bar_color = QColor(80, 140, 220)
        self._track_color = QColor(40, 40, 40, 80)
        self._active = False
        self.hide()

    # Control -----------------------------------------------------------
    def start(self):
        self.show()
        if _rm.is_reduced_motion():
            self._active = False
            self.update()
            return
        if self._timer is None:
            self._timer = QTimer(self)
            self._timer.timeout.connect(self._on_tick)  # type: ignore[attr-defined]
            self._timer.start(self._interval)
        self._active = True
        self.update()

    def stop(self):
        self._active = False
        if self._timer is not None:
            self._timer.stop()
            self._timer = None
        self.hide()

    def is_active(self) -> bool:
        return self._active

    # Animation ---------------------------------------------------------
    def _on_tick(self):  # pragma: no cover - timer driven
        if _rm.is_reduced_motion():
            self._active = False
            if self._timer is not None:
                self._timer.stop()
                self._timer = None
        else:
            self._phase = (self._phase + 0.02) % 1.0
        self.update()

    # Paint -------------------------------------------------------------
    def paintEvent(self, event):  # type: ignore[override]
        p = QPainter(self)
        rect = self.rect()
        p.fillRect(rect, self._track_color)
        if _rm.is_reduced_motion() or not self._active:
            seg_w = max(8, rect.width() // 5)
            x = (rect.width() - seg_w) // 2
        else:
            seg_w = max(8, rect.width() // 6)
            x = int((rect.width() + seg_w) * self._phase) - seg_w
            x = max(0, min(x, rect.width() - seg_w))
        p.fillRect(QRectF(x, 0, seg_w, rect.height()), self._bar_color)
        p.end()
