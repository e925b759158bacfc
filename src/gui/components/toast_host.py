"""Transient error banner ("toast").

A single-slot banner: ``show_message`` makes it visible immediately and arms
a single-shot auto-dismiss timer (``settings.TOAST_TIMEOUT_MS``). When the
timer fires the banner fades out over ``settings.TOAST_FADE_MS`` and hides.
Showing a new message while one is visible replaces the text and restarts
the timer.

Testable: timers are plain ``QTimer`` instances exposed via accessors, and
with reduced motion enabled the fade is skipped so hiding is synchronous on
timeout.

Usage:
    toast = ErrorToast(parent)
    toast.dismissed.connect(on_dismissed)
    toast.show_message("No internet connection.")
"""

from __future__ import annotations

from time import monotonic
from typing import Optional

from PyQt6.QtCore import QEasingCurve, QPropertyAnimation, Qt, QTimer, pyqtSignal
from PyQt6.QtWidgets import QGraphicsOpacityEffect, QHBoxLayout, QLabel, QWidget

from config import settings
from gui.design.reduced_motion import adjust_duration

__all__ = ["ErrorToast"]


class ErrorToast(QWidget):
    """Auto-dismissing error banner."""

    dismissed = pyqtSignal()

    def __init__(
        self,
        parent: Optional[QWidget] = None,
        *,
        timeout_ms: int = settings.TOAST_TIMEOUT_MS,
        fade_ms: int = settings.TOAST_FADE_MS,
    ):
        super().__init__(parent)
        self.setObjectName("errorToast")
        self.setAttribute(Qt.WidgetAttribute.WA_StyledBackground, True)
        self._timeout_ms = max(0, timeout_ms)
        self._fade_ms = max(0, fade_ms)
        self._shown_at: Optional[float] = None

        layout = QHBoxLayout(self)
        layout.setContentsMargins(12, 8, 12, 8)
        self.text_label = QLabel("")
        self.text_label.setObjectName("errorToastText")
        self.text_label.setWordWrap(True)
        layout.addWidget(self.text_label)

        self._opacity = QGraphicsOpacityEffect(self)
        self._opacity.setOpacity(1.0)
        self.setGraphicsEffect(self._opacity)

        self._timer = QTimer(self)
        self._timer.setSingleShot(True)
        self._timer.timeout.connect(self._on_timeout)  # type: ignore[attr-defined]

        self._fade = QPropertyAnimation(self._opacity, b"opacity", self)
        self._fade.setStartValue(1.0)
        self._fade.setEndValue(0.0)
        self._fade.setEasingCurve(QEasingCurve.Type.OutCubic)
        self._fade.finished.connect(self._finish)  # type: ignore[attr-defined]
        self.hide()

    # Public API --------------------------------------------------
    def show_message(self, text: str) -> None:
        self._fade.stop()
        self._opacity.setOpacity(1.0)
        self.text_label.setText(text)
        self.show()
        self.raise_()
        self._shown_at = monotonic()
        self._timer.start(self._timeout_ms)

    def dismiss(self) -> None:
        """Hide immediately (no fade) and notify listeners."""
        self._timer.stop()
        self._fade.stop()
        if not self.isHidden():
            self._finish()

    def shutdown(self) -> None:
        """Stop pending timers/animation without emitting ``dismissed``."""
        self._timer.stop()
        self._fade.stop()
        self.hide()

    def is_active(self) -> bool:
        return not self.isHidden()

    def message(self) -> str:
        return self.text_label.text()

    def timer(self) -> QTimer:
        return self._timer

    def shown_at(self) -> Optional[float]:
        return self._shown_at

    # Internals ---------------------------------------------------
    def _on_timeout(self) -> None:
        duration = adjust_duration(self._fade_ms)
        if duration <= 0:
            self._finish()
            return
        self._fade.setDuration(duration)
        self._fade.start()

    def _finish(self) -> None:
        self.hide()
        self._opacity.setOpacity(1.0)
        self.dismissed.emit()
