"""Reusable GUI components (error banner, loader)."""

from .progress_indicator import IndeterminateProgress  # noqa: F401
from .toast_host import ErrorToast  # noqa: F401

__all__ = ["ErrorToast", "IndeterminateProgress"]
