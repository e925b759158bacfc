"""Design system package.

Only the motion preference lives here for now; widget styling is driven by
object names consumed through QSS in ``gui.main_window``.
"""

from .reduced_motion import (  # noqa: F401
    adjust_duration,
    is_reduced_motion,
    set_reduced_motion,
    temporarily_reduced_motion,
)

__all__ = [
    "adjust_duration",
    "is_reduced_motion",
    "set_reduced_motion",
    "temporarily_reduced_motion",
]
