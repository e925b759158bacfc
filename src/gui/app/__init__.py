"""Application layer for GUI bootstrap and lifecycle management.

Public exports include application bootstrap, context objects, and the
persisted window / last-query state.
"""

from .bootstrap import create_app, create_application, shutdown_app, AppContext  # noqa: F401
from .config_store import (  # noqa: F401
    AppConfig,
    load_config,
    save_config,
    CONFIG_VERSION,
)

__all__ = [
    "create_app",
    "create_application",
    "shutdown_app",
    "AppContext",
    # Config store
    "AppConfig",
    "load_config",
    "save_config",
    "CONFIG_VERSION",
]
