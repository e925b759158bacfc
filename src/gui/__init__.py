"""ClanCheck GUI public API.

Small surface for external callers (CLI, launcher, tests) to reach the GUI
infrastructure without depending on deep internal module paths. Importing
this package never creates a QApplication.
"""

from __future__ import annotations

# Infrastructure
from .services.service_locator import (  # noqa: F401
    services,
    ServiceLocator,
    ServiceAlreadyRegisteredError,
    ServiceNotFoundError,
)
from .services.event_bus import (  # noqa: F401
    EventBus,
    GUIEvent,
    Event,
    Subscription,
)
from .app.bootstrap import create_app, create_application  # noqa: F401

__all__ = [
    "services",
    "ServiceLocator",
    "ServiceAlreadyRegisteredError",
    "ServiceNotFoundError",
    "EventBus",
    "GUIEvent",
    "Event",
    "Subscription",
    "create_app",
    "create_application",
]
