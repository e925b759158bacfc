"""Service layer exports.

Responsibilities:
 - Dependency/service locator (`services`)
 - EventBus publish/subscribe core with cancellable subscriptions
 - In-process log capture (`LoggingService`)
"""

from .service_locator import services, ServiceLocator  # noqa: F401
from .event_bus import EventBus, GUIEvent, Subscription  # noqa: F401
from .logging_service import LoggingService, configure_logging  # noqa: F401

__all__ = [
    "services",
    "ServiceLocator",
    "EventBus",
    "GUIEvent",
    "Subscription",
    "LoggingService",
    "configure_logging",
]
