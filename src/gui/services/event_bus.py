"""EventBus core.

Lightweight synchronous publish/subscribe mechanism with typed events.

Goals:
 - Decouple producers (favorites store, logging handler, lookup screen) from
   consumers inside the GUI layer
 - Provide minimal, testable surface (no Qt dependency)
 - Safe error isolation: one failing handler doesn't break the publish cycle
 - Allow one-shot (once) subscriptions
 - Provide cancellable subscription handles

Handlers run on the publishing thread. Qt consumers that need the GUI thread
re-emit through a queued signal.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from threading import RLock
from time import perf_counter
from typing import Any, Callable, Dict, List, Optional, Protocol

__all__ = [
    "GUIEvent",
    "Event",
    "EventBus",
    "EventHandler",
    "Subscription",
]


class GUIEvent(str, Enum):  # Using str subclass for easier JSON/UI usage
    STARTUP_COMPLETE = "startup_complete"
    FAVORITES_CHANGED = "favorites_changed"
    CLAN_DISPLAYED = "clan_displayed"
    ERROR_OCCURRED = "error_occurred"


@dataclass
class Event:
    name: str  # matches GUIEvent value or custom string
    payload: Any
    timestamp: float


class EventHandler(Protocol):  # noqa: D401 - protocol signature docs implicit
    def __call__(self, event: Event) -> None: ...  # pragma: no cover - structural


@dataclass(eq=False)
class Subscription:
    event: str
    handler: EventHandler
    once: bool
    active: bool = True
    _on_cancel: Optional[Callable[["Subscription"], None]] = field(default=None, repr=False)

    def cancel(self) -> None:
        """Stop delivery and detach from the owning bus (idempotent)."""
        if not self.active:
            return
        self.active = False
        if self._on_cancel is not None:
            self._on_cancel(self)


class EventBus:
    """Synchronous event dispatcher.

    Thread-safety: the subscription table is guarded by a re-entrant lock.
    Handlers are invoked while the lock is NOT held (copy-first strategy) so
    handlers can subscribe/unsubscribe recursively without deadlock.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._subs: Dict[str, List[Subscription]] = {}
        self._errors: List[tuple[Event, BaseException]] = []

    # ------------------------------------------------------------------
    # Subscription management
    # ------------------------------------------------------------------
    def subscribe(
        self, name: str | GUIEvent, handler: EventHandler, *, once: bool = False
    ) -> Subscription:
        key = name.value if isinstance(name, GUIEvent) else name
        sub = Subscription(event=key, handler=handler, once=once, _on_cancel=self._detach)
        with self._lock:
            self._subs.setdefault(key, []).append(sub)
        return sub

    def unsubscribe(self, sub: Subscription) -> None:
        sub.cancel()

    def _detach(self, sub: Subscription) -> None:
        with self._lock:
            bucket = self._subs.get(sub.event)
            if not bucket:
                return
            self._subs[sub.event] = [s for s in bucket if s is not sub]
            if not self._subs[sub.event]:
                self._subs.pop(sub.event, None)

    def clear(self) -> None:
        with self._lock:
            self._subs.clear()
            self._errors.clear()

    # ------------------------------------------------------------------
    # Publishing
    # ------------------------------------------------------------------
    def publish(self, name: str | GUIEvent, payload: Any = None) -> Event:
        key = name.value if isinstance(name, GUIEvent) else name
        evt = Event(name=key, payload=payload, timestamp=perf_counter())
        with self._lock:
            subs = list(self._subs.get(key, ()))
        for sub in subs:
            if not sub.active:
                continue
            try:
                sub.handler(evt)
            except Exception as exc:  # noqa: BLE001 - capture any handler failure
                with self._lock:
                    self._errors.append((evt, exc))
            if sub.once:
                sub.cancel()
        return evt

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def subscriber_count(self, name: str | GUIEvent) -> int:
        key = name.value if isinstance(name, GUIEvent) else name
        with self._lock:
            return len(self._subs.get(key, ()))

    def list_events(self) -> list[str]:
        with self._lock:
            return list(self._subs.keys())

    @property
    def errors(self) -> list[tuple[Event, BaseException]]:
        with self._lock:
            return list(self._errors)
