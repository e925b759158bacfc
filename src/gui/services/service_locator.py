"""Process-wide registry of shared ClanCheck collaborators.

``create_app`` registers the SQLite connection, favorites store, clan
directory client, connectivity probe, event bus, logging service and app
config under fixed string keys; views and the CLI look them up here unless
they are handed their collaborators directly (which is what tests do).

    from gui.services.service_locator import services
    store = services.get_typed("favorites_store", SqliteFavoritesStore)

    with services.override_context(clan_client=StubClient()):
        ...
"""

from __future__ import annotations

from contextlib import contextmanager
from threading import RLock
from typing import Any, Dict, Iterator, List, Type, TypeVar

T = TypeVar("T")

__all__ = ["ServiceLocator", "services", "ServiceAlreadyRegisteredError", "ServiceNotFoundError"]

_MISSING = object()


class ServiceAlreadyRegisteredError(RuntimeError):
    """A key was registered twice without ``allow_override``."""


class ServiceNotFoundError(KeyError):
    """No service is registered under the requested key."""


class ServiceLocator:
    def __init__(self) -> None:
        self._lock = RLock()
        self._entries: Dict[str, Any] = {}

    def register(self, key: str, value: Any, *, allow_override: bool = False) -> None:
        with self._lock:
            if not allow_override and key in self._entries:
                raise ServiceAlreadyRegisteredError(f"Service '{key}' already registered")
            self._entries[key] = value

    def get(self, key: str) -> Any:
        with self._lock:
            try:
                return self._entries[key]
            except KeyError:
                raise ServiceNotFoundError(key) from None

    def get_typed(self, key: str, expected_type: Type[T]) -> T:
        """``get`` plus an isinstance check; a mismatch raises TypeError."""
        value = self.get(key)
        if not isinstance(value, expected_type):
            raise TypeError(
                f"Service '{key}' is {type(value).__name__}, expected {expected_type.__name__}"
            )
        return value

    def try_get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._entries.get(key, default)

    @contextmanager
    def override_context(self, **replacements: Any) -> Iterator[None]:
        """Swap in ``replacements`` for the duration of the block.

        Keys that were absent before are removed again on exit.
        """
        with self._lock:
            saved = {key: self._entries.get(key, _MISSING) for key in replacements}
            self._entries.update(replacements)
        try:
            yield
        finally:
            with self._lock:
                for key, value in saved.items():
                    if value is _MISSING:
                        self._entries.pop(key, None)
                    else:
                        self._entries[key] = value

    def unregister(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def list_keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


services = ServiceLocator()
