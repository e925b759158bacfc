"""Repository interface layer.

Defines the typed ``Protocol`` for the favorites store used by the clan
lookup view model. The store abstracts persistence details (SQLite today,
in-memory doubles in tests) behind insert / delete-by-tag plus a live
snapshot subscription.

Design Notes:
- Favorites are insert/delete only. There is no update path.
- Snapshots are immutable tuples ordered by surrogate id so consumers can
  hold on to one without copying.
- ``subscribe`` delivers the current snapshot immediately, then again after
  every change, until the returned subscription is cancelled.
"""

from __future__ import annotations

from typing import Callable, Protocol, Tuple, runtime_checkable

from domain.models import FavoriteRecord
from gui.services.event_bus import Subscription

__all__ = [
    "FavoriteRecord",
    "FavoritesSnapshot",
    "SnapshotHandler",
    "FavoritesStore",
]

FavoritesSnapshot = Tuple[FavoriteRecord, ...]
SnapshotHandler = Callable[[FavoritesSnapshot], None]


@runtime_checkable
class FavoritesStore(Protocol):
    """Persistent keyed table of favorited clans."""

    def subscribe(self, handler: SnapshotHandler) -> Subscription: ...  # pragma: no cover

    def insert(self, record: FavoriteRecord) -> FavoriteRecord: ...  # pragma: no cover

    def delete_by_tag(self, tag: str) -> int: ...  # pragma: no cover

    def list_favorites(self) -> FavoritesSnapshot: ...  # pragma: no cover

    def contains(self, tag: str) -> bool: ...  # pragma: no cover
