"""Repository layer public exports.

Exposes the favorites store Protocol, its record type and the SQLite-backed
implementation used by the clan lookup screen and the CLI.
"""

from .protocols import (
    FavoriteRecord,
    FavoritesSnapshot,
    FavoritesStore,
    SnapshotHandler,
)
from .sqlite_impl import SqliteFavoritesStore

__all__ = [
    "FavoriteRecord",
    "FavoritesSnapshot",
    "FavoritesStore",
    "SnapshotHandler",
    "SqliteFavoritesStore",
]
