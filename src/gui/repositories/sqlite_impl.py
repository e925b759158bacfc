"""SQLite-backed favorites store.

Uses the ``favorite_clan`` table defined in ``db.schema``. The primary key
column is aliased to ``id`` so the ``FavoriteRecord`` dataclass stays
persistence-agnostic.

The connection is shared with background worker threads (opened with
``check_same_thread=False``), so every statement runs under one lock.
Change notifications go through an ``EventBus`` (``FAVORITES_CHANGED``)
carrying the full post-change snapshot. The snapshot is read and published
while the write lock is still held, so subscribers see snapshots in the
order the writes committed and the last one always matches the table.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import replace
from threading import RLock

from gui.services.event_bus import Event, EventBus, GUIEvent, Subscription

from .protocols import FavoriteRecord, FavoritesSnapshot, FavoritesStore, SnapshotHandler

__all__ = ["SqliteFavoritesStore"]

log = logging.getLogger(__name__)

_SELECT = (
    "SELECT favorite_id AS id, tag, name, location_name, points, wars_won, "
    "war_frequency, type, required_trophies FROM favorite_clan"
)


def _row_to_favorite(row: sqlite3.Row) -> FavoriteRecord:
    return FavoriteRecord(
        id=int(row["id"]),
        tag=row["tag"],
        name=row["name"],
        location_name=row["location_name"],
        points=int(row["points"]),
        wars_won=int(row["wars_won"]),
        war_frequency=int(row["war_frequency"]),
        type=row["type"],
        required_trophies=int(row["required_trophies"]),
    )


class SqliteFavoritesStore(FavoritesStore):  # type: ignore[misc]
    def __init__(self, conn: sqlite3.Connection, *, event_bus: EventBus | None = None):
        self._conn = conn
        self._lock = RLock()
        # Private bus unless the caller wants changes visible application-wide
        self._bus = event_bus or EventBus()

    # Queries ------------------------------------------------------------
    def list_favorites(self) -> FavoritesSnapshot:
        with self._lock:
            cur = self._conn.cursor()
            cur.row_factory = sqlite3.Row
            rows = cur.execute(_SELECT + " ORDER BY favorite_id").fetchall()
        return tuple(_row_to_favorite(r) for r in rows)

    def contains(self, tag: str) -> bool:
        with self._lock:
            row = self._conn.execute(
                "SELECT 1 FROM favorite_clan WHERE tag=? LIMIT 1", (tag,)
            ).fetchone()
        return row is not None

    # Writes -------------------------------------------------------------
    def insert(self, record: FavoriteRecord) -> FavoriteRecord:
        """Store ``record``; a tag that is already a favorite returns the stored row."""
        with self._lock:
            existing = self._find(record.tag)
            if existing is not None:
                log.debug("Favorite %s already stored (id=%s)", existing.tag, existing.id)
                return existing
            with self._conn:
                cur = self._conn.execute(
                    "INSERT INTO favorite_clan(tag, name, location_name, points, wars_won, "
                    "war_frequency, type, required_trophies) VALUES(?,?,?,?,?,?,?,?)",
                    (
                        record.tag,
                        record.name,
                        record.location_name,
                        record.points,
                        record.wars_won,
                        record.war_frequency,
                        record.type,
                        record.required_trophies,
                    ),
                )
            stored = replace(record, id=cur.lastrowid)
            log.debug("Favorite inserted: %s (id=%s)", stored.tag, stored.id)
            self._notify()
        return stored

    def delete_by_tag(self, tag: str) -> int:
        with self._lock:
            with self._conn:
                cur = self._conn.execute("DELETE FROM favorite_clan WHERE tag=?", (tag,))
            removed = cur.rowcount
            log.debug("Favorite removed: %s (%d rows)", tag, removed)
            self._notify()
        return removed

    # Live snapshot ------------------------------------------------------
    def subscribe(self, handler: SnapshotHandler) -> Subscription:
        def _deliver(evt: Event) -> None:
            handler(evt.payload)

        # No write can slip between the initial snapshot and the first event
        with self._lock:
            sub = self._bus.subscribe(GUIEvent.FAVORITES_CHANGED, _deliver)
            handler(self.list_favorites())
        return sub

    def _find(self, tag: str) -> FavoriteRecord | None:
        cur = self._conn.cursor()
        cur.row_factory = sqlite3.Row
        row = cur.execute(_SELECT + " WHERE tag=?", (tag,)).fetchone()
        return _row_to_favorite(row) if row is not None else None

    def _notify(self) -> None:
        # Caller holds self._lock
        self._bus.publish(GUIEvent.FAVORITES_CHANGED, self.list_favorites())
