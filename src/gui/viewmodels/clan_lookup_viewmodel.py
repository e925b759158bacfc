"""ViewModel for the Clan Lookup screen.

Separates the search / display / favorite workflow from the Qt widget so unit
tests can exercise every transition without a QApplication.

State is a single frozen ``LookupState`` value replaced wholesale on each
transition. Listeners registered with ``listen`` receive every new state.

Threading contract (enforced by the view, not here):
 - ``fetch`` and ``write_favorite`` do blocking I/O and may run on a worker.
 - Every other method mutates state and must run on the GUI thread.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, replace
from enum import Enum
from typing import Callable, Dict, List, Optional, Protocol, Set, Tuple

from domain.errors import (
    FAVORITE_WRITE_FAILED,
    NO_CONNECTION,
    UNKNOWN,
    FavoriteWriteError,
    LookupFailure,
)
from domain.mapping import favorite_from_clan
from domain.models import Clan, FavoriteRecord
from gui.i18n import t
from gui.repositories.protocols import FavoritesSnapshot, FavoritesStore
from gui.services.event_bus import EventBus, GUIEvent, Subscription

__all__ = [
    "Phase",
    "LookupState",
    "LookupResult",
    "FavoriteWrite",
    "ClanFields",
    "ClanLookupViewModel",
    "message_for_code",
    "capitalize",
]

log = logging.getLogger(__name__)


class ClanDirectory(Protocol):
    def lookup(self, query: str) -> Clan: ...  # pragma: no cover - structural


class Connectivity(Protocol):
    def is_connected(self) -> bool: ...  # pragma: no cover - structural


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    DISPLAYED = "displayed"
    ERROR = "error"


@dataclass(frozen=True)
class LookupState:
    phase: Phase = Phase.IDLE
    clan: Optional[Clan] = None
    is_favorite: bool = False
    error_code: Optional[str] = None
    message: Optional[str] = None
    generation: int = 0  # bumped per submitted search
    error_seq: int = 0  # bumped per surfaced error, lets the view re-show equal messages
    writing: bool = False  # favorite write for the displayed clan still in flight

    @property
    def clan_visible(self) -> bool:
        return self.phase is Phase.DISPLAYED and self.clan is not None

    @property
    def loader_visible(self) -> bool:
        return self.phase is Phase.LOADING


@dataclass(frozen=True)
class LookupResult:
    generation: int
    clan: Optional[Clan] = None
    error_code: Optional[str] = None


@dataclass(frozen=True)
class FavoriteWrite:
    """Planned store write: insert ``record`` or delete by ``tag``."""

    tag: str
    record: Optional[FavoriteRecord] = None

    @property
    def is_insert(self) -> bool:
        return self.record is not None


@dataclass(frozen=True)
class ClanFields:
    name: str
    tag: str
    location: str
    members: str
    points: str
    wars_won: str
    war_frequency: str
    type: str
    required_trophies: str

    def as_dict(self) -> Dict[str, str]:
        return asdict(self)


# code -> (message key, interpolation variables)
_MESSAGES: Dict[str, Tuple[str, Dict[str, str]]] = {
    "400": ("error.bad_request", {}),
    "403": ("error.unauthorized", {}),
    "404": ("error.not_found", {"resource": "resource.clan"}),
    "429": ("error.too_many_requests", {}),
    "503": ("error.maintenance", {}),
    NO_CONNECTION: ("error.no_connection", {}),
    FAVORITE_WRITE_FAILED: ("error.favorite_write_failed", {}),
}


def message_for_code(code: Optional[str]) -> str:
    """Static error-code to user message table; unknown codes get the generic text."""
    key, variables = _MESSAGES.get(str(code), ("error.server", {}))
    return t(key, **{name: t(value) for name, value in variables.items()})


def capitalize(value: str) -> str:
    return value[:1].upper() + value[1:]


class ClanLookupViewModel:
    """Search-and-favorite workflow for a single displayed clan."""

    def __init__(
        self,
        client: ClanDirectory,
        probe: Connectivity,
        store: Optional[FavoritesStore] = None,
        *,
        event_bus: Optional[EventBus] = None,
    ):
        self._client = client
        self._probe = probe
        self._store = store
        self._bus = event_bus
        self._state = LookupState()
        self._snapshot: FavoritesSnapshot = ()
        self._listeners: List[Callable[[LookupState], None]] = []
        self._subscription: Optional[Subscription] = None
        self._pending_writes: Set[str] = set()  # tags with a store write in flight

    # ------------------------------------------------------------------
    # Observation
    # ------------------------------------------------------------------
    @property
    def state(self) -> LookupState:
        return self._state

    @property
    def snapshot(self) -> FavoritesSnapshot:
        return self._snapshot

    def listen(self, callback: Callable[[LookupState], None]) -> None:
        self._listeners.append(callback)

    def _set_state(self, state: LookupState) -> None:
        self._state = state
        for cb in list(self._listeners):
            cb(state)

    # ------------------------------------------------------------------
    # Favorites subscription lifecycle
    # ------------------------------------------------------------------
    def start(self, handler: Optional[Callable[[FavoritesSnapshot], None]] = None) -> None:
        """Subscribe to the favorites store.

        ``handler`` lets the view marshal snapshots onto the GUI thread before
        they reach ``on_favorites_snapshot``; by default they are applied
        directly.
        """
        if self._store is None or self._subscription is not None:
            return
        self._subscription = self._store.subscribe(handler or self.on_favorites_snapshot)

    def shutdown(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
        self._listeners.clear()

    def cancel_lookups(self) -> None:
        """Close the directory client so an in-flight ``fetch`` fails fast."""
        close = getattr(self._client, "close", None)
        if callable(close):
            close()

    def on_favorites_snapshot(self, snapshot: FavoritesSnapshot) -> None:
        self._snapshot = tuple(snapshot)
        clan = self._state.clan
        if clan is None:
            return
        is_fav = self._is_favorite(clan.tag)
        if is_fav != self._state.is_favorite:
            self._set_state(replace(self._state, is_favorite=is_fav))

    def _is_favorite(self, tag: str) -> bool:
        return any(rec.tag == tag for rec in self._snapshot)

    # ------------------------------------------------------------------
    # Search
    # ------------------------------------------------------------------
    def submit_query(self, query: Optional[str]) -> bool:
        """Start a search. Returns False (not handled) for an absent query."""
        if query is None:
            return False
        log.info("Clan query submitted: %s", query)
        self._set_state(
            LookupState(
                phase=Phase.LOADING,
                generation=self._state.generation + 1,
                error_seq=self._state.error_seq,
            )
        )
        return True

    def fetch(self, query: str, generation: Optional[int] = None) -> LookupResult:
        """Blocking connectivity check + directory lookup (worker-safe)."""
        gen = self._state.generation if generation is None else generation
        if not self._probe.is_connected():
            return LookupResult(generation=gen, error_code=NO_CONNECTION)
        try:
            return LookupResult(generation=gen, clan=self._client.lookup(query))
        except LookupFailure as e:
            return LookupResult(generation=gen, error_code=e.code)
        except Exception:  # noqa: BLE001 - uncategorized failures still end in the error banner
            log.exception("Unexpected failure looking up %r", query)
            return LookupResult(generation=gen, error_code=UNKNOWN)

    def apply_result(self, result: LookupResult) -> bool:
        """Apply a fetch result; stale generations are dropped (returns False)."""
        if result.generation != self._state.generation:
            log.debug(
                "Dropping stale lookup result (generation %s, current %s)",
                result.generation,
                self._state.generation,
            )
            return False
        if result.clan is not None:
            clan = result.clan
            self._set_state(
                LookupState(
                    phase=Phase.DISPLAYED,
                    clan=clan,
                    is_favorite=self._is_favorite(clan.tag),
                    generation=result.generation,
                    error_seq=self._state.error_seq,
                    writing=clan.tag in self._pending_writes,
                )
            )
            self._publish(GUIEvent.CLAN_DISPLAYED, {"tag": clan.tag, "name": clan.name})
        else:
            self._fail(result.error_code or UNKNOWN, keep_clan=False)
        return True

    def resolve_query(self, query: str, generation: Optional[int] = None) -> LookupState:
        """Synchronous fetch + apply (defaults to the current search generation)."""
        self.apply_result(self.fetch(query, generation))
        return self._state

    # ------------------------------------------------------------------
    # Errors
    # ------------------------------------------------------------------
    def _fail(self, code: str, *, keep_clan: bool) -> None:
        message = message_for_code(code)
        log.warning("Clan lookup error %s: %s", code, message)
        base = self._state
        if keep_clan:
            new_state = replace(base, error_code=code, message=message, error_seq=base.error_seq + 1)
        else:
            new_state = LookupState(
                phase=Phase.ERROR,
                error_code=code,
                message=message,
                generation=base.generation,
                error_seq=base.error_seq + 1,
            )
        self._set_state(new_state)
        self._publish(GUIEvent.ERROR_OCCURRED, {"code": code, "message": message})

    def dismiss_error(self) -> None:
        """Banner timed out: leave ERROR for IDLE (panel stays hidden)."""
        s = self._state
        if s.phase is Phase.ERROR:
            self._set_state(LookupState(generation=s.generation, error_seq=s.error_seq))
        elif s.message is not None:
            self._set_state(replace(s, error_code=None, message=None))

    # ------------------------------------------------------------------
    # Favorites
    # ------------------------------------------------------------------
    def plan_toggle(self) -> Optional[FavoriteWrite]:
        """Decide insert vs delete for the displayed clan and mark the write pending.

        Returns None when nothing is displayed or a write for the same tag has
        not been applied yet; every returned plan must be settled with
        ``apply_favorite_written`` or ``apply_favorite_failed``.
        """
        clan = self._state.clan
        if self._state.phase is not Phase.DISPLAYED or clan is None:
            return None
        if clan.tag in self._pending_writes:
            log.debug("Favorite write for %s already in flight", clan.tag)
            return None
        if self._is_favorite(clan.tag):
            plan = FavoriteWrite(tag=clan.tag)
        else:
            plan = FavoriteWrite(tag=clan.tag, record=favorite_from_clan(clan))
        self._pending_writes.add(clan.tag)
        self._set_state(replace(self._state, writing=True))
        return plan

    def write_favorite(self, plan: FavoriteWrite) -> bool:
        """Perform the store write (worker-safe). Returns the new favorite status."""
        if self._store is None:
            raise FavoriteWriteError("No favorites store configured")
        try:
            if plan.record is not None:
                self._store.insert(plan.record)
                return True
            self._store.delete_by_tag(plan.tag)
            return False
        except Exception as e:  # noqa: BLE001 - any storage failure becomes a banner
            raise FavoriteWriteError(f"Favorite write failed for {plan.tag}: {e}") from e

    def apply_favorite_written(self, tag: str, now_favorite: bool) -> None:
        self._pending_writes.discard(tag)
        clan = self._state.clan
        if clan is None or clan.tag != tag:
            return
        self._set_state(replace(self._state, is_favorite=now_favorite, writing=False))

    def apply_favorite_failed(self, tag: str) -> None:
        self._pending_writes.discard(tag)
        clan = self._state.clan
        if clan is None or clan.tag != tag:
            return
        # _fail keeps the clan and notifies listeners with the cleared flag
        self._state = replace(self._state, writing=False)
        self._fail(FAVORITE_WRITE_FAILED, keep_clan=True)

    def toggle_favorite(self) -> Optional[bool]:
        """Synchronous plan + write + apply. Returns new status or None if nothing shown."""
        plan = self.plan_toggle()
        if plan is None:
            return None
        try:
            now_favorite = self.write_favorite(plan)
        except FavoriteWriteError:
            log.exception("Favorite toggle failed for %s", plan.tag)
            self.apply_favorite_failed(plan.tag)
            return None
        self.apply_favorite_written(plan.tag, now_favorite)
        return now_favorite

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def render_fields(self) -> Optional[ClanFields]:
        clan = self._state.clan
        if clan is None:
            return None
        unset = t("field.unset")
        return ClanFields(
            name=clan.name,
            tag=clan.tag,
            location=clan.location_name or unset,
            members=str(clan.members),
            points=str(clan.clan_points),
            wars_won=str(clan.war_wins),
            war_frequency=capitalize(clan.war_frequency),
            type=capitalize(clan.type) if clan.type else unset,
            required_trophies=str(clan.required_trophies),
        )

    def _publish(self, event: GUIEvent, payload: dict) -> None:
        if self._bus is not None:
            self._bus.publish(event, payload)
