"""Tests for ClanLookupViewModel (pure python, no Qt)."""

from __future__ import annotations

import threading

import pytest

from domain.errors import ClientError, FAVORITE_WRITE_FAILED, NO_CONNECTION, UNKNOWN, UnknownError
from domain.mapping import favorite_from_clan
from gui.services.event_bus import EventBus, GUIEvent
from gui.viewmodels.clan_lookup_viewmodel import (
    ClanLookupViewModel,
    Phase,
    capitalize,
    message_for_code,
)
from tests.factories import (
    FailingStore,
    SlowClient,
    StubClient,
    StubProbe,
    make_clan,
    make_conn,
    make_store,
)


def _vm(clan=None, *, connected=True, store=None, error=None, bus=None):
    client = StubClient(clan or make_clan(), error=error)
    probe = StubProbe(connected)
    store = store if store is not None else make_store()
    vm = ClanLookupViewModel(client, probe, store, event_bus=bus)
    vm.start()
    return vm, client, store


def _search(vm, query="#2PP"):
    assert vm.submit_query(query) is True
    return vm.resolve_query(query)


def test_initial_state_hidden():
    vm, _, _ = _vm()
    assert vm.state.phase is Phase.IDLE
    assert not vm.state.clan_visible
    assert not vm.state.loader_visible
    assert vm.render_fields() is None


def test_absent_query_not_handled():
    vm, client, _ = _vm()
    states = []
    vm.listen(states.append)
    assert vm.submit_query(None) is False
    assert states == []
    assert vm.state.generation == 0
    assert client.calls == []


def test_submit_enters_loading():
    vm, _, _ = _vm()
    states = []
    vm.listen(states.append)
    vm.submit_query("#2PP")
    assert states[-1].phase is Phase.LOADING
    assert states[-1].loader_visible
    assert states[-1].clan is None


def test_offline_never_calls_client():
    vm, client, _ = _vm(connected=False)
    state = _search(vm)
    assert state.phase is Phase.ERROR
    assert state.error_code == NO_CONNECTION
    assert state.message == "No internet connection."
    assert client.calls == []


def test_successful_lookup_displays_clan():
    clan = make_clan()
    vm, client, _ = _vm(clan)
    state = _search(vm)
    assert client.calls == ["#2PP"]
    assert state.phase is Phase.DISPLAYED
    assert state.clan is clan
    assert state.is_favorite is False
    assert state.clan_visible and not state.loader_visible


def test_rendered_fields_match_clan():
    clan = make_clan()
    vm, _, _ = _vm(clan)
    _search(vm)
    fields = vm.render_fields()
    assert fields.name == clan.name
    assert fields.tag == clan.tag
    assert fields.location == "International"
    assert fields.members == str(clan.members)
    assert fields.points == str(clan.clan_points)
    assert fields.wars_won == str(clan.war_wins)
    assert fields.required_trophies == str(clan.required_trophies)
    assert fields.war_frequency == "Always"
    assert fields.type == "InviteOnly"


def test_absent_location_and_type_use_placeholder():
    vm, _, _ = _vm(make_clan(location=None, type=None))
    _search(vm)
    fields = vm.render_fields()
    assert fields.location == "Unset"
    assert fields.type == "Unset"
    assert "" not in fields.as_dict().values()


def test_capitalize_first_letter_only():
    assert capitalize("moreThanOncePerWeek") == "MoreThanOncePerWeek"
    assert capitalize("open") == "Open"
    assert capitalize("") == ""


def test_displayed_favorite_flag_from_snapshot():
    store = make_store()
    clan = make_clan()
    store.insert(favorite_from_clan(clan))
    vm, _, _ = _vm(clan, store=store)
    assert _search(vm).is_favorite is True


def test_toggle_inserts_then_removes():
    vm, _, store = _vm()
    _search(vm)
    assert vm.toggle_favorite() is True
    assert vm.state.is_favorite is True
    assert len(store.list_favorites()) == 1
    assert store.list_favorites()[0].tag == "#2PP"

    assert vm.toggle_favorite() is False
    assert vm.state.is_favorite is False
    assert store.list_favorites() == ()


def test_toggle_without_displayed_clan_is_noop():
    vm, _, store = _vm()
    assert vm.plan_toggle() is None
    assert vm.toggle_favorite() is None
    assert store.list_favorites() == ()


def test_plan_toggle_decides_from_membership():
    vm, _, store = _vm()
    _search(vm)
    plan = vm.plan_toggle()
    assert plan.is_insert and plan.record.tag == "#2PP"
    vm.apply_favorite_written(plan.tag, vm.write_favorite(plan))
    assert vm.plan_toggle().is_insert is False


def test_second_toggle_refused_while_write_in_flight():
    vm, _, store = _vm()
    _search(vm)
    plan = vm.plan_toggle()
    assert vm.state.writing is True
    assert vm.plan_toggle() is None
    assert vm.toggle_favorite() is None
    vm.apply_favorite_written(plan.tag, vm.write_favorite(plan))
    assert vm.state.writing is False
    assert vm.state.is_favorite is True
    assert len(store.list_favorites()) == 1


def test_research_keeps_in_flight_write_marked():
    vm, _, _ = _vm()
    _search(vm)
    plan = vm.plan_toggle()
    _search(vm)
    assert vm.state.writing is True
    assert vm.plan_toggle() is None
    vm.apply_favorite_written(plan.tag, vm.write_favorite(plan))
    assert vm.state.writing is False


def test_failed_write_releases_toggle():
    vm, _, _ = _vm(store=FailingStore(make_conn()))
    _search(vm)
    plan = vm.plan_toggle()
    vm.apply_favorite_failed(plan.tag)
    assert vm.state.writing is False
    assert vm.state.error_code == FAVORITE_WRITE_FAILED
    assert vm.plan_toggle() is not None


def test_icon_follows_latest_snapshot_after_interleaved_writes():
    vm, _, store = _vm()
    _search(vm)
    threads = [
        threading.Thread(target=store.insert, args=(favorite_from_clan(make_clan()),)),
        threading.Thread(target=store.delete_by_tag, args=("#2PP",)),
        threading.Thread(target=store.insert, args=(favorite_from_clan(make_clan()),)),
    ]
    for th in threads:
        th.start()
        th.join()
    assert vm.snapshot == store.list_favorites()
    assert vm.state.is_favorite is store.contains("#2PP")


def test_cancel_lookups_closes_client():
    client = SlowClient()
    vm = ClanLookupViewModel(client, StubProbe())
    vm.cancel_lookups()
    assert client.closed
    vm.submit_query("#2PP")
    state = vm.resolve_query("#2PP")
    assert state.phase is Phase.ERROR
    assert client.calls == ["#2PP"]


def test_external_store_change_updates_icon():
    vm, _, store = _vm()
    _search(vm)
    store.insert(favorite_from_clan(make_clan()))
    assert vm.state.is_favorite is True
    store.delete_by_tag("#2PP")
    assert vm.state.is_favorite is False


def test_shutdown_cancels_subscription():
    vm, _, store = _vm()
    _search(vm)
    vm.shutdown()
    store.insert(favorite_from_clan(make_clan()))
    assert vm.state.is_favorite is False


@pytest.mark.parametrize(
    "code,message",
    [
        ("400", "Bad request. Check the clan tag and try again."),
        ("403", "Unauthorized request. Check the API token."),
        ("404", "Resource not found (clan)."),
        ("429", "Too many requests. Please wait a moment."),
        ("503", "The server is under maintenance."),
        (NO_CONNECTION, "No internet connection."),
        (FAVORITE_WRITE_FAILED, "Could not update favorites."),
        ("999", "Server error. Please try again later."),
        ("NETWORK", "Server error. Please try again later."),
        (UNKNOWN, "Server error. Please try again later."),
        (None, "Server error. Please try again later."),
    ],
)
def test_message_table(code, message):
    assert message_for_code(code) == message


@pytest.mark.parametrize("code", ["400", "403", "404", "429", "503", "999"])
def test_client_error_codes_surface(code):
    vm, _, _ = _vm(error=ClientError(code))
    state = _search(vm)
    assert state.phase is Phase.ERROR
    assert state.error_code == code
    assert state.message == message_for_code(code)
    assert state.clan is None


def test_uncategorized_failures_use_generic_message():
    vm, _, _ = _vm(error=UnknownError("bad payload"))
    assert _search(vm).error_code == UNKNOWN
    vm, _, _ = _vm(error=ValueError("boom"))
    state = _search(vm)
    assert state.error_code == UNKNOWN
    assert state.message == "Server error. Please try again later."


def test_stale_result_dropped():
    vm, _, _ = _vm()
    vm.submit_query("#OLD")
    stale = vm.fetch("#OLD", vm.state.generation)
    vm.submit_query("#2PP")
    fresh = vm.fetch("#2PP", vm.state.generation)
    assert vm.apply_result(stale) is False
    assert vm.state.phase is Phase.LOADING
    assert vm.apply_result(fresh) is True
    assert vm.state.phase is Phase.DISPLAYED


def test_favorite_write_failure_keeps_panel():
    vm, _, _ = _vm(store=FailingStore(make_conn()))
    _search(vm)
    assert vm.toggle_favorite() is None
    state = vm.state
    assert state.phase is Phase.DISPLAYED
    assert state.is_favorite is False
    assert state.error_code == FAVORITE_WRITE_FAILED
    assert state.message == "Could not update favorites."


def test_dismiss_error_returns_to_idle():
    vm, _, _ = _vm(connected=False)
    _search(vm)
    vm.dismiss_error()
    assert vm.state.phase is Phase.IDLE
    assert vm.state.message is None
    assert not vm.state.clan_visible


def test_dismiss_after_write_failure_keeps_clan():
    vm, _, _ = _vm(store=FailingStore(make_conn()))
    _search(vm)
    vm.toggle_favorite()
    vm.dismiss_error()
    assert vm.state.phase is Phase.DISPLAYED
    assert vm.state.message is None


def test_repeated_errors_bump_sequence():
    vm, _, _ = _vm(connected=False)
    first = _search(vm).error_seq
    second = _search(vm).error_seq
    assert second == first + 1


def test_events_published():
    bus = EventBus()
    seen = []
    bus.subscribe(GUIEvent.CLAN_DISPLAYED, lambda e: seen.append(("shown", e.payload["tag"])))
    bus.subscribe(GUIEvent.ERROR_OCCURRED, lambda e: seen.append(("error", e.payload["code"])))
    vm, _, _ = _vm(bus=bus)
    _search(vm)
    vm._probe.connected = False
    _search(vm)
    assert seen == [("shown", "#2PP"), ("error", NO_CONNECTION)]
