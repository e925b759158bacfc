import os
import sys

from PyQt6.QtWidgets import QApplication

from gui import workers
from gui.viewmodels.clan_lookup_viewmodel import ClanLookupViewModel
from gui.workers import ClanLookupWorker
from tests.factories import SlowClient, StubClient, StubProbe, make_clan


def _app():
    os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    return QApplication.instance() or QApplication(sys.argv)


def test_interrupted_lookup_drops_result(qtbot):
    _app()
    client = SlowClient()
    vm = ClanLookupViewModel(client, StubProbe())
    vm.submit_query("#2PP")
    results = []
    worker = ClanLookupWorker(vm, "#2PP", vm.state.generation)
    worker.finished.connect(results.append)
    worker.start()
    assert client.entered.wait(5.0)
    worker.requestInterruption()
    workers.retire(worker)
    assert workers.retired_count() == 1
    client.release()
    assert workers.wait_for_workers(5000)
    qtbot.wait(50)
    assert workers.retired_count() == 0
    assert results == []


def test_wait_for_workers_times_out_on_stuck_thread():
    _app()
    client = SlowClient(max_block_s=2.0)
    vm = ClanLookupViewModel(client, StubProbe())
    worker = ClanLookupWorker(vm, "#2PP", 0)
    worker.start()
    try:
        assert client.entered.wait(5.0)
        workers.retire(worker)
        assert workers.wait_for_workers(50) is False
    finally:
        client.release()
        assert workers.wait_for_workers(5000)


def test_retire_ignores_finished_worker(qtbot):
    _app()
    vm = ClanLookupViewModel(StubClient(make_clan()), StubProbe())
    worker = ClanLookupWorker(vm, "#2PP", 0)
    worker.start()
    assert worker.wait(5000)
    workers.retire(worker)
    assert workers.retired_count() == 0
