import json
import logging

import pytest

from gui.services.logging_service import LoggingService, configure_logging, get_logging_service
from gui.services.service_locator import services


@pytest.fixture()
def setup_logging():
    svc = LoggingService(capacity=5)
    services.register("logging_service", svc, allow_override=True)
    svc.attach_root()
    yield svc
    svc.detach_root()


def test_logging_capture_and_retrieve(setup_logging):
    svc = setup_logging
    logging.getLogger("gui.views").info("Clan query submitted: %s", "#2PP")
    assert any(e.message == "Clan query submitted: #2PP" for e in svc.recent())
    assert get_logging_service() is svc


def test_logging_capacity_eviction(setup_logging):
    svc = setup_logging
    for i in range(10):
        logging.getLogger("cap").info("M%d", i)
    recents = svc.recent()
    assert len(recents) == 5  # capacity
    assert recents[0].message.endswith("5")  # first retained after evictions
    assert len(svc.recent(limit=2)) == 2


def test_logging_filtering(setup_logging):
    svc = setup_logging
    logging.getLogger("gui.repositories").debug("Favorite inserted")
    logging.getLogger("core.http_client").warning("Clan lookup transport failure")
    warnings = svc.filter(min_level="warning")
    assert [e.message for e in warnings] == ["Clan lookup transport failure"]
    assert len(svc.filter(min_level=logging.DEBUG)) == 2
    http = svc.filter(name_contains="http")
    assert http and all("http" in e.name for e in http)


def test_export_jsonl(setup_logging, tmp_path):
    svc = setup_logging
    logging.getLogger("exp").info("one")
    logging.getLogger("exp").error("two")
    out = tmp_path / "logs.jsonl"
    assert svc.export_jsonl(out, min_level="ERROR") == 1
    lines = out.read_text(encoding="utf-8").splitlines()
    assert json.loads(lines[0])["message"] == "two"


def test_export_skips_file_when_nothing_matches(setup_logging, tmp_path):
    svc = setup_logging
    logging.getLogger("exp").info("routine")
    out = tmp_path / "logs.jsonl"
    assert svc.export_jsonl(out, min_level=logging.WARNING) == 0
    assert not out.exists()


def test_unknown_level_name_rejected(setup_logging):
    with pytest.raises(ValueError):
        setup_logging.filter(min_level="chatty")


def test_clear_and_detach(setup_logging):
    svc = setup_logging
    logging.getLogger("x").info("before")
    svc.clear()
    assert svc.recent() == []
    svc.detach_root()
    logging.getLogger("x").info("after")
    assert svc.recent() == []


def test_configure_logging_idempotent():
    root = logging.getLogger()
    before = [h for h in root.handlers if type(h) is logging.StreamHandler]
    try:
        configure_logging("warning")
        configure_logging(logging.DEBUG)
        after = [h for h in root.handlers if type(h) is logging.StreamHandler]
        assert len(after) == max(1, len(before))
    finally:
        for h in root.handlers[:]:
            if type(h) is logging.StreamHandler and h not in before:
                root.removeHandler(h)
