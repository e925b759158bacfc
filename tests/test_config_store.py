import json

from gui.app.config_store import AppConfig, CONFIG_VERSION, DEFAULT_FILENAME, load_config, save_config


def test_round_trip(tmp_path):
    cfg = AppConfig(window_x=10, window_y=20, window_w=400, window_h=500, last_query="#2PP")
    path = save_config(cfg, tmp_path)
    assert path.name == DEFAULT_FILENAME
    loaded = load_config(tmp_path)
    assert loaded == cfg
    assert loaded.is_geometry_complete()


def test_missing_file_defaults(tmp_path):
    cfg = load_config(tmp_path)
    assert cfg.version == CONFIG_VERSION
    assert cfg.last_query is None
    assert not cfg.is_geometry_complete()


def test_corrupt_file_defaults(tmp_path):
    (tmp_path / DEFAULT_FILENAME).write_text("{not json", encoding="utf-8")
    assert load_config(tmp_path) == AppConfig()
    (tmp_path / DEFAULT_FILENAME).write_text("[1, 2]", encoding="utf-8")
    assert load_config(tmp_path) == AppConfig()


def test_version_mismatch_keeps_last_query(tmp_path):
    data = {"version": CONFIG_VERSION + 1, "window_x": 1, "last_query": "#ABC"}
    (tmp_path / DEFAULT_FILENAME).write_text(json.dumps(data), encoding="utf-8")
    cfg = load_config(tmp_path)
    assert cfg.last_query == "#ABC"
    assert cfg.window_x is None
