"""Tests for engine configuration persistence."""

from afterlife.config import (
    DEFAULT_CONFIG,
    get_config_path,
    load_config,
    merge_config,
    save_config,
    set_final_week,
    set_seed,
)


class TestConfig:

    def test_defaults_when_missing(self, tmp_path):
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_round_trip(self, tmp_path):
        config = merge_config({"final_week": 20, "rest_click_limit": 5})
        assert save_config(config, tmp_path)
        loaded = load_config(tmp_path)
        assert loaded["final_week"] == 20
        assert loaded["rest_click_limit"] == 5
        assert loaded["weekly_decay"] == 10

    def test_merge_drops_unknown_keys(self):
        config = merge_config({"final_week": 10, "backend": "claude"})
        assert config["final_week"] == 10
        assert "backend" not in config

    def test_merge_leaves_defaults_untouched(self):
        merge_config({"final_week": 3})
        assert DEFAULT_CONFIG["final_week"] == 45

    def test_corrupt_file_falls_back(self, tmp_path):
        get_config_path(tmp_path).write_text("{oops", encoding="utf-8")
        assert load_config(tmp_path) == DEFAULT_CONFIG

    def test_setters_persist(self, tmp_path):
        set_final_week(30, tmp_path)
        set_seed(1234, tmp_path)
        loaded = load_config(tmp_path)
        assert loaded["final_week"] == 30
        assert loaded["seed"] == 1234
