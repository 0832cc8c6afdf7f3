"""Tests for configuration loading, environment overrides and saving."""

import json

import pytest
import yaml

from scrimstats.core.config import (
    ScrimStatsConfig,
    dict_to_config,
    get_config,
    load_config,
    load_env_config,
    merge_configs,
    reset_config,
    save_config,
    set_config,
)


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Keep the cwd, XDG dir and SCRIMSTATS_* env out of the tests."""
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    for var in (
        "SCRIMSTATS_LOG_LEVEL",
        "SCRIMSTATS_LOG_FILE",
        "SCRIMSTATS_EXPORT_FORMAT",
        "SCRIMSTATS_BALANCER_STRATEGY",
        "SCRIMSTATS_MAX_LOBBY_SIZE",
        "SCRIMSTATS_SNIPER_KILL_SHARE",
        "SCRIMSTATS_IMPACT_DAMPING",
    ):
        monkeypatch.delenv(var, raising=False)
    reset_config()
    yield
    reset_config()


class TestDefaults:
    def test_defaults(self):
        config = load_config()
        assert config.balancer.strategy == "greedy"
        assert config.balancer.max_lobby_size == 10
        assert config.rating.sniper_kill_share == pytest.approx(0.40)
        assert config.playstyle.firepower_target == 100
        assert config.logging.level == "INFO"

    def test_unknown_keys_ignored(self):
        config = dict_to_config({"balancer": {"strategy": "exhaustive", "bogus": 1}, "nope": {}})
        assert config.balancer.strategy == "exhaustive"
        assert not hasattr(config.balancer, "bogus")


class TestFiles:
    def test_yaml_in_cwd(self, tmp_path):
        (tmp_path / "scrimstats.yaml").write_text(
            yaml.safe_dump({"rating": {"impact_damping": 0.9}, "export": {"default_format": "json"}})
        )
        config = load_config()
        assert config.rating.impact_damping == pytest.approx(0.9)
        assert config.export.default_format == "json"

    def test_explicit_json_file(self, tmp_path):
        path = tmp_path / "custom.json"
        path.write_text(json.dumps({"playstyle": {"utility_target": 250}}))
        assert load_config(path).playstyle.utility_target == 250

    def test_explicit_toml_file(self, tmp_path):
        path = tmp_path / "custom.toml"
        path.write_text('[balancer]\nstrategy = "exhaustive"\nexhaustive_max_pool = 10\n')
        config = load_config(path)
        assert config.balancer.strategy == "exhaustive"
        assert config.balancer.exhaustive_max_pool == 10

    def test_missing_file_gives_defaults(self, tmp_path):
        assert load_config(tmp_path / "absent.yaml") == ScrimStatsConfig()


class TestEnvironment:
    def test_env_values_converted(self, monkeypatch):
        monkeypatch.setenv("SCRIMSTATS_MAX_LOBBY_SIZE", "12")
        monkeypatch.setenv("SCRIMSTATS_SNIPER_KILL_SHARE", "0.5")
        monkeypatch.setenv("SCRIMSTATS_LOG_LEVEL", "DEBUG")
        env = load_env_config()
        assert env["balancer"]["max_lobby_size"] == 12
        assert env["rating"]["sniper_kill_share"] == pytest.approx(0.5)
        assert env["logging"]["level"] == "DEBUG"

    def test_env_overrides_file(self, tmp_path, monkeypatch):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.safe_dump({"balancer": {"strategy": "exhaustive", "max_lobby_size": 8}}))
        monkeypatch.setenv("SCRIMSTATS_BALANCER_STRATEGY", "greedy")
        config = load_config(path)
        assert config.balancer.strategy == "greedy"
        assert config.balancer.max_lobby_size == 8

    def test_env_can_be_skipped(self, monkeypatch):
        monkeypatch.setenv("SCRIMSTATS_BALANCER_STRATEGY", "exhaustive")
        assert load_config(include_env=False).balancer.strategy == "greedy"

    def test_merge_is_recursive(self):
        merged = merge_configs({"a": {"x": 1, "y": 2}}, {"a": {"y": 3}})
        assert merged == {"a": {"x": 1, "y": 3}}


class TestSaveAndGlobal:
    def test_save_roundtrip_yaml(self, tmp_path):
        config = ScrimStatsConfig()
        config.balancer.strategy = "exhaustive"
        path = tmp_path / "out.yaml"
        save_config(config, path)
        assert load_config(path, include_env=False).balancer.strategy == "exhaustive"

    def test_save_unsupported_format(self, tmp_path):
        with pytest.raises(ValueError):
            save_config(ScrimStatsConfig(), tmp_path / "out.ini")

    def test_global_config(self):
        custom = ScrimStatsConfig()
        custom.export.float_precision = 4
        set_config(custom)
        assert get_config().export.float_precision == 4
        reset_config()
        assert get_config().export.float_precision == 2
