"""Tests for the typer command line interface."""

import json
import logging

import pandas as pd
import pytest
from typer.testing import CliRunner

from scrimstats import __version__
from scrimstats.cli import app
from scrimstats.core.config import get_config, reset_config

runner = CliRunner()


@pytest.fixture(autouse=True)
def fresh_config(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path / "xdg"))
    # Keep info logs out of the captured output so --json stays parseable
    monkeypatch.setenv("SCRIMSTATS_LOG_LEVEL", "WARNING")
    reset_config()
    yield
    reset_config()


@pytest.fixture
def backup(tmp_path, make_player):
    """A backup file with two matches and four players."""
    ratings = {"1": 1.6, "2": 1.2, "3": 0.9, "4": 0.7}
    names = {"1": "alpha", "2": "bravo", "3": "charlie", "4": "delta"}

    def match(match_id, timestamp, duels=None):
        return {
            "id": match_id,
            "filename": f"{match_id}.json",
            "timestamp": timestamp,
            "data": [
                make_player(sid, names[sid], hltv_3_0_score=r, duels=(duels or {}).get(sid, {}))
                for sid, r in ratings.items()
            ],
        }

    path = tmp_path / "backup.json"
    path.write_text(
        json.dumps(
            [
                match("m1", 1_700_000_000_000, {"1": {"2": {"opponent_name": "bravo", "kills": 3, "deaths": 1, "diff": 2}}}),
                match("m2", 1_700_100_000_000),
            ]
        )
    )
    return path


class TestCommands:
    def test_version(self):
        result = runner.invoke(app, ["--version"])
        assert result.exit_code == 0
        assert __version__ in result.output

    def test_leaderboard(self, backup):
        result = runner.invoke(app, ["leaderboard", str(backup)])
        assert result.exit_code == 0
        assert result.output.index("alpha") < result.output.index("delta")

    def test_leaderboard_bad_sort(self, backup):
        result = runner.invoke(app, ["leaderboard", str(backup), "--sort", "nonsense"])
        assert result.exit_code == 1

    def test_profile_by_name(self, backup):
        result = runner.invoke(app, ["profile", str(backup), "charlie"])
        assert result.exit_code == 0
        assert "Playstyle" in result.output

    def test_profile_unknown_player(self, backup):
        result = runner.invoke(app, ["profile", str(backup), "nobody"])
        assert result.exit_code == 1
        assert "not found" in result.output

    def test_duel(self, backup):
        result = runner.invoke(app, ["duel", str(backup), "alpha", "bravo"])
        assert result.exit_code == 0
        assert "3 : 1" in result.output

    def test_summary(self, backup):
        result = runner.invoke(app, ["summary", str(backup)])
        assert result.exit_code == 0
        assert "Dashboard" in result.output


class TestMatchCommand:
    def test_lists_newest_first(self, backup):
        result = runner.invoke(app, ["match", str(backup)])
        assert result.exit_code == 0
        assert result.output.index("m2.json") < result.output.index("m1.json")

    def test_search_filters_list(self, backup):
        result = runner.invoke(app, ["match", str(backup), "--search", "M1"])
        assert result.exit_code == 0
        assert "m1.json" in result.output
        assert "m2.json" not in result.output

    def test_scoreboard_and_duels(self, backup):
        result = runner.invoke(app, ["match", str(backup), "m1", "--player", "alpha"])
        assert result.exit_code == 0
        assert "Duels: alpha" in result.output
        assert "+2" in result.output

    def test_unknown_match(self, backup):
        result = runner.invoke(app, ["match", str(backup), "nope"])
        assert result.exit_code == 1


class TestVerbose:
    def test_verbose_does_not_leak_into_global_config(self, backup):
        assert runner.invoke(app, ["--verbose", "summary", str(backup)]).exit_code == 0
        assert logging.getLogger().level == logging.DEBUG
        assert get_config().logging.level == "WARNING"

        assert runner.invoke(app, ["summary", str(backup)]).exit_code == 0
        assert logging.getLogger().level == logging.WARNING


class TestBalanceCommand:
    def test_balance_json(self, backup):
        result = runner.invoke(app, ["balance", str(backup), "1", "2", "3", "4", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert [p["steam_id"] for p in data["team1"]] == ["1", "4"]
        assert [p["steam_id"] for p in data["team2"]] == ["2", "3"]

    def test_balance_with_pin(self, backup):
        result = runner.invoke(app, ["balance", str(backup), "1", "2", "3", "--team1", "delta", "--json"])
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["team1"][0]["steam_id"] == "4"

    def test_odd_lobby_rejected(self, backup):
        result = runner.invoke(app, ["balance", str(backup), "1", "2", "3"])
        assert result.exit_code == 1
        assert "Cannot build teams" in result.output

    def test_unknown_strategy(self, backup):
        result = runner.invoke(app, ["balance", str(backup), "1", "2", "--strategy", "coinflip"])
        assert result.exit_code == 1


class TestFilesAndConfig:
    def test_export_csv(self, backup, tmp_path):
        out = tmp_path / "board.csv"
        result = runner.invoke(app, ["export", str(backup), str(out)])
        assert result.exit_code == 0
        df = pd.read_csv(out, dtype={"steam_id": str})
        assert list(df["steam_id"]) == ["1", "2", "3", "4"]
        assert (df["matches"] == 2).all()

    def test_export_json(self, backup, tmp_path):
        out = tmp_path / "board.json"
        assert runner.invoke(app, ["export", str(backup), str(out)]).exit_code == 0
        rows = json.loads(out.read_text())
        assert rows[0]["name"] == "alpha"

    def test_invalid_backup(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"not": "a list"}))
        result = runner.invoke(app, ["leaderboard", str(path)])
        assert result.exit_code == 1

    def test_init_config(self, tmp_path):
        path = tmp_path / "scrimstats.yaml"
        assert runner.invoke(app, ["init-config", str(path)]).exit_code == 0
        assert path.exists()
        assert runner.invoke(app, ["init-config", str(path)]).exit_code == 1
        assert runner.invoke(app, ["init-config", str(path), "--force"]).exit_code == 0
