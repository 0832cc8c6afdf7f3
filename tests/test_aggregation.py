"""
Tests for career stat aggregation.

Covers summing, match counting, latest-wins names, clutch bracket sums,
and the full-replay properties (determinism and removal).
"""

import pytest

from scrimstats.analysis.aggregation import (
    aggregate_by_steamid,
    aggregate_player_stats,
    find_player,
    player_match_history,
    replay_order,
    without_matches,
)
from scrimstats.analysis.derived import average_rating


class TestAggregatePlayerStats:
    """Tests for aggregate_player_stats."""

    def test_same_player_twice(self, make_player, make_match):
        """Two matches for the same id sum their stats."""
        matches = [
            make_match("a", [make_player("1", kills=20, deaths=10, rounds_played=24, hltv_3_0_score=1.2)]),
            make_match("b", [make_player("1", kills=20, deaths=10, rounds_played=24, hltv_3_0_score=0.8)]),
        ]
        players = aggregate_player_stats(matches)

        assert len(players) == 1
        p = players[0]
        assert p.steam_id == "1"
        assert p.matches == 2
        assert p.kills == 40
        assert p.deaths == 20
        assert p.rounds_played == 48
        assert average_rating(p) == pytest.approx((1.2 + 0.8) / 2)

    def test_one_aggregate_per_steam_id(self, three_matches):
        players = aggregate_player_stats(three_matches)
        assert sorted(p.steam_id for p in players) == ["1", "2", "3", "4"]

    def test_matches_counts_appearances(self, three_matches):
        by_id = aggregate_by_steamid(three_matches)
        assert by_id["1"].matches == 2
        assert by_id["2"].matches == 2
        assert by_id["3"].matches == 1

    def test_numeric_and_string_ids_merge(self, make_player, make_match):
        matches = [
            make_match("a", [make_player(76561198000000001)]),
            make_match("b", [make_player("76561198000000001")]),
        ]
        players = aggregate_player_stats(matches)
        assert len(players) == 1
        assert players[0].matches == 2

    def test_clutch_brackets_summed(self, make_player, make_match):
        """Brackets {1v1: 2, 1v2: 1, rest 0} add 3 clutches for the match."""
        matches = [
            make_match(
                "a",
                [
                    make_player(
                        "1",
                        clutches_won_1v1=2,
                        clutches_won_1v2=1,
                        clutches_won_1v3=0,
                        clutches_won_1v4=0,
                        clutches_won_1v5=0,
                    )
                ],
            )
        ]
        assert aggregate_player_stats(matches)[0].clutches_won == 3

    def test_missing_optional_fields_tolerated(self, make_player, make_match):
        old = make_player("1")
        new = make_player("1", trade_kills=4, clutches_won_1v3=1)
        players = aggregate_player_stats([make_match("a", [old]), make_match("b", [new])])
        assert players[0].trade_kills == 4
        assert players[0].clutches_won == 1

    def test_every_counting_stat_summed(self, make_player, make_match):
        record = make_player(
            "1",
            assists=3,
            damage_total=2000.5,
            sniper_kills=6,
            utility_damage=120.0,
            flashes_thrown=9,
            opening_kills=2,
            opening_deaths=4,
            opening_attempts=6,
            trade_kills=3,
        )
        p = aggregate_player_stats([make_match("a", [record]), make_match("b", [record])])[0]
        assert p.assists == 6
        assert p.damage_total == pytest.approx(4001.0)
        assert p.sniper_kills == 12
        assert p.utility_damage == pytest.approx(240.0)
        assert p.flashes_thrown == 18
        assert p.opening_kills == 4
        assert p.opening_deaths == 8
        assert p.opening_attempts == 12
        assert p.trade_kills == 6

    def test_empty_collection(self):
        assert aggregate_player_stats([]) == []

    def test_input_not_mutated(self, three_matches):
        before = [m.to_dict() for m in three_matches]
        aggregate_player_stats(three_matches)
        assert [m.to_dict() for m in three_matches] == before


class TestLatestName:
    """The display name comes from the most recent match."""

    def test_latest_timestamp_wins(self, three_matches):
        # "alpha_new" is from m2, the newest match containing player 1
        assert aggregate_by_steamid(three_matches)["1"].name == "alpha_new"

    def test_independent_of_input_order(self, three_matches):
        reversed_players = aggregate_by_steamid(list(reversed(three_matches)))
        assert reversed_players["1"].name == "alpha_new"

    def test_equal_timestamps_keep_input_order(self, make_player, make_match):
        matches = [
            make_match("a", [make_player("1", "first")], timestamp=5),
            make_match("b", [make_player("1", "second")], timestamp=5),
        ]
        assert aggregate_player_stats(matches)[0].name == "second"

    def test_replay_order_is_chronological(self, three_matches):
        assert [m.id for m in replay_order(three_matches)] == ["m1", "m3", "m2"]


class TestReplayProperties:
    """Aggregation is a deterministic full replay."""

    def test_idempotent(self, three_matches):
        assert aggregate_player_stats(three_matches) == aggregate_player_stats(three_matches)

    def test_removal_equals_never_added(self, three_matches):
        remaining = without_matches(three_matches, ["m2"])
        never_added = [m for m in three_matches if m.id != "m2"]
        assert aggregate_player_stats(remaining) == aggregate_player_stats(never_added)

    def test_removal_drops_player_and_decreases_sums(self, three_matches):
        full = aggregate_by_steamid(three_matches)
        after = aggregate_by_steamid(without_matches(three_matches, ["m2"]))

        assert "3" not in after
        assert after["1"].matches == full["1"].matches - 1
        assert after["1"].kills <= full["1"].kills
        # Name reverts to the one from the remaining match
        assert after["1"].name == "alpha"


class TestLookups:
    """Tests for find_player and player_match_history."""

    def test_find_player(self, three_matches):
        players = aggregate_player_stats(three_matches)
        assert find_player(players, "3").name == "charlie"
        assert find_player(players, "99") is None

    def test_match_history_newest_first(self, three_matches):
        history = player_match_history(three_matches, "2")
        assert [m.id for m, _ in history] == ["m3", "m1"]
        assert history[0][1].kills == 18
