"""Shared fixtures for ScrimStats tests."""

import pytest

from scrimstats.analysis.models import AggregatedPlayerStats, MatchRecord


def _player(steam_id, name=None, **stats):
    data = {
        "name": name or f"player{steam_id}",
        "steam_id": steam_id,
        "last_team_name": "Team A",
        "last_side": "CT",
        "duels": {},
        "kills": 20,
        "deaths": 10,
        "assists": 5,
        "rounds_played": 24,
        "damage_total": 2400.0,
        "opening_kills": 3,
        "opening_deaths": 2,
        "opening_attempts": 5,
        "sniper_kills": 0,
        "utility_damage": 150.0,
        "flashes_thrown": 8,
        "hltv_3_0_score": 1.2,
    }
    data.update(stats)
    return data


def _match(match_id, players, timestamp=1_700_000_000_000, filename=None):
    return MatchRecord.from_dict(
        {
            "id": match_id,
            "filename": filename or f"{match_id}.json",
            "timestamp": timestamp,
            "data": players,
        }
    )


def _aggregate(steam_id, rating, matches=1, name=None):
    return AggregatedPlayerStats(
        steam_id=str(steam_id),
        name=name or f"player{steam_id}",
        matches=matches,
        rating_score=rating * matches,
    )


@pytest.fixture
def make_player():
    """Factory for raw per-match player export dicts."""
    return _player


@pytest.fixture
def make_match():
    """Factory for MatchRecords built through from_dict."""
    return _match


@pytest.fixture
def make_aggregate():
    """Factory for AggregatedPlayerStats with a given average rating."""
    return _aggregate


@pytest.fixture
def three_matches(make_player, make_match):
    """Three matches across four players with one name change."""
    return [
        make_match(
            "m1",
            [
                make_player("1", "alpha", kills=20, deaths=10, hltv_3_0_score=1.3),
                make_player("2", "bravo", kills=15, deaths=15, hltv_3_0_score=1.0),
            ],
            timestamp=1_000,
        ),
        make_match(
            "m2",
            [
                make_player("1", "alpha_new", kills=10, deaths=12, hltv_3_0_score=0.9),
                make_player("3", "charlie", kills=25, deaths=8, hltv_3_0_score=1.6),
            ],
            timestamp=3_000,
        ),
        make_match(
            "m3",
            [
                make_player("2", "bravo", kills=18, deaths=14, hltv_3_0_score=1.1),
                make_player("4", "delta", kills=5, deaths=20, hltv_3_0_score=0.5),
            ],
            timestamp=2_000,
        ),
    ]
