"""Builders for raw FACEIT match and match-stats records used across tests."""

import pytest


def make_faction(team_id, name, roster=(), id_field="faction_id"):
    """A match-listing faction. ``roster`` is a sequence of (player_id, nickname)."""
    faction = {
        "name": name,
        "roster": [{"player_id": pid, "nickname": nick} for pid, nick in roster],
    }
    if team_id is not None:
        faction[id_field] = team_id
    return faction


def make_match(
    match_id,
    team1=("t1", "Alpha", [("p1", "alice"), ("p2", "bob")]),
    team2=("t2", "Bravo", [("p3", "carol"), ("p4", "dave")]),
    competition_id="champ-1",
    started_at=1_700_000_000,
    finished_at=1_700_003_600,
    winner=None,
):
    match = {
        "match_id": match_id,
        "competition_id": competition_id,
        "competition_name": f"League {competition_id}",
        "started_at": started_at,
        "finished_at": finished_at,
        "teams": {
            "faction1": make_faction(*team1),
            "faction2": make_faction(*team2),
        },
    }
    if winner is not None:
        match["results"] = {"winner": winner, "score": {"faction1": 1, "faction2": 0}}
    return match


def make_stats(match_id, teams, rounds=1):
    """A match-stats record. ``teams`` is a sequence of (team_id, name, players)."""
    round_teams = [
        {
            "team_id": team_id,
            "team_stats": {"Team": name, "Final Score": "13"},
            "players": [
                {"player_id": pid, "nickname": nick, "player_stats": {"Kills": "20"}}
                for pid, nick in players
            ],
        }
        for team_id, name, players in teams
    ]
    return {
        "rounds": [
            {
                "match_id": match_id,
                "match_round": str(number + 1),
                "round_stats": {"Map": "de_mirage"},
                "teams": round_teams,
            }
            for number in range(rounds)
        ]
    }


@pytest.fixture
def sample_matches():
    return [
        make_match("m1", winner="faction1"),
        make_match(
            "m2",
            team1=("t1", "Alpha", [("p1", "alice"), ("p5", "erin")]),
            team2=("t3", "Charlie", [("p6", "frank")]),
            competition_id="champ-2",
            started_at=1_690_000_000,
            finished_at=None,
            winner="faction2",
        ),
    ]


@pytest.fixture
def sample_stats():
    return [
        make_stats(
            "m1",
            [
                ("t1", "Alpha", [("p1", "alice"), ("p2", "bob")]),
                ("t2", "Bravo", [("p3", "carol"), ("p4", "dave")]),
            ],
        ),
    ]
