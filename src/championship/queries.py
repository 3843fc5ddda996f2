"""Read-side lookups over a built ChampionshipDatabase.

Name searches are case-insensitive substring matches, which is what the
team picker needs for partially typed names. All functions return entries
from the database itself; callers must not mutate them.
"""

from typing import Any

from championship.models import ChampionshipDatabase, PlayerEntry, TeamEntry


def search_teams_by_name(db: ChampionshipDatabase, term: str) -> list[TeamEntry]:
    needle = term.lower()
    return [team for team in db.teams.values() if needle in team.team_name.lower()]


def search_players_by_name(db: ChampionshipDatabase, term: str) -> list[PlayerEntry]:
    needle = term.lower()
    return [
        player for player in db.players.values()
        if needle in player.player_name.lower()
    ]


def get_team_by_id(db: ChampionshipDatabase, team_id: str) -> TeamEntry | None:
    return db.teams.get(team_id)


def get_player_by_id(db: ChampionshipDatabase, player_id: str) -> PlayerEntry | None:
    return db.players.get(player_id)


def get_team_matches(db: ChampionshipDatabase, team_id: str) -> list[dict[str, Any]]:
    """Match records the team played, in database order.

    Matches the team only appears in through detailed statistics are
    included only when the listing record exists too.
    """
    team = db.teams.get(team_id)
    if team is None:
        return []
    return [m for m in db.matches if team.has_match(str(m.get("match_id")))]


def get_player_matches(db: ChampionshipDatabase, player_id: str) -> list[dict[str, Any]]:
    player = db.players.get(player_id)
    if player is None:
        return []
    return [m for m in db.matches if player.has_match(str(m.get("match_id")))]


def get_match_stats(db: ChampionshipDatabase, match_id: str) -> dict[str, Any] | None:
    return db.match_stats.get(match_id)
