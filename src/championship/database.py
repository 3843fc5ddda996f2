"""Build the cross-referenced championship database from raw API records.

Two passes over already-fetched data, no I/O:

1. **Matches** -- each match listing record registers its competition,
   widens the date range, and upserts both factions and their rosters.
2. **Match stats** -- each detailed statistics record is stored by match id
   and its per-round teams and players are upserted the same way, so teams
   and players that only appear in detailed statistics still get entries.

Upserts are symmetric: adding player P to team T also adds T to P. Match
references are ordered sets, so running both passes over the same match
never double counts it.

Malformed factions and players (no resolvable id) are skipped with a
warning; they never fail the build.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Iterable

from championship.models import (
    ChampionshipDatabase,
    PlayerEntry,
    TeamEntry,
)
from championship.resolvers import (
    FACTION_ID_FIELDS,
    FACTION_NAME_FIELDS,
    PLAYER_ID_FIELDS,
    PLAYER_NAME_FIELDS,
    STATS_TEAM_ID_FIELDS,
    STATS_TEAM_NAME_FIELDS,
    UNKNOWN_PLAYER,
    UNKNOWN_TEAM,
    first_defined,
)

logger = logging.getLogger(__name__)


def build_database(
    matches: Iterable[dict[str, Any]],
    match_stats: Iterable[dict[str, Any] | None] = (),
) -> ChampionshipDatabase:
    """Fold match and match-stats records into a ChampionshipDatabase.

    Args:
        matches: Raw match records from championship listings.
        match_stats: Raw detailed statistics records. ``None`` entries (stats
            that could not be fetched) are ignored.

    Returns:
        A new database whose metadata counts equal its collection sizes.
    """
    db = ChampionshipDatabase()
    seen_matches: set[str] = set()

    for match in matches:
        _process_match(db, match, seen_matches)

    for stats in match_stats:
        if stats is not None:
            _process_match_stats(db, stats, seen_matches)

    for team in db.teams.values():
        team.stats.total_matches = len(team.matches)

    meta = db.metadata
    meta.total_matches = len(db.matches)
    meta.total_teams = len(db.teams)
    meta.total_players = len(db.players)

    logger.info(
        "Database built: %d matches, %d teams, %d players, %d championships",
        meta.total_matches, meta.total_teams, meta.total_players,
        len(meta.championships),
    )
    if meta.orphaned_stats:
        logger.warning(
            "%d stats records reference matches missing from the listings",
            len(meta.orphaned_stats),
        )
    return db


# ---------------------------------------------------------------------------
# Upserts
# ---------------------------------------------------------------------------

def _upsert_team(db: ChampionshipDatabase, team_id: str, team_name: str | None) -> TeamEntry:
    team = db.teams.get(team_id)
    if team is None:
        team = TeamEntry(team_id=team_id, team_name=team_name or UNKNOWN_TEAM)
        db.teams[team_id] = team
    elif team.team_name == UNKNOWN_TEAM and team_name:
        team.team_name = team_name
    return team


def _upsert_player(
    db: ChampionshipDatabase, player_id: str, player_name: str | None
) -> PlayerEntry:
    player = db.players.get(player_id)
    if player is None:
        player = PlayerEntry(player_id=player_id, player_name=player_name or UNKNOWN_PLAYER)
        db.players[player_id] = player
    elif player.player_name == UNKNOWN_PLAYER and player_name:
        player.player_name = player_name
    return player


def _link_players(
    db: ChampionshipDatabase,
    team: TeamEntry,
    players: Any,
    match_id: str | None,
) -> None:
    """Upsert every player in ``players`` and link them to ``team`` both ways."""
    if not isinstance(players, list):
        return
    for raw_player in players:
        player_id = first_defined(raw_player, PLAYER_ID_FIELDS)
        if player_id is None:
            logger.warning(
                "Skipping player without id in team %s (match %s)",
                team.team_id, match_id,
            )
            continue
        player_id = str(player_id)
        player = _upsert_player(db, player_id, first_defined(raw_player, PLAYER_NAME_FIELDS))
        team.players.add(player_id)
        player.teams.add(team.team_id)
        if match_id is not None:
            player.add_match(match_id)


def _match_moment(match: dict[str, Any]) -> datetime | None:
    """Finish time, else start time, as an aware UTC datetime."""
    timestamp = match.get("finished_at") or match.get("started_at")
    if timestamp is None:
        return None
    try:
        return datetime.fromtimestamp(float(timestamp), tz=timezone.utc)
    except (TypeError, ValueError, OverflowError, OSError):
        logger.warning(
            "Match %s has unreadable timestamp %r", match.get("match_id"), timestamp
        )
        return None


# ---------------------------------------------------------------------------
# Pass 1: match listings
# ---------------------------------------------------------------------------

def _process_match(
    db: ChampionshipDatabase, match: dict[str, Any], seen_matches: set[str]
) -> None:
    raw_id = match.get("match_id")
    match_id = str(raw_id) if raw_id not in (None, "") else None

    if match_id is not None:
        if match_id in seen_matches:
            logger.debug("Duplicate match %s in listings, skipping", match_id)
            return
        seen_matches.add(match_id)
    else:
        logger.warning("Match record without match_id; teams will not reference it")

    db.matches.append(match)

    competition_id = match.get("competition_id")
    if competition_id:
        db.metadata.championships.add(str(competition_id))

    moment = _match_moment(match)
    if moment is not None:
        db.metadata.date_range.include(moment)

    factions = match.get("teams")
    if not isinstance(factions, dict):
        logger.warning("Match %s has no teams field", match_id)
        return

    results = match.get("results")
    winner = results.get("winner") if isinstance(results, dict) else None

    for faction_key, faction in factions.items():
        if not isinstance(faction, dict):
            continue
        team_id = first_defined(faction, FACTION_ID_FIELDS)
        if team_id is None:
            logger.warning(
                "Match %s: faction %s has no team id, skipping", match_id, faction_key
            )
            continue

        team = _upsert_team(
            db, str(team_id), first_defined(faction, FACTION_NAME_FIELDS)
        )
        is_new = match_id is not None and team.add_match(match_id)
        if is_new and winner:
            if winner == faction_key:
                team.stats.wins += 1
            else:
                team.stats.losses += 1

        _link_players(db, team, faction.get("roster"), match_id)


# ---------------------------------------------------------------------------
# Pass 2: detailed match statistics
# ---------------------------------------------------------------------------

def _process_match_stats(
    db: ChampionshipDatabase, stats: dict[str, Any], seen_matches: set[str]
) -> None:
    rounds = stats.get("rounds")
    if not isinstance(rounds, list) or not rounds:
        logger.warning("Skipping stats record without rounds")
        return

    raw_id = first_defined(rounds[0], ("match_id",))
    if raw_id is None:
        logger.warning("Skipping stats record without a match id")
        return
    match_id = str(raw_id)

    db.match_stats[match_id] = stats
    if match_id not in seen_matches and match_id not in db.metadata.orphaned_stats:
        db.metadata.orphaned_stats.append(match_id)

    for round_entry in rounds:
        if not isinstance(round_entry, dict):
            continue
        for raw_team in round_entry.get("teams") or []:
            team_id = first_defined(raw_team, STATS_TEAM_ID_FIELDS)
            if team_id is None:
                logger.warning("Match %s stats: team without id, skipping", match_id)
                continue
            team = _upsert_team(
                db, str(team_id), first_defined(raw_team, STATS_TEAM_NAME_FIELDS)
            )
            team.add_match(match_id)
            _link_players(db, team, raw_team.get("players"), match_id)
