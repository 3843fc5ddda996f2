"""Pydantic v2 models for the reduced match form used by compressed exports."""

from typing import Any

from pydantic import BaseModel

from championship.resolvers import FACTION_ID_FIELDS, FACTION_NAME_FIELDS, first_defined


class CompactFaction(BaseModel):
    """One side of a match with the roster stripped."""

    team_id: str | None = None
    name: str | None = None


class CompactMatch(BaseModel):
    """A match reduced to identity, competition, timing and the two sides."""

    match_id: str | None = None
    competition_id: str | None = None
    competition_name: str | None = None
    started_at: int | float | None = None
    finished_at: int | float | None = None
    teams: dict[str, CompactFaction] | None = None

    @classmethod
    def from_record(cls, match: dict[str, Any]) -> "CompactMatch":
        """Reduce a raw FACEIT match record, resolving drifting faction keys."""
        teams = match.get("teams")
        compact_teams = None
        if isinstance(teams, dict):
            compact_teams = {}
            for faction, team in teams.items():
                team_id = first_defined(team, FACTION_ID_FIELDS)
                compact_teams[faction] = CompactFaction(
                    team_id=str(team_id) if team_id is not None else None,
                    name=first_defined(team, FACTION_NAME_FIELDS),
                )
        return cls(
            match_id=match.get("match_id"),
            competition_id=match.get("competition_id"),
            competition_name=match.get("competition_name"),
            started_at=match.get("started_at"),
            finished_at=match.get("finished_at"),
            teams=compact_teams,
        )
