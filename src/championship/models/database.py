"""Pydantic v2 models for the cross-referenced championship database.

The database maps team and player ids to their entries and keeps the raw
match and match-stats payloads alongside. Match references on entries are
ordered sets: ``add_match`` is idempotent, so a match seen both in the
listing and in detailed statistics is counted once.
"""

from datetime import datetime
from typing import Any, Literal

from pydantic import BaseModel, Field, PrivateAttr, field_serializer, model_validator
from typing_extensions import Self


class _MatchRefs(BaseModel):
    """Mixin for entries holding an insertion-ordered set of match ids."""

    matches: list[str] = Field(default_factory=list)
    _match_index: set[str] = PrivateAttr(default_factory=set)

    def model_post_init(self, __context: Any) -> None:
        self._match_index = set(self.matches)

    def add_match(self, match_id: str) -> bool:
        """Record a match reference. Returns False if it was already known."""
        if match_id in self._match_index:
            return False
        self._match_index.add(match_id)
        self.matches.append(match_id)
        return True

    def has_match(self, match_id: str) -> bool:
        return match_id in self._match_index


class TeamRecord(BaseModel):
    """Aggregate results for a team over the ingested matches."""

    wins: int = Field(default=0, ge=0)
    losses: int = Field(default=0, ge=0)
    total_matches: int = Field(default=0, ge=0)

    @model_validator(mode="after")
    def check_results_within_total(self) -> Self:
        """Decided matches cannot outnumber matches played."""
        if self.wins + self.losses > self.total_matches:
            raise ValueError(
                f"wins ({self.wins}) + losses ({self.losses}) exceed "
                f"total_matches ({self.total_matches})"
            )
        return self


class TeamEntry(_MatchRefs):
    team_id: str = Field(min_length=1)
    team_name: str
    players: set[str] = Field(default_factory=set)
    stats: TeamRecord = Field(default_factory=TeamRecord)

    @field_serializer("players")
    def _sorted_players(self, players: set[str]) -> list[str]:
        return sorted(players)


class PlayerEntry(_MatchRefs):
    player_id: str = Field(min_length=1)
    player_name: str
    teams: set[str] = Field(default_factory=set)

    @field_serializer("teams")
    def _sorted_teams(self, teams: set[str]) -> list[str]:
        return sorted(teams)


class DateRange(BaseModel):
    earliest: datetime | None = None
    latest: datetime | None = None

    def include(self, moment: datetime) -> None:
        """Widen the range to cover ``moment``."""
        if self.earliest is None or moment < self.earliest:
            self.earliest = moment
        if self.latest is None or moment > self.latest:
            self.latest = moment


class CollectionOutcome(BaseModel):
    """Result of fetching one championship's match listing.

    ``failed`` outcomes keep the error text so an incomplete database is
    visibly incomplete instead of looking like an empty championship.
    """

    collection_id: str
    status: Literal["success", "empty", "failed"]
    item_count: int = Field(default=0, ge=0)
    error: str | None = None

    @model_validator(mode="after")
    def check_status_consistency(self) -> Self:
        """Item count and error must agree with the status."""
        if self.status == "success" and self.item_count == 0:
            raise ValueError("success outcome must carry at least one item")
        if self.status != "success" and self.item_count != 0:
            raise ValueError(f"{self.status} outcome cannot carry items")
        if self.status == "failed" and not self.error:
            raise ValueError("failed outcome must record its error")
        return self


class DatabaseMetadata(BaseModel):
    total_matches: int = 0
    total_teams: int = 0
    total_players: int = 0
    date_range: DateRange = Field(default_factory=DateRange)
    championships: set[str] = Field(default_factory=set)
    # Stats records whose match id is absent from the match listing
    orphaned_stats: list[str] = Field(default_factory=list)
    # Filled in by the ingestion pipeline, empty for a bare build
    collections: list[CollectionOutcome] = Field(default_factory=list)
    dropped_collections: int = 0
    missing_stats: int = 0

    @field_serializer("championships")
    def _sorted_championships(self, championships: set[str]) -> list[str]:
        return sorted(championships)

    @property
    def is_complete(self) -> bool:
        """True when no championship listing failed and no stats were missing."""
        return self.dropped_collections == 0 and self.missing_stats == 0


class ChampionshipDatabase(BaseModel):
    """In-memory index of teams, players and matches for a set of championships."""

    teams: dict[str, TeamEntry] = Field(default_factory=dict)
    players: dict[str, PlayerEntry] = Field(default_factory=dict)
    matches: list[dict[str, Any]] = Field(default_factory=list)
    match_stats: dict[str, dict[str, Any]] = Field(default_factory=dict)
    metadata: DatabaseMetadata = Field(default_factory=DatabaseMetadata)
    # Set when loaded from a compressed export: rosters and stats were dropped
    compressed: bool = False

    @property
    def needs_stats_refetch(self) -> bool:
        """Whether per-match statistics must be fetched again before use."""
        return self.compressed
