"""Pydantic v2 models for veto prediction inputs and results."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

DEFAULT_WIN_RATE = 50.0


class MapStat(BaseModel):
    """A team's record on one map."""

    win_rate: float = Field(default=DEFAULT_WIN_RATE, ge=0.0, le=100.0)
    played: int = Field(default=0, ge=0)
    wins: int = Field(default=0, ge=0)


class VetoPatterns(BaseModel):
    """How often each map was a team's first ban / first pick historically."""

    first_bans: dict[str, int] = Field(default_factory=dict)
    first_picks: dict[str, int] = Field(default_factory=dict)


class TeamMapProfile(BaseModel):
    """Per-map statistics summary for one side of a veto."""

    team_id: str | None = None
    name: str = ""
    tag: str = ""
    map_stats: dict[str, MapStat] = Field(default_factory=dict)
    veto_patterns: VetoPatterns = Field(default_factory=VetoPatterns)

    @property
    def label(self) -> str:
        return self.tag or self.name or "team"


class VetoStep(BaseModel):
    """A single predicted veto step."""

    step_number: int = Field(ge=1)
    team: Literal["A", "B", "D"]
    action: str
    map_name: str
    reason: str = ""

    @field_validator("action")
    @classmethod
    def validate_action(cls, v: str) -> str:
        """Action must be a known veto action."""
        valid = {"ban", "pick", "decider"}
        if v not in valid:
            raise ValueError(
                f"action must be one of {valid}, got '{v}'"
            )
        return v


class MapDiff(BaseModel):
    """Side-by-side win rates on one map."""

    map_name: str
    map_key: str
    team_a_win_rate: float
    team_b_win_rate: float
    team_a_played: int = 0
    team_b_played: int = 0

    @property
    def gap(self) -> float:
        return abs(self.team_a_win_rate - self.team_b_win_rate)


class VetoPrediction(BaseModel):
    format: Literal["BO1", "BO3"]
    steps: list[VetoStep] = Field(default_factory=list)
    predicted_pool: list[str] = Field(default_factory=list)
    high_diff_maps: list[MapDiff] = Field(default_factory=list)
    team_a_likely_ban: str | None = None
    team_b_likely_ban: str | None = None
    team_a_likely_pick: str | None = None
    team_b_likely_pick: str | None = None
