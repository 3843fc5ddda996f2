"""Pydantic v2 models for the championship database and veto prediction.

Re-exports all model classes for convenient import::

    from championship.models import ChampionshipDatabase, TeamEntry, ...
"""

from .database import (
    ChampionshipDatabase,
    CollectionOutcome,
    DatabaseMetadata,
    DateRange,
    PlayerEntry,
    TeamEntry,
    TeamRecord,
)
from .match import CompactFaction, CompactMatch
from .veto import (
    MapDiff,
    MapStat,
    TeamMapProfile,
    VetoPatterns,
    VetoPrediction,
    VetoStep,
)

__all__ = [
    "ChampionshipDatabase",
    "CollectionOutcome",
    "DatabaseMetadata",
    "DateRange",
    "PlayerEntry",
    "TeamEntry",
    "TeamRecord",
    "CompactFaction",
    "CompactMatch",
    "MapDiff",
    "MapStat",
    "TeamMapProfile",
    "VetoPatterns",
    "VetoPrediction",
    "VetoStep",
]
