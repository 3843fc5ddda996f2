"""JSON export/import of a ChampionshipDatabase.

Two export forms share one envelope::

    {
      "format_version": "2.0",
      "compressed": false,
      "teams": [...], "players": [...], "matches": [...],
      "match_stats": {...},          # full form only
      "metadata": {...}
    }

* **Full** -- every field of every entity, raw match payloads and the
  complete per-round statistics. Round-trips exactly.
* **Compressed** -- matches reduced to id, competition, timestamps and
  ``{team_id, name}`` per faction; ``match_stats`` omitted. Teams, players
  and metadata round-trip exactly; rosters and statistics do not, and the
  imported database reports ``needs_stats_refetch``.

Imports refuse payloads without a known ``format_version`` rather than
guessing a schema.
"""

import json
import logging
from typing import Any

from pydantic import ValidationError

from championship.exceptions import UnsupportedFormatError
from championship.models import (
    ChampionshipDatabase,
    CompactMatch,
    DatabaseMetadata,
    PlayerEntry,
    TeamEntry,
)

logger = logging.getLogger(__name__)

FORMAT_VERSION = "2.0"
SUPPORTED_VERSIONS = frozenset({FORMAT_VERSION})


def export_database(db: ChampionshipDatabase, compressed: bool = False) -> str:
    """Serialize ``db`` to UTF-8 JSON text.

    Args:
        db: Database to export.
        compressed: Drop rosters and statistics to fit size-constrained
            storage. Full exports are indented for readability; compressed
            ones are minified. A database loaded from a compressed export
            has no rosters or statistics left, so it is always exported
            compressed.
    """
    if db.compressed and not compressed:
        logger.warning(
            "Database was loaded from a compressed export; exporting compressed"
        )
        compressed = True

    payload: dict[str, Any] = {
        "format_version": FORMAT_VERSION,
        "compressed": compressed,
        "teams": [team.model_dump(mode="json") for team in db.teams.values()],
        "players": [player.model_dump(mode="json") for player in db.players.values()],
    }

    if compressed:
        payload["matches"] = [
            CompactMatch.from_record(match).model_dump(mode="json")
            for match in db.matches
        ]
    else:
        payload["matches"] = db.matches
        payload["match_stats"] = db.match_stats

    payload["metadata"] = db.metadata.model_dump(mode="json")

    if compressed:
        return json.dumps(payload, ensure_ascii=False, separators=(",", ":"))
    return json.dumps(payload, ensure_ascii=False, indent=2)


def import_database(text: str) -> ChampionshipDatabase:
    """Rebuild a ChampionshipDatabase from ``export_database`` output.

    Raises:
        UnsupportedFormatError: if the text is not JSON, is not an export
            envelope, carries an unknown ``format_version``, or holds
            entities that fail validation.
    """
    try:
        data = json.loads(text)
    except json.JSONDecodeError as exc:
        raise UnsupportedFormatError(f"Export is not valid JSON: {exc}") from exc

    if not isinstance(data, dict):
        raise UnsupportedFormatError(
            f"Export must be a JSON object, got {type(data).__name__}"
        )

    version = data.get("format_version")
    if version not in SUPPORTED_VERSIONS:
        raise UnsupportedFormatError(
            f"Unsupported export format_version {version!r}; "
            f"expected one of {sorted(SUPPORTED_VERSIONS)}"
        )

    compressed = data.get("compressed")
    if not isinstance(compressed, bool):
        raise UnsupportedFormatError(
            f"Export 'compressed' flag must be a boolean, got {compressed!r}"
        )

    try:
        teams = _index_by(
            (TeamEntry.model_validate(t) for t in data.get("teams") or []), "team_id"
        )
        players = _index_by(
            (PlayerEntry.model_validate(p) for p in data.get("players") or []),
            "player_id",
        )
        metadata = DatabaseMetadata.model_validate(data.get("metadata") or {})
    except ValidationError as exc:
        raise UnsupportedFormatError(f"Export entities failed validation: {exc}") from exc

    matches = data.get("matches") or []
    match_stats = {} if compressed else (data.get("match_stats") or {})
    if not isinstance(matches, list) or not isinstance(match_stats, dict):
        raise UnsupportedFormatError("Export 'matches' must be a list and 'match_stats' an object")

    db = ChampionshipDatabase(
        teams=teams,
        players=players,
        matches=matches,
        match_stats=match_stats,
        metadata=metadata,
        compressed=compressed,
    )
    if compressed:
        logger.info(
            "Loaded compressed database (v%s); match stats must be re-fetched",
            version,
        )
    return db


def _index_by(entries, key: str) -> dict:
    indexed = {}
    for entry in entries:
        entry_id = getattr(entry, key)
        if entry_id in indexed:
            raise UnsupportedFormatError(f"Duplicate {key} {entry_id!r} in export")
        indexed[entry_id] = entry
    return indexed
