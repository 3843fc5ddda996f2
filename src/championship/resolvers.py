"""Ordered-candidate field resolution for drifting API record shapes.

FACEIT returns the same concept under different keys depending on the
endpoint and API generation (a faction is ``team_id`` in one payload,
``faction_id`` in another). Each concept is described by a tuple of
candidate field names tried in order.
"""

from typing import Any, Mapping, Sequence

FACTION_ID_FIELDS = ("team_id", "id", "faction_id")
FACTION_NAME_FIELDS = ("name", "nickname", "faction_name")

STATS_TEAM_ID_FIELDS = ("team_id",)
STATS_TEAM_NAME_FIELDS = ("team_stats.Team", "name")

PLAYER_ID_FIELDS = ("player_id", "id")
PLAYER_NAME_FIELDS = ("nickname", "name")

UNKNOWN_TEAM = "Unknown Team"
UNKNOWN_PLAYER = "Unknown Player"


def _lookup(record: Mapping[str, Any], path: str) -> Any:
    """Follow a dotted path through nested mappings; None if any hop is missing."""
    value: Any = record
    for part in path.split("."):
        if not isinstance(value, Mapping):
            return None
        value = value.get(part)
    return value


def first_defined(
    record: Mapping[str, Any] | None,
    candidates: Sequence[str],
    default: Any = None,
) -> Any:
    """Return the first candidate field that holds a usable value.

    A value is usable when it is present and neither ``None`` nor an empty
    string. Candidates may be dotted paths (``"team_stats.Team"``).

    Args:
        record: Raw API record. ``None`` resolves to ``default``.
        candidates: Field names or dotted paths, in priority order.
        default: Returned when no candidate resolves.
    """
    if not record:
        return default
    for path in candidates:
        value = _lookup(record, path)
        if value is not None and value != "":
            return value
    return default
