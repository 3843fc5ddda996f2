"""Unit tests for ordered-candidate field resolution."""

from championship.resolvers import (
    FACTION_ID_FIELDS,
    FACTION_NAME_FIELDS,
    STATS_TEAM_NAME_FIELDS,
    first_defined,
)


class TestFirstDefined:
    """Tests for first_defined()."""

    def test_first_candidate_wins(self):
        """When several candidates are present, the earliest is used."""
        record = {"team_id": "a", "id": "b", "faction_id": "c"}
        assert first_defined(record, FACTION_ID_FIELDS) == "a"

    def test_falls_through_missing_fields(self):
        """Missing candidates are skipped in order."""
        assert first_defined({"faction_id": "c"}, FACTION_ID_FIELDS) == "c"

    def test_none_and_empty_string_are_undefined(self):
        """None and "" do not count as defined values."""
        record = {"team_id": None, "id": "", "faction_id": "c"}
        assert first_defined(record, FACTION_ID_FIELDS) == "c"

    def test_zero_is_defined(self):
        """Falsy but meaningful values like 0 are returned."""
        assert first_defined({"team_id": 0}, FACTION_ID_FIELDS) == 0

    def test_default_when_nothing_resolves(self):
        """Default is returned when no candidate is usable."""
        assert first_defined({"other": 1}, FACTION_NAME_FIELDS, "Unknown") == "Unknown"

    def test_none_record(self):
        """A None record resolves to the default."""
        assert first_defined(None, FACTION_ID_FIELDS) is None

    def test_dotted_path(self):
        """Dotted candidates walk nested mappings."""
        record = {"team_stats": {"Team": "Alpha"}, "name": "fallback"}
        assert first_defined(record, STATS_TEAM_NAME_FIELDS) == "Alpha"

    def test_dotted_path_through_non_mapping(self):
        """A non-mapping hop makes the path undefined, not an error."""
        record = {"team_stats": "broken", "name": "fallback"}
        assert first_defined(record, STATS_TEAM_NAME_FIELDS) == "fallback"
