"""Unit tests for full and compressed database export/import."""

import json

import pytest

from championship.database import build_database
from championship.exceptions import UnsupportedFormatError
from championship.serializer import FORMAT_VERSION, export_database, import_database


@pytest.fixture
def db(sample_matches, sample_stats):
    return build_database(sample_matches, sample_stats)


class TestFullExport:
    """Tests for the full export form."""

    def test_round_trip(self, db):
        restored = import_database(export_database(db))
        assert restored.model_dump() == db.model_dump()
        assert restored.compressed is False
        assert restored.needs_stats_refetch is False

    def test_round_trip_keeps_match_refs_usable(self, db):
        """Imported entries still deduplicate match references."""
        restored = import_database(export_database(db))
        assert restored.teams["t1"].add_match("m1") is False
        assert restored.teams["t1"].add_match("m3") is True

    def test_envelope(self, db):
        payload = json.loads(export_database(db))
        assert payload["format_version"] == FORMAT_VERSION
        assert payload["compressed"] is False
        assert list(payload) == [
            "format_version", "compressed", "teams", "players",
            "matches", "match_stats", "metadata",
        ]
        assert payload["metadata"]["championships"] == ["champ-1", "champ-2"]

    def test_sets_serialized_sorted(self, db):
        payload = json.loads(export_database(db))
        alpha = next(t for t in payload["teams"] if t["team_id"] == "t1")
        assert alpha["players"] == ["p1", "p2", "p5"]

    def test_empty_database(self):
        restored = import_database(export_database(build_database([])))
        assert restored.teams == {}
        assert restored.metadata.total_matches == 0


class TestCompressedExport:
    """Tests for the compressed export form."""

    def test_entities_survive(self, db):
        restored = import_database(export_database(db, compressed=True))
        assert restored.model_dump(include={"teams", "players", "metadata"}) == \
            db.model_dump(include={"teams", "players", "metadata"})
        assert restored.match_stats == {}
        assert restored.needs_stats_refetch is True

    def test_matches_reduced(self, db):
        text = export_database(db, compressed=True)
        payload = json.loads(text)
        assert "match_stats" not in payload
        assert "\n" not in text
        first = payload["matches"][0]
        assert first["match_id"] == "m1"
        assert first["teams"]["faction1"] == {"team_id": "t1", "name": "Alpha"}
        assert "roster" not in json.dumps(payload["matches"])
        assert "results" not in first

    def test_reexport_of_compressed_stays_compressed(self, db):
        """A full export of a compressed-loaded database keeps the refetch flag."""
        loaded = import_database(export_database(db, compressed=True))
        text = export_database(loaded, compressed=False)
        assert json.loads(text)["compressed"] is True

        restored = import_database(text)
        assert restored.needs_stats_refetch is True
        assert restored.model_dump(include={"teams", "players", "metadata"}) == \
            db.model_dump(include={"teams", "players", "metadata"})

    def test_smaller_than_full(self, db):
        assert len(export_database(db, compressed=True)) < len(export_database(db))


class TestImportErrors:
    """Tests for rejected import payloads."""

    @pytest.mark.parametrize(
        "text",
        [
            "not json",
            "[1, 2]",
            json.dumps({"compressed": False}),
            json.dumps({"format_version": "1.0", "compressed": False}),
            json.dumps({"format_version": FORMAT_VERSION, "compressed": "no"}),
            json.dumps({"format_version": FORMAT_VERSION, "compressed": False,
                        "teams": [{"team_id": "", "team_name": "x"}]}),
            json.dumps({"format_version": FORMAT_VERSION, "compressed": False,
                        "matches": {"m1": {}}}),
        ],
    )
    def test_rejected(self, text):
        with pytest.raises(UnsupportedFormatError):
            import_database(text)

    def test_duplicate_ids_rejected(self):
        team = {"team_id": "t1", "team_name": "Alpha"}
        text = json.dumps({
            "format_version": FORMAT_VERSION, "compressed": False,
            "teams": [team, team],
        })
        with pytest.raises(UnsupportedFormatError, match="Duplicate team_id"):
            import_database(text)

    def test_inconsistent_record_rejected(self):
        """Team stats whose wins and losses exceed matches played are refused."""
        text = json.dumps({
            "format_version": FORMAT_VERSION, "compressed": False,
            "teams": [{"team_id": "t1", "team_name": "Alpha",
                       "stats": {"wins": 3, "losses": 0, "total_matches": 1}}],
        })
        with pytest.raises(UnsupportedFormatError):
            import_database(text)
