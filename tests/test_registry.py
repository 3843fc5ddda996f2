"""Unit tests for the YAML championship registry."""

import pytest

from championship.exceptions import ConfigError
from championship.registry import (
    get_available_divisions,
    get_available_seasons,
    get_championship_ids,
    get_organization_id,
    load_registry,
)

REGISTRY_YAML = """\
Organization: org-123
Open:
  Season55:
    East:
      - champ-a
      - champ-b
    West:
      - champ-c
    Central:
      - champ-a
  Season54:
    East:
      - old-1
Advanced:
  Season55:
    Europe: []
"""


@pytest.fixture
def registry_file(tmp_path):
    path = tmp_path / "championships.yml"
    path.write_text(REGISTRY_YAML, encoding="utf-8")
    return path


@pytest.fixture
def registry(registry_file):
    return load_registry(registry_file)


class TestLoadRegistry:
    """Tests for load_registry()."""

    def test_loads_mapping(self, registry):
        assert get_organization_id(registry) == "org-123"

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError, match="not found"):
            load_registry(tmp_path / "nope.yml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "bad.yml"
        path.write_text("Open: [unclosed\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="not valid YAML"):
            load_registry(path)

    def test_non_mapping(self, tmp_path):
        path = tmp_path / "list.yml"
        path.write_text("- a\n- b\n", encoding="utf-8")
        with pytest.raises(ConfigError, match="mapping"):
            load_registry(path)


class TestLookups:
    """Tests for division, season and id lookups."""

    def test_divisions_exclude_organization(self, registry):
        assert get_available_divisions(registry) == ["Open", "Advanced"]

    def test_seasons_without_prefix(self, registry):
        assert get_available_seasons(registry, "Open") == ["55", "54"]

    def test_ids_deduplicated_in_first_seen_order(self, registry):
        assert get_championship_ids(registry, "Open", 55) == ["champ-a", "champ-b", "champ-c"]
        assert get_championship_ids(registry, "Open", "54") == ["old-1"]

    def test_empty_season(self, registry):
        assert get_championship_ids(registry, "Advanced", "55") == []

    def test_unknown_division_lists_choices(self, registry):
        with pytest.raises(ConfigError, match="Available divisions: Open, Advanced"):
            get_championship_ids(registry, "Main", "55")

    def test_organization_is_not_a_division(self, registry):
        with pytest.raises(ConfigError):
            get_available_seasons(registry, "Organization")

    def test_unknown_season_lists_choices(self, registry):
        with pytest.raises(ConfigError, match="Available seasons: Season55, Season54"):
            get_championship_ids(registry, "Open", "12")
