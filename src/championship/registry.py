"""Championship registry loaded from ``championships.yml``.

The registry lists FACEIT championship ids per division, season and region::

    Organization: f1b2c3d4-...
    Open:
      Season55:
        East:
          - 0a1b2c...   # group A
        West:
          - 9f8e7d...
        Central:
          - 0a1b2c...   # shared with East

Regions frequently share ids, so lookups de-duplicate while keeping the
order ids first appear in.
"""

from pathlib import Path

import yaml

from championship.exceptions import ConfigError

ORGANIZATION_KEY = "Organization"
SEASON_PREFIX = "Season"


def load_registry(path: str | Path) -> dict:
    """Parse the registry file.

    Raises:
        ConfigError: if the file is missing, is not valid YAML, or its top
            level is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Championship registry not found: {path}")
    try:
        registry = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as exc:
        raise ConfigError(f"Championship registry {path} is not valid YAML: {exc}") from exc
    if not isinstance(registry, dict):
        raise ConfigError(f"Championship registry {path} must be a mapping")
    return registry


def get_organization_id(registry: dict) -> str | None:
    org = registry.get(ORGANIZATION_KEY)
    return str(org) if org is not None else None


def get_available_divisions(registry: dict) -> list[str]:
    return [key for key in registry if key != ORGANIZATION_KEY]


def _division(registry: dict, division: str) -> dict:
    seasons = registry.get(division) if division != ORGANIZATION_KEY else None
    if not isinstance(seasons, dict):
        raise ConfigError(
            f'Division "{division}" not found in configuration. '
            f"Available divisions: {', '.join(get_available_divisions(registry))}"
        )
    return seasons


def get_available_seasons(registry: dict, division: str) -> list[str]:
    """Season numbers for ``division``, without the ``Season`` prefix."""
    return [
        str(key).removeprefix(SEASON_PREFIX)
        for key in _division(registry, division)
    ]


def get_championship_ids(registry: dict, division: str, season: str | int) -> list[str]:
    """All championship ids for a division/season across every region.

    Raises:
        ConfigError: if the division or season is not in the registry.
    """
    seasons = _division(registry, division)
    season_key = f"{SEASON_PREFIX}{season}"
    regions = seasons.get(season_key)
    if not isinstance(regions, dict):
        raise ConfigError(
            f'Season "{season}" not found in division "{division}". '
            f"Available seasons: {', '.join(str(k) for k in seasons)}"
        )

    ids: list[str] = []
    seen: set[str] = set()
    for region_ids in regions.values():
        if not isinstance(region_ids, list):
            continue
        for championship_id in region_ids:
            if championship_id is None:
                continue
            championship_id = str(championship_id).strip()
            if championship_id and championship_id not in seen:
                seen.add(championship_id)
                ids.append(championship_id)
    return ids
