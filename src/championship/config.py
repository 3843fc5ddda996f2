"""Ingestion configuration with sensible defaults for the FACEIT Data API."""

from dataclasses import dataclass

FACEIT_API_BASE_URL = "https://open.faceit.com/data/v4"


@dataclass
class ChampionshipConfig:
    """Configuration for championship ingestion.

    All timing values are in seconds. Defaults match the limits the FACEIT
    Data API v4 enforces on championship match listings.
    """

    # FACEIT Data API root
    api_base_url: str = FACEIT_API_BASE_URL

    # Opaque bearer credential, passed through untouched
    api_key: str | None = None

    # Game filter for search and stats endpoints
    game_id: str = "cs2"

    # httpx timeout applied to every request
    request_timeout: float = 30.0

    # Count discovery: binary search runs over [0, probe_upper_bound]
    probe_upper_bound: int = 10000

    # Items per page when retrieving a collection (API maximum is 100)
    page_size: int = 100

    # Match stats requests in flight at once
    stats_concurrency: int = 5

    # Team search results are reused for this long
    search_cache_ttl: float = 300.0

    # Persistent data: logs/ and exports/ live under here
    data_dir: str = "data"

    # Registry of championship ids per division/season/region
    championships_file: str = "championships.yml"
