"""Ingestion pipeline: championship listings -> match stats -> database.

Provides ``run_pipeline``, which fetches every championship's match listing,
optionally fetches detailed statistics for each match, and builds the
database, plus its building blocks:

* **CollectionOutcome** results from ``fetch_collections`` -- a failing
  championship is recorded as ``failed`` and never aborts its siblings, so
  the database metadata can say exactly which listings are missing.
* **fetch_all_match_stats** -- bounded-concurrency detail fetching where an
  unavailable stats record becomes a counted gap instead of an abort.
* **ProgressTracker** -- ``[done/total]`` progress logging for both stages.
"""

import logging
import time
from typing import Callable, Sequence

from championship.batch import batch_fetch
from championship.config import ChampionshipConfig
from championship.database import build_database
from championship.exceptions import FaceitAPIError
from championship.fetcher import CollectionFetcher, fetch_match_stats
from championship.models import ChampionshipDatabase, CollectionOutcome

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Progress tracking
# ---------------------------------------------------------------------------

class ProgressTracker:
    """Log progress for one pipeline stage with timing.

    ``update`` has the ``(completed, total)`` signature ``batch_fetch``
    expects for ``on_progress``, so a tracker can be passed straight in.
    """

    def __init__(self, stage: str, total: int = 0) -> None:
        self.stage = stage
        self.total = total
        self.completed: int = 0
        self._start_time: float = time.monotonic()

    def update(self, completed: int, total: int | None = None) -> None:
        self.completed = completed
        if total is not None:
            self.total = total
        if self.total > 0:
            percent = 100 * self.completed // self.total
            logger.info(
                "%s: [%d/%d] %d%%", self.stage, self.completed, self.total, percent
            )
        else:
            logger.info("%s: [%d]", self.stage, self.completed)

    def summary(self) -> dict:
        """Return ``completed``, ``total`` and ``wall_time`` for the stage."""
        return {
            "completed": self.completed,
            "total": self.total,
            "wall_time": time.monotonic() - self._start_time,
        }


# ---------------------------------------------------------------------------
# Stage 1: championship listings
# ---------------------------------------------------------------------------

async def fetch_collections(
    fetcher: CollectionFetcher,
    collection_ids: Sequence[str],
    on_progress: Callable[[int, int], None] | None = None,
) -> tuple[list[dict], list[CollectionOutcome]]:
    """Fetch every collection sequentially, isolating per-collection failures.

    Returns:
        All items in collection order, and one outcome per collection id.
    """
    items: list[dict] = []
    outcomes: list[CollectionOutcome] = []
    total = len(collection_ids)

    for index, collection_id in enumerate(collection_ids, start=1):
        try:
            fetched = await fetcher.fetch_collection(collection_id)
        except FaceitAPIError as exc:
            logger.error("Championship %s failed: %s", collection_id, exc)
            outcomes.append(
                CollectionOutcome(
                    collection_id=collection_id, status="failed", error=str(exc)
                )
            )
        else:
            items.extend(fetched)
            outcomes.append(
                CollectionOutcome(
                    collection_id=collection_id,
                    status="success" if fetched else "empty",
                    item_count=len(fetched),
                )
            )
        if on_progress is not None:
            on_progress(index, total)

    return items, outcomes


# ---------------------------------------------------------------------------
# Stage 2: detailed match statistics
# ---------------------------------------------------------------------------

async def fetch_all_match_stats(
    client,
    match_ids: Sequence[str],
    concurrency: int = 5,
    on_progress: Callable[[int, int], None] | None = None,
) -> tuple[list[dict], int]:
    """Fetch detailed stats for every match id, ``concurrency`` at a time.

    Returns:
        The stats records that were available (in match id order) and the
        number of matches whose stats could not be fetched.
    """
    async def _fetch_or_none(match_id: str) -> dict | None:
        try:
            return await fetch_match_stats(client, match_id)
        except FaceitAPIError as exc:
            logger.warning("Match %s stats unavailable: %s", match_id, exc)
            return None

    results = await batch_fetch(
        list(match_ids), _fetch_or_none, concurrency=concurrency, on_progress=on_progress,
    )
    available = [stats for stats in results if stats is not None]
    return available, len(results) - len(available)


# ---------------------------------------------------------------------------
# Orchestration
# ---------------------------------------------------------------------------

def _log_stage_summary(tracker: ProgressTracker) -> None:
    summary = tracker.summary()
    logger.info(
        "%s stage done: %d/%d in %.1fs",
        tracker.stage, summary["completed"], summary["total"], summary["wall_time"],
    )


async def run_pipeline(
    client,
    config: ChampionshipConfig,
    collection_ids: Sequence[str],
    with_stats: bool = False,
) -> ChampionshipDatabase:
    """Fetch championship listings (and optionally match stats) and build the database.

    Args:
        client: ``FaceitClient`` (or anything with the same endpoints).
        config: Supplies probe bound, page size and stats concurrency.
        collection_ids: Championship ids, already de-duplicated.
        with_stats: Also fetch per-match detailed statistics (one request
            per match, much slower).

    Returns:
        The built database. ``metadata.collections`` records each
        championship's outcome; ``metadata.is_complete`` is False when any
        listing failed or any stats record was unavailable.
    """
    fetcher = CollectionFetcher(
        client,
        upper_bound=config.probe_upper_bound,
        page_size=config.page_size,
    )

    listings = ProgressTracker("Championships", total=len(collection_ids))
    matches, outcomes = await fetch_collections(
        fetcher, collection_ids, on_progress=listings.update,
    )
    logger.info(
        "Fetched %d matches from %d championships", len(matches), len(collection_ids)
    )
    _log_stage_summary(listings)

    match_stats: list[dict] = []
    missing_stats = 0
    if with_stats and matches:
        match_ids = list(dict.fromkeys(
            str(m["match_id"]) for m in matches if m.get("match_id")
        ))
        stats_progress = ProgressTracker("Match stats", total=len(match_ids))
        match_stats, missing_stats = await fetch_all_match_stats(
            client, match_ids,
            concurrency=config.stats_concurrency,
            on_progress=stats_progress.update,
        )
        logger.info(
            "Fetched %d detailed match stats (%d unavailable)",
            len(match_stats), missing_stats,
        )
        _log_stage_summary(stats_progress)

    db = build_database(matches, match_stats)
    db.metadata.collections = outcomes
    db.metadata.dropped_collections = sum(1 for o in outcomes if o.status == "failed")
    db.metadata.missing_stats = missing_stats

    if db.metadata.dropped_collections:
        logger.warning(
            "Ingestion incomplete: %d of %d championships failed",
            db.metadata.dropped_collections, len(outcomes),
        )
    return db
