"""Exact-count discovery and paged retrieval of one remote collection.

Provides:
- CollectionFetcher: binary-search count probe + sequential page retrieval
- fetch_match_stats: single detail fetch that treats 404 as "not published"

FACEIT championship listings do not report a total, so the size is found
by probing single-item pages. The probe assumes the collection has no holes:
if offset ``k`` holds an item, so does every offset below ``k``.
"""

import logging

from championship.exceptions import BadRequest, FaceitAPIError, PageNotFound

logger = logging.getLogger(__name__)

DEFAULT_UPPER_BOUND = 10000
MAX_PAGE_SIZE = 100
CHAMPIONSHIP_MATCHES_PATH = "championships/{collection_id}/matches"


class CollectionFetcher:
    """Fetch every item of a paginated collection in server order.

    ``client`` is anything exposing
    ``async get_collection_page(path, *, offset, limit) -> list``; in
    production that is ``FaceitClient``.

    Usage::

        fetcher = CollectionFetcher(client)
        matches = await fetcher.fetch_collection(championship_id)
    """

    def __init__(
        self,
        client,
        *,
        upper_bound: int = DEFAULT_UPPER_BOUND,
        page_size: int = MAX_PAGE_SIZE,
        items_path: str = CHAMPIONSHIP_MATCHES_PATH,
    ):
        if upper_bound < 0:
            raise ValueError(f"upper_bound must be >= 0, got {upper_bound}")
        _check_page_size(page_size)
        self._client = client
        self.upper_bound = upper_bound
        self.page_size = page_size
        self.items_path = items_path

    def _path(self, collection_id: str) -> str:
        return self.items_path.format(collection_id=collection_id)

    async def _item_exists_at(self, path: str, offset: int) -> bool:
        """Probe one offset. Any API failure counts as "no item here"."""
        try:
            items = await self._client.get_collection_page(path, offset=offset, limit=1)
        except BadRequest:
            logger.debug("Probe offset %d: 400, past the end", offset)
            return False
        except FaceitAPIError as exc:
            logger.warning("Probe offset %d failed, treating as empty: %s", offset, exc)
            return False
        return len(items) > 0

    async def find_exact_count(self, collection_id: str) -> int:
        """Binary-search the number of items in a collection.

        Searches offsets ``[0, upper_bound]`` with one-item probes, so the
        result is exact for any size up to ``upper_bound + 1`` and takes
        O(log upper_bound) requests.
        """
        path = self._path(collection_id)
        low, high = 0, self.upper_bound
        count = 0
        probes = 0

        while low <= high:
            mid = (low + high) // 2
            probes += 1
            if await self._item_exists_at(path, mid):
                count = mid + 1
                low = mid + 1
            else:
                high = mid - 1

        logger.debug(
            "Collection %s: %d items (%d probes)", collection_id, count, probes
        )
        return count

    async def fetch_collection(
        self, collection_id: str, page_size: int | None = None
    ) -> list[dict]:
        """Return all items of ``collection_id`` in server order.

        Raises:
            FaceitAPIError: if any page request fails. Partial results are
                discarded; probe failures never raise.
            ValueError: if ``page_size`` is outside 1..100.
        """
        if page_size is None:
            page_size = self.page_size
        _check_page_size(page_size)

        total = await self.find_exact_count(collection_id)
        logger.info("Collection %s: exact total %d items", collection_id, total)
        if total == 0:
            return []

        path = self._path(collection_id)
        items: list[dict] = []
        for offset in range(0, total, page_size):
            limit = min(page_size, total - offset)
            page = await self._client.get_collection_page(path, offset=offset, limit=limit)
            items.extend(page)

        if len(items) != total:
            logger.warning(
                "Collection %s: expected %d items, pages returned %d",
                collection_id, total, len(items),
            )
        return items


def _check_page_size(page_size: int) -> None:
    if not 1 <= page_size <= MAX_PAGE_SIZE:
        raise ValueError(
            f"page_size must be between 1 and {MAX_PAGE_SIZE}, got {page_size}"
        )


async def fetch_match_stats(client, match_id: str) -> dict | None:
    """Fetch detailed statistics for one match.

    Returns ``None`` when the API answers 404, which FACEIT does for matches
    whose statistics are not published (cancelled, forfeited, still live).
    Every other failure propagates.
    """
    try:
        return await client.get_match_stats(match_id)
    except PageNotFound:
        logger.warning("Match %s stats not found (404)", match_id)
        return None
