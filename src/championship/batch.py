"""Bounded-concurrency batch execution of an async fetch function.

Items are processed in consecutive chunks of ``concurrency``; each chunk is
dispatched with ``asyncio.gather()`` and awaited in full before the next
starts, so at most ``concurrency`` calls are ever in flight and the output
order always equals the input order.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def batch_fetch(
    items: Sequence[T],
    fetch_fn: Callable[[T], Awaitable[R]],
    concurrency: int = 5,
    on_progress: Callable[[int, int], None] | None = None,
) -> list[R]:
    """Run ``fetch_fn`` over ``items`` with at most ``concurrency`` in flight.

    Args:
        items: Keys to fetch, e.g. match ids.
        fetch_fn: Async function called once per item.
        concurrency: Chunk size, and so the in-flight ceiling.
        on_progress: Called as ``on_progress(completed, total)`` after each
            chunk finishes.

    Returns:
        One result per item, in input order.

    Raises:
        Whatever ``fetch_fn`` raises first -- the whole batch is abandoned.
        Callers that want partial results make ``fetch_fn`` return a
        sentinel (e.g. ``None``) instead of raising.
    """
    if concurrency < 1:
        raise ValueError(f"concurrency must be >= 1, got {concurrency}")

    total = len(items)
    results: list[R] = []

    for start in range(0, total, concurrency):
        chunk = items[start:start + concurrency]
        chunk_results = await asyncio.gather(*(fetch_fn(item) for item in chunk))
        results.extend(chunk_results)

        if on_progress is not None:
            on_progress(len(results), total)
        logger.debug("Batch progress: %d/%d", len(results), total)

    return results
