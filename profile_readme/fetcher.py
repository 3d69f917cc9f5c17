from __future__ import annotations

import asyncio
from typing import Awaitable, Callable, List, Sequence, TypeVar

from .logging import get_logger

T = TypeVar("T")
R = TypeVar("R")

# GitHub's secondary rate limit starts throttling well above this
DEFAULT_CONCURRENCY = 100

_logger = get_logger("fetcher")


async def bounded_map(
    items: Sequence[T],
    operation: Callable[[T], Awaitable[R]],
    limit: int = DEFAULT_CONCURRENCY,
) -> List[R]:
    """Run ``operation`` over ``items`` with at most ``limit`` calls in flight.

    Results come back in input order. The first failure cancels everything
    still pending and is re-raised as is, so callers never see a partial list.
    """
    if limit < 1:
        raise ValueError("limit must be at least 1")
    if not items:
        return []

    semaphore = asyncio.Semaphore(limit)

    async def _run(item: T) -> R:
        async with semaphore:
            return await operation(item)

    _logger.debug("Dispatching %d operations, %d at a time", len(items), limit)
    tasks = [asyncio.ensure_future(_run(item)) for item in items]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise
