"""Evenly spread sampling and batched concurrent detail retrieval."""

from __future__ import annotations

import asyncio
import logging
from typing import AsyncIterator, Awaitable, Callable, Optional, Sequence, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def sample_indices(total: int, sample_size: int) -> list[int]:
    """``sample_size`` indices spread evenly over ``[0, total)``; all indices when total fits."""
    if total <= 0 or sample_size <= 0:
        return []
    if total <= sample_size:
        return list(range(total))
    return [(i * total) // sample_size for i in range(sample_size)]


async def _fetch_or_none(index: int, fetch: Callable[[int], Awaitable[T]]) -> Optional[T]:
    try:
        return await fetch(index)
    except asyncio.CancelledError:
        raise
    except Exception as exc:
        logger.warning("detail fetch failed index=%s error=%s", index, exc)
        return None


async def iter_batches(
    indices: Sequence[int],
    fetch: Callable[[int], Awaitable[T]],
    batch_size: int = 10,
) -> AsyncIterator[list[Optional[T]]]:
    """Yield one result list per batch, in index order, after the whole batch completes.

    Fetches inside a batch run concurrently; the next batch starts only after the
    caller resumes the iterator. A failed fetch yields None in its slot.
    """
    width = max(1, int(batch_size))
    for start in range(0, len(indices), width):
        batch = indices[start : start + width]
        results = await asyncio.gather(*(_fetch_or_none(idx, fetch) for idx in batch))
        yield list(results)
