"""Fan-out helper for bulk operations.

Runs one coroutine per item, either concurrently (bounded by
``max_workers``) or strictly in sequence. A failure on one item never
prevents the others from running; every item gets a result slot.
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass
from typing import Generic, TypeVar

from .logging import get_logger

T = TypeVar('T')
R = TypeVar('R')


@dataclass
class ConcurrencyConfig:
    """Configuration for concurrency settings."""

    enabled: bool = True
    max_workers: int = 4


@dataclass
class BulkItemResult(Generic[T, R]):
    item: T
    value: R | None = None
    error: BaseException | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


async def _run_sequential(
    items: Sequence[T], fn: Callable[[T], Awaitable[R]]
) -> list[BulkItemResult[T, R]]:
    results: list[BulkItemResult[T, R]] = []
    for item in items:
        try:
            results.append(BulkItemResult(item, await fn(item)))
        except Exception as exc:
            results.append(BulkItemResult(item, error=exc))
    return results


async def _run_concurrent(
    items: Sequence[T], fn: Callable[[T], Awaitable[R]], max_workers: int
) -> list[BulkItemResult[T, R]]:
    semaphore = asyncio.Semaphore(max(1, max_workers))

    async def _bounded(item: T) -> R:
        async with semaphore:
            return await fn(item)

    outcomes = await asyncio.gather(*(_bounded(item) for item in items), return_exceptions=True)
    results: list[BulkItemResult[T, R]] = []
    for item, outcome in zip(items, outcomes):
        if isinstance(outcome, BaseException):
            if not isinstance(outcome, Exception):
                raise outcome
            results.append(BulkItemResult(item, error=outcome))
        else:
            results.append(BulkItemResult(item, outcome))
    return results


async def run_for_each(
    items: Sequence[T],
    fn: Callable[[T], Awaitable[R]],
    config: ConcurrencyConfig | None = None,
    *,
    operation: str = "bulk",
) -> list[BulkItemResult[T, R]]:
    """Await ``fn(item)`` for every item; results keep input order."""
    config = config or ConcurrencyConfig()
    logger = get_logger()
    start = time.perf_counter()
    if config.enabled and len(items) > 1:
        results = await _run_concurrent(items, fn, config.max_workers)
    else:
        results = await _run_sequential(items, fn)

    failed = sum(1 for r in results if not r.ok)
    logger.log_performance(
        operation,
        (time.perf_counter() - start) * 1000,
        item_count=len(items),
        failed_count=failed,
        concurrent=config.enabled,
    )
    return results


__all__ = ["BulkItemResult", "ConcurrencyConfig", "run_for_each"]
