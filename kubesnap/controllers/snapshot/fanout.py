"""Bounded fan-out for builders that issue many upstream calls."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Sequence
from typing import TypeVar

from kubesnap.controllers.snapshot.context import current_fanout_limit

logger = logging.getLogger(__name__)

T = TypeVar("T")

TaskFactory = Callable[[], Awaitable[T]]


async def run_limited(
    tasks: Sequence[TaskFactory[T]], limit: int | None = None
) -> list[T | Exception]:
    """Run task factories with at most ``limit`` in flight.

    Without an explicit ``limit`` the bound comes from the build service's
    ``fanout_workers`` setting.

    Returns one entry per task, in input order: the result, or the exception
    the task raised. Cancellation of the caller cancels every pending task.
    """
    if not tasks:
        return []
    if limit is None:
        limit = current_fanout_limit()
    semaphore = asyncio.Semaphore(max(1, limit))

    async def _run(factory: TaskFactory[T]) -> T | Exception:
        async with semaphore:
            # Yield once so a cancelled caller stops before starting more work.
            await asyncio.sleep(0)
            try:
                return await factory()
            except asyncio.CancelledError:
                raise
            except Exception as e:
                return e

    return list(await asyncio.gather(*(_run(factory) for factory in tasks)))


async def collect_with_warnings(
    tasks: Sequence[TaskFactory[T]],
    limit: int | None = None,
    label: str = "resources",
) -> tuple[list[T], list[str]]:
    """Run tasks and turn individual failures into warnings.

    Raises:
        Exception: The first task error, when no task produced a result.
    """
    outcomes = await run_limited(tasks, limit)
    results: list[T] = []
    warnings: list[str] = []
    first_error: Exception | None = None
    for outcome in outcomes:
        if isinstance(outcome, Exception):
            if first_error is None:
                first_error = outcome
            warnings.append(f"Failed to list {label}: {outcome}")
            continue
        results.append(outcome)

    if not results and first_error is not None:
        raise first_error
    if warnings:
        logger.warning("%d of %d %s tasks failed", len(warnings), len(outcomes), label)
    return results, warnings


__all__ = ["TaskFactory", "collect_with_warnings", "run_limited"]
