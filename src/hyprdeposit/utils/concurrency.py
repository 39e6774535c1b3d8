"""Helpers for progress callbacks and bounded concurrency."""

import asyncio
import inspect
import logging
from typing import Any, Awaitable, Callable, Iterable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Receives (message, percent)
ProgressCallback = Callable[[str, float], Any]


async def notify(callback: Optional[Callable[..., Any]], *args: Any) -> None:
    """Invoke a progress callback that may be sync or async."""
    if callback is None:
        return
    result = callback(*args)
    if inspect.isawaitable(result):
        await result


async def gather_bounded(
    factories: Iterable[Callable[[], Awaitable[T]]],
    limit: int,
) -> list[T]:
    """Run coroutine factories concurrently, at most ``limit`` at a time.

    Results keep the order of ``factories``. Exceptions propagate; callers
    that want per-item isolation catch inside their factory.
    """
    semaphore = asyncio.Semaphore(max(1, limit))

    async def run(factory: Callable[[], Awaitable[T]]) -> T:
        async with semaphore:
            return await factory()

    return await asyncio.gather(*(run(factory) for factory in factories))
