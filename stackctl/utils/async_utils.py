# stackctl/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import threading
from typing import Any, Callable, Coroutine, List, Optional, Sequence, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        return asyncio.run(coro)

    # Already in async context, run on a fresh loop in a helper thread
    result = None
    exception = None

    def run_in_thread():
        nonlocal result, exception
        try:
            result = asyncio.run(coro)
        except Exception as e:
            exception = e

    thread = threading.Thread(target=run_in_thread)
    thread.start()
    thread.join()

    if exception:
        raise exception
    return result


async def gather_in_threads(calls: Sequence[Callable[[], T]],
                            limit: Optional[int] = None) -> List[T]:
    """
    Run blocking callables concurrently in worker threads

    Results are returned in the order of ``calls`` regardless of
    completion order.

    Args:
        calls: Zero-argument blocking callables
        limit: Maximum number of calls in flight (None for unbounded)

    Returns:
        List of results
    """
    semaphore = asyncio.Semaphore(limit) if limit else None

    async def run_one(call: Callable[[], T]) -> T:
        if semaphore is None:
            return await asyncio.to_thread(call)
        async with semaphore:
            return await asyncio.to_thread(call)

    return list(await asyncio.gather(*(run_one(call) for call in calls)))
