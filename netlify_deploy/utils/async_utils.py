# netlify_deploy/utils/async_utils.py
"""Asynchronous operation utilities"""

import asyncio
import functools
from typing import Any, Callable, Coroutine, List, TypeVar

T = TypeVar('T')


def run_async(coro: Coroutine[Any, Any, T]) -> T:
    """
    Run async coroutine in sync context

    Args:
        coro: Coroutine to run

    Returns:
        Coroutine result
    """
    loop = None
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        # No running loop
        pass

    if loop and loop.is_running():
        # Already in async context, run on a fresh loop in a thread
        import threading

        result = None
        exception = None

        def run_in_thread():
            nonlocal result, exception
            new_loop = asyncio.new_event_loop()
            try:
                asyncio.set_event_loop(new_loop)
                result = new_loop.run_until_complete(coro)
            except BaseException as e:
                exception = e
            finally:
                new_loop.close()

        thread = threading.Thread(target=run_in_thread)
        thread.start()
        thread.join()

        if exception:
            raise exception
        return result
    else:
        return asyncio.run(coro)


def sync_to_async(func: Callable[..., T]) -> Callable[..., Coroutine[Any, Any, T]]:
    """
    Decorator to convert sync function to async

    Args:
        func: Sync function (run in the default executor)

    Returns:
        Async wrapper function
    """

    @functools.wraps(func)
    async def wrapper(*args, **kwargs):
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, functools.partial(func, *args, **kwargs))

    return wrapper


class AsyncPool:
    """Simple async task pool"""

    def __init__(self, max_workers: int = 10):
        self.max_workers = max_workers
        self.semaphore = asyncio.Semaphore(max_workers)
        self.tasks: List[asyncio.Task] = []

    async def submit(self, coro: Coroutine) -> asyncio.Task:
        """Submit task to pool"""

        async def wrapped():
            async with self.semaphore:
                return await coro

        task = asyncio.ensure_future(wrapped())
        self.tasks.append(task)
        return task

    async def wait_all(self) -> List[Any]:
        """Wait for all tasks, returning results (or exceptions) in submit order"""
        try:
            results = await asyncio.gather(*self.tasks, return_exceptions=True)
        except asyncio.CancelledError:
            for task in self.tasks:
                task.cancel()
            raise
        finally:
            self.tasks = []
        return results
