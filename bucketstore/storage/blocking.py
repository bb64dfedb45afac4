"""
Thread pool for blocking filesystem calls.

Every storage operation hands its filesystem work to this pool as a single call,
so the event loop never waits on the disk. The pool is bounded by settings.io_workers.
"""

import asyncio
import functools
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Callable, TypeVar

from bucketstore.config import get_settings

T = TypeVar("T")


@functools.lru_cache()
def get_executor() -> ThreadPoolExecutor:
    workers = get_settings().io_workers
    logging.debug(f"Starting blocking I/O pool with {workers} workers")
    return ThreadPoolExecutor(max_workers=workers, thread_name_prefix="bucketstore-io")


async def run_blocking(func: Callable[..., T], *args) -> T:
    """Run func(*args) in the I/O pool. If the awaiting task is cancelled, the call itself still runs to completion"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(get_executor(), functools.partial(func, *args))


def shutdown_executor() -> None:
    if get_executor.cache_info().currsize:
        get_executor().shutdown(wait=True)
        get_executor.cache_clear()
