"""Concurrency helpers for controlling background thread usage."""

from __future__ import annotations

from typing import Any, Callable

import anyio
import anyio.lowlevel

from app.core.config import settings

# One permit by default: the warehouse connection is a single shared handle.
_warehouse_sem = anyio.Semaphore(max(1, settings.WAREHOUSE_MAX_CONCURRENCY))
_security_sem = anyio.Semaphore(max(1, settings.SECURITY_MAX_CONCURRENCY))


async def run_in_thread_warehouse(
    func: Callable[..., Any], *args: Any, timeout: float | None = None
):
    """Run a blocking driver call in a worker thread, serialized and bounded.

    The permit is held until the thread returns, so a statement that outlives
    ``timeout`` never overlaps the next one on the shared connection. The
    driver is expected to enforce the same deadline; ``TimeoutError`` is
    raised once the thread comes back after it.
    """

    async with _warehouse_sem:
        with anyio.fail_after(timeout):
            result = await anyio.to_thread.run_sync(func, *args)
            await anyio.lowlevel.checkpoint()
        return result


async def run_in_thread_security(func: Callable[..., Any], *args: Any, **kwargs: Any):
    async with _security_sem:
        return await anyio.to_thread.run_sync(lambda: func(*args, **kwargs))
