"""
Deferred work: runs a computation off the critical path of the caller.
"""
import asyncio
import functools
import logging
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Optional

logger = logging.getLogger(__name__)


class DeferredWork(ABC):
    """
    Schedules func(*args) to run later and returns an awaitable result.

    The work never runs synchronously inside defer().
    """

    @abstractmethod
    def defer(self, func, *args) -> asyncio.Future:
        pass


class BackgroundDeferredWork(DeferredWork):
    """Runs the work on a background thread pool."""

    def __init__(self, executor: Executor):
        self.executor = executor

    def defer(self, func, *args) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        return loop.run_in_executor(self.executor, functools.partial(func, *args))


class NextTickDeferredWork(DeferredWork):
    """Runs the work on the event loop at its next iteration."""

    def defer(self, func, *args) -> asyncio.Future:
        loop = asyncio.get_running_loop()
        future = loop.create_future()

        def run():
            if future.cancelled():
                return
            try:
                future.set_result(func(*args))
            except Exception as e:
                future.set_exception(e)

        loop.call_soon(run)
        return future


def get_deferred_work(executor: Optional[Executor] = None) -> DeferredWork:
    """Background execution when a pool is available, next tick otherwise."""
    if executor is not None:
        return BackgroundDeferredWork(executor)
    return NextTickDeferredWork()
