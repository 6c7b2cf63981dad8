#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Concurrency primitives for easyinvoke.

Author: easyinvoke maintainers
"""

import asyncio
import threading
from concurrent.futures import Executor, ThreadPoolExecutor
from typing import Any, Callable, Generic, Optional, TypeVar

T = TypeVar("T")

_UNSET: Any = object()


class WriteOnce(Generic[T]):
    """
    Publish-once cell for lazily built, immutable values.

    Readers take no lock. Concurrent first readers may each run the factory;
    the first value to be published wins and every later reader observes that
    same object. Publication is a single reference assignment, so a reader
    either sees nothing or a fully built value.
    """

    __slots__ = ("_value", "_guard")

    def __init__(self) -> None:
        self._value: Any = _UNSET
        self._guard = threading.Lock()

    @property
    def is_set(self) -> bool:
        return self._value is not _UNSET

    def get(self, factory: Callable[[], T]) -> T:
        value = self._value
        if value is not _UNSET:
            return value

        # Build outside the guard so user-supplied descriptors never run under a lock.
        built = factory()
        with self._guard:
            if self._value is _UNSET:
                self._value = built
            return self._value


def create_loop_future() -> "asyncio.Future[Any]":
    """
    Create a future bound to the currently running event loop.
    """
    return asyncio.get_running_loop().create_future()


def completed_loop_future(result: Any = None, exception: Optional[BaseException] = None) -> "asyncio.Future[Any]":
    """
    Create an already-resolved future on the running loop.
    """
    future = create_loop_future()
    if exception is not None:
        future.set_exception(exception)
    else:
        future.set_result(result)
    return future


_executor_lock = threading.Lock()
_background_executor: Optional[ThreadPoolExecutor] = None
_bridge_loop: Optional[asyncio.AbstractEventLoop] = None
_bridge_thread: Optional[threading.Thread] = None


def get_background_executor() -> Executor:
    """
    Return the shared executor used to offload two-phase operations.
    """
    global _background_executor

    executor = _background_executor
    if executor is not None:
        return executor

    from ..config import get_config

    with _executor_lock:
        if _background_executor is None:
            config = get_config()
            _background_executor = ThreadPoolExecutor(
                max_workers=config.max_background_workers,
                thread_name_prefix=config.thread_name_prefix,
            )
        return _background_executor


def _run_bridge_loop(loop: asyncio.AbstractEventLoop) -> None:
    asyncio.set_event_loop(loop)
    try:
        loop.run_forever()
    finally:
        loop.close()


def get_bridge_loop() -> asyncio.AbstractEventLoop:
    """
    Return the shared event loop that drives callback-style two-phase calls.

    The loop runs forever on one daemon thread, started on first use.
    Coroutines are handed to it with ``asyncio.run_coroutine_threadsafe``.
    """
    global _bridge_loop, _bridge_thread

    loop = _bridge_loop
    if loop is not None:
        return loop

    from ..config import get_config

    with _executor_lock:
        if _bridge_loop is None:
            loop = asyncio.new_event_loop()
            thread = threading.Thread(
                target=_run_bridge_loop,
                args=(loop,),
                name="{0}-loop".format(get_config().thread_name_prefix),
                daemon=True,
            )
            thread.start()
            _bridge_loop, _bridge_thread = loop, thread
        return _bridge_loop


def shutdown_background_executor(wait: bool = True) -> None:
    """
    Stop the shared bridge loop and executor; both are recreated on next use.
    """
    global _background_executor, _bridge_loop, _bridge_thread

    with _executor_lock:
        executor, _background_executor = _background_executor, None
        loop, _bridge_loop = _bridge_loop, None
        thread, _bridge_thread = _bridge_thread, None

    if loop is not None:
        loop.call_soon_threadsafe(loop.stop)
        if wait:
            thread.join()
    if executor is not None:
        executor.shutdown(wait=wait)


__all__ = [
    "WriteOnce",
    "create_loop_future",
    "completed_loop_future",
    "get_background_executor",
    "get_bridge_loop",
    "shutdown_background_executor",
]
