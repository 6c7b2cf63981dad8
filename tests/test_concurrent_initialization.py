#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for lazy preparation under concurrent first use.

Author: easyinvoke maintainers
"""

import threading

from easyinvoke.contracts import Out, describe_operation
from easyinvoke.core.utils.concurrency import WriteOnce
from easyinvoke.dispatcher import AsyncMethodInvoker, SyncMethodInvoker

THREAD_COUNT = 8


class Service:
    def split(self, value: int, low: Out[int], high: Out[int]) -> int:
        low.value = value % 10
        high.value = value // 10
        return value

    def begin_split(self, value, callback, state):
        callback(value)

    def end_split(self, low: Out[int], high: Out[int], result) -> int:
        low.value = result % 10
        high.value = result // 10
        return result


def _hammer(call):
    barrier = threading.Barrier(THREAD_COUNT)
    results = []
    errors = []
    lock = threading.Lock()

    def worker(index):
        barrier.wait(timeout=5)
        try:
            outcome = call(index)
        except Exception as exc:
            with lock:
                errors.append(exc)
        else:
            with lock:
                results.append((index, outcome))

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(THREAD_COUNT)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)
    return results, errors


def test_concurrent_first_calls_on_sync_invoker():
    for _ in range(10):
        invoker = SyncMethodInvoker(describe_operation(Service.split))

        results, errors = _hammer(lambda i: invoker.invoke(Service(), [40 + i]))

        assert errors == []
        assert len(results) == THREAD_COUNT
        for index, outcome in results:
            assert outcome == (40 + index, [index, 4])
        assert invoker.input_parameter_count == 1
        assert invoker.output_parameter_count == 2


def test_concurrent_first_calls_on_two_phase_invoker():
    invoker = AsyncMethodInvoker(
        describe_operation(begin=Service.begin_split, end=Service.end_split)
    )

    results, errors = _hammer(lambda i: invoker.invoke(Service(), [70 + i]))

    assert errors == []
    assert len(results) == THREAD_COUNT
    for index, outcome in results:
        assert outcome == (70 + index, [index, 7])
    assert invoker.input_parameter_count == 1
    assert invoker.output_parameter_count == 2


def test_write_once_publishes_a_single_value():
    cell = WriteOnce()
    builders = threading.Barrier(4)
    built = []

    def factory():
        value = object()
        built.append(value)
        builders.wait(timeout=5)
        return value

    results, errors = [], []

    def reader():
        try:
            results.append(cell.get(factory))
        except Exception as exc:
            errors.append(exc)

    threads = [threading.Thread(target=reader) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join(timeout=10)

    assert errors == []
    assert len(built) == 4
    assert len({id(value) for value in results}) == 1
    assert results[0] in built
    assert cell.is_set
    assert cell.get(lambda: object()) is results[0]
