#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Invoker for operations implemented as a legacy begin/end method pair.

Callers never see the two phases: ``invoke_async`` starts the begin method on
a background executor and returns a task that completes through the end
method.

Author: easyinvoke maintainers
"""

import asyncio
from concurrent.futures import Future as ConcurrentFuture
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from ..contracts.models import MethodDescriptor, OperationDescriptor
from ..core.utils.concurrency import get_bridge_loop
from ..core.utils.exceptions import DescriptorError, InvalidOperationError
from .invoker_util import (
    BeginShim,
    EndShim,
    InFlightCall,
    ParameterFlowPlan,
    generate_invoke_begin_shim,
    generate_invoke_end_shim,
)
from .operation_invoker import InvocationOutcome, OperationInvoker, PreparedOperation


@dataclass(frozen=True)
class _PreparedTwoPhaseOperation(PreparedOperation):
    begin_plan: ParameterFlowPlan
    end_plan: ParameterFlowPlan
    begin_shim: BeginShim
    end_shim: EndShim


class AsyncMethodInvoker(OperationInvoker):
    """
    Adapts a begin/end method pair to the awaitable invoker contract.
    """

    def __init__(self, operation: OperationDescriptor, **kwargs: Any) -> None:
        if operation is not None and not operation.is_two_phase:
            raise DescriptorError(
                "End method cannot be None",
                operation_name=operation.name,
            )
        super().__init__(operation, **kwargs)
        self._begin_method_name: Optional[str] = None
        self._end_method_name: Optional[str] = None

    @property
    def begin_method(self) -> MethodDescriptor:
        return self.operation.method

    @property
    def end_method(self) -> MethodDescriptor:
        return self.operation.end_method

    @property
    def begin_method_name(self) -> str:
        if self._begin_method_name is None:
            self._begin_method_name = self.begin_method.name
        return self._begin_method_name

    @property
    def end_method_name(self) -> str:
        if self._end_method_name is None:
            self._end_method_name = self.end_method.name
        return self._end_method_name

    def _prepare(self) -> _PreparedTwoPhaseOperation:
        begin_shim, begin_plan = generate_invoke_begin_shim(
            self.begin_method, self._classifier, executor=self._executor
        )
        end_shim, end_plan = generate_invoke_end_shim(self.end_method, self._classifier)
        return _PreparedTwoPhaseOperation(
            input_count=begin_plan.input_count,
            output_count=end_plan.output_count,
            begin_plan=begin_plan,
            end_plan=end_plan,
            begin_shim=begin_shim,
            end_shim=end_shim,
        )

    async def _complete(
        self,
        prepared: _PreparedTwoPhaseOperation,
        instance: Any,
        in_flight: InFlightCall,
        outputs: List[Any],
    ) -> InvocationOutcome:
        return_value = await prepared.end_shim(instance, in_flight, outputs)
        return InvocationOutcome(return_value, outputs)

    def _start(
        self,
        prepared: _PreparedTwoPhaseOperation,
        instance: Any,
        inputs: Optional[Sequence[Any]],
        outputs: List[Any],
    ) -> "asyncio.Future[InvocationOutcome]":
        loop = asyncio.get_running_loop()
        in_flight = prepared.begin_shim(instance, inputs)
        task = loop.create_task(
            self._complete(prepared, instance, in_flight, outputs),
            name="easyinvoke:{0}".format(self.operation_name),
        )

        def _cancel_work(finished: "asyncio.Future[InvocationOutcome]") -> None:
            if finished.cancelled() and not in_flight.done():
                in_flight.cancel()

        task.add_done_callback(_cancel_work)
        return task

    async def _invoke_to_completion(
        self, instance: Any, inputs: Optional[Sequence[Any]]
    ) -> InvocationOutcome:
        return await self.invoke_async(instance, inputs)

    def _submit(
        self, instance: Any, inputs: Optional[Sequence[Any]]
    ) -> "ConcurrentFuture[InvocationOutcome]":
        # Runs on the shared bridge loop; the begin method still goes to the executor.
        return asyncio.run_coroutine_threadsafe(
            self._invoke_to_completion(instance, inputs), get_bridge_loop()
        )

    def invoke(self, instance: Any, inputs: Optional[Sequence[Any]] = None) -> InvocationOutcome:
        """
        Blocking entry for callers without an event loop.
        """
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            self._validate(self._ensure_initialized(), instance, inputs)
            return asyncio.run(self._invoke_to_completion(instance, inputs))

        raise InvalidOperationError(
            "Blocking invoke cannot run inside an event loop; await invoke_async instead",
            operation_name=self.operation_name,
        )
