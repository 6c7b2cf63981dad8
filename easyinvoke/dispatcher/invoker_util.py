#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Invocation shim builders.

A shim is a closure over one method descriptor and its precomputed flow plan.
It scatters caller inputs into a full-width argument list, invokes the method,
and gathers by-reference outputs back into the caller's output list, so the
parameter classification runs once per operation instead of once per call.

Three shims are offered:

- ``generate_invoke_shim``: single synchronous call, runs inline.
- ``generate_invoke_begin_shim``: starts a two-phase operation on a background
  executor and returns an ``InFlightCall``.
- ``generate_invoke_end_shim``: coroutine that awaits the ``InFlightCall`` and
  completes the operation through its end method.

Author: easyinvoke maintainers
"""

import asyncio
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Sequence, Tuple

from ..contracts.models import MethodDescriptor, ParameterRole
from ..contracts.reflector import DEFAULT_CLASSIFIER, ParameterFlowClassifier
from ..core.utils.concurrency import create_loop_future, get_background_executor
from ..core.utils.exceptions import (
    DescriptorError,
    ExceptionTranslator,
    InvalidOperationError,
    TargetInvocationError,
)


@dataclass(frozen=True)
class ParameterFlowPlan:
    """
    Precomputed positions of caller-visible inputs and outputs for one method.

    Infrastructure slots (completion callback, state, async result) are kept
    apart and never count towards ``input_count`` or ``output_count``.
    """

    method_name: str
    parameter_count: int
    input_positions: Tuple[int, ...]
    output_positions: Tuple[int, ...]
    returns_value: bool = True
    callback_position: Optional[int] = None
    state_position: Optional[int] = None
    async_result_position: Optional[int] = None

    @property
    def input_count(self) -> int:
        return len(self.input_positions)

    @property
    def output_count(self) -> int:
        return len(self.output_positions)


def build_flow_plan(
    method: MethodDescriptor,
    classifier: Optional[ParameterFlowClassifier] = None,
) -> ParameterFlowPlan:
    """
    Classify every parameter of ``method`` in a single pass.

    Flow in and flow out are tested independently, so an in/out parameter is
    recorded in both lists.
    """
    if method is None:
        raise DescriptorError("Method descriptor cannot be None")
    classifier = classifier or DEFAULT_CLASSIFIER

    input_positions: List[int] = []
    output_positions: List[int] = []
    infrastructure: Dict[ParameterRole, int] = {}

    for parameter in method.parameters:
        if parameter.role.is_infrastructure:
            if parameter.role in infrastructure:
                raise DescriptorError(
                    "Parameter role '{0}' declared more than once".format(parameter.role.value),
                    method_name=method.name,
                    parameter_name=parameter.name,
                )
            infrastructure[parameter.role] = parameter.position
            continue

        if classifier.flows_in(parameter):
            input_positions.append(parameter.position)
        if classifier.flows_out(parameter):
            output_positions.append(parameter.position)

    return ParameterFlowPlan(
        method_name=method.name,
        parameter_count=method.parameter_count,
        input_positions=tuple(input_positions),
        output_positions=tuple(output_positions),
        returns_value=method.returns_value,
        callback_position=infrastructure.get(ParameterRole.CALLBACK),
        state_position=infrastructure.get(ParameterRole.STATE),
        async_result_position=infrastructure.get(ParameterRole.ASYNC_RESULT),
    )


def _check_inputs(plan: ParameterFlowPlan, inputs: Optional[Sequence[Any]]) -> None:
    actual = 0 if inputs is None else len(inputs)
    if actual != plan.input_count:
        raise ExceptionTranslator.argument_count_mismatch(
            plan.method_name, plan.input_count, actual
        )


def _check_outputs(plan: ParameterFlowPlan, outputs: Optional[List[Any]]) -> None:
    actual = 0 if outputs is None else len(outputs)
    if actual != plan.output_count:
        raise InvalidOperationError(
            "Invalid number of output parameters",
            operation_name=plan.method_name,
            expected=plan.output_count,
            actual=actual,
        )


def _scatter(plan: ParameterFlowPlan, inputs: Optional[Sequence[Any]]) -> Optional[List[Any]]:
    if plan.parameter_count == 0:
        return None
    arguments: List[Any] = [None] * plan.parameter_count
    if inputs is not None:
        for index, position in enumerate(plan.input_positions):
            arguments[position] = inputs[index]
    return arguments


def _gather(plan: ParameterFlowPlan, arguments: Optional[List[Any]], outputs: Optional[List[Any]]) -> None:
    for index, position in enumerate(plan.output_positions):
        outputs[index] = arguments[position]


def _invoke_unwrapped(method: MethodDescriptor, target: Any, arguments: Optional[List[Any]]) -> Any:
    """
    Invoke ``method`` and re-raise body failures with their own type and traceback.
    """
    try:
        return method.invoke(target, arguments)
    except TargetInvocationError as envelope:
        failure = ExceptionTranslator.unwrap_invocation_error(envelope)
    raise failure.with_traceback(failure.__traceback__)


InvokeShim = Callable[[Any, Optional[Sequence[Any]], List[Any]], Any]


def generate_invoke_shim(
    method: MethodDescriptor,
    classifier: Optional[ParameterFlowClassifier] = None,
) -> Tuple[InvokeShim, ParameterFlowPlan]:
    """
    Build a synchronous shim ``shim(target, inputs, outputs) -> result``.
    """
    plan = build_flow_plan(method, classifier)
    returns_value = plan.returns_value

    def invoke_shim(target: Any, inputs: Optional[Sequence[Any]], outputs: List[Any]) -> Any:
        _check_inputs(plan, inputs)
        _check_outputs(plan, outputs)
        arguments = _scatter(plan, inputs)
        result = _invoke_unwrapped(method, target, arguments)
        _gather(plan, arguments, outputs)
        return result if returns_value else None

    return invoke_shim, plan


@dataclass
class InFlightCall:
    """
    A started two-phase operation.

    ``work`` resolves to the begin method's return value once it has run on the
    background executor. ``completion`` is set only when the begin method takes
    a completion callback and resolves to the value passed to that callback.
    ``arguments`` is the begin-phase argument list; by-reference values written
    during execution stay reachable through it.
    """

    work: "asyncio.Future[Any]"
    completion: Optional["asyncio.Future[Any]"]
    arguments: Optional[List[Any]]
    state: Any = None

    def done(self) -> bool:
        if not self.work.done():
            return False
        return self.completion is None or self.completion.done()

    def cancel(self) -> bool:
        cancelled = self.work.cancel()
        if self.completion is not None:
            cancelled = self.completion.cancel() or cancelled
        return cancelled


def _completion_callback(
    loop: asyncio.AbstractEventLoop, completion: "asyncio.Future[Any]"
) -> Callable[..., None]:
    def resolve(async_result: Any) -> None:
        if not completion.done():
            completion.set_result(async_result)

    def on_complete(async_result: Any = None) -> None:
        try:
            loop.call_soon_threadsafe(resolve, async_result)
        except RuntimeError:
            # The caller's loop is gone; nobody is waiting for this result.
            if not loop.is_closed():
                raise

    return on_complete


def _link(work: "asyncio.Future[Any]", completion: "asyncio.Future[Any]") -> None:
    # A failed begin never fires its callback; cancelling the completion
    # avoids leaving it pending forever.
    def on_work_done(future: "asyncio.Future[Any]") -> None:
        if (future.cancelled() or future.exception() is not None) and not completion.done():
            completion.cancel()

    def on_completion_done(future: "asyncio.Future[Any]") -> None:
        if future.cancelled() and not work.done():
            work.cancel()

    work.add_done_callback(on_work_done)
    completion.add_done_callback(on_completion_done)


BeginShim = Callable[..., InFlightCall]


def generate_invoke_begin_shim(
    method: MethodDescriptor,
    classifier: Optional[ParameterFlowClassifier] = None,
    executor: Optional[Executor] = None,
) -> Tuple[BeginShim, ParameterFlowPlan]:
    """
    Build ``shim(target, inputs, state=None) -> InFlightCall``.

    The begin method is always scheduled on ``executor`` (or the shared
    background executor), even when it completes synchronously, so the
    calling thread never runs it. Must be called from a running event loop.
    """
    plan = build_flow_plan(method, classifier)

    def invoke_begin_shim(target: Any, inputs: Optional[Sequence[Any]], state: Any = None) -> InFlightCall:
        _check_inputs(plan, inputs)
        loop = asyncio.get_running_loop()
        arguments = _scatter(plan, inputs)

        completion: Optional["asyncio.Future[Any]"] = None
        if plan.callback_position is not None:
            completion = create_loop_future()
            arguments[plan.callback_position] = _completion_callback(loop, completion)
        if plan.state_position is not None:
            arguments[plan.state_position] = state

        work = loop.run_in_executor(
            executor or get_background_executor(),
            _invoke_unwrapped,
            method,
            target,
            arguments,
        )
        if completion is not None:
            _link(work, completion)
        return InFlightCall(work=work, completion=completion, arguments=arguments, state=state)

    return invoke_begin_shim, plan


EndShim = Callable[[Any, InFlightCall, List[Any]], Awaitable[Any]]


def generate_invoke_end_shim(
    method: MethodDescriptor,
    classifier: Optional[ParameterFlowClassifier] = None,
) -> Tuple[EndShim, ParameterFlowPlan]:
    """
    Build ``await shim(target, in_flight, outputs) -> result``.

    The async result handed to the end method is the value passed to the
    completion callback, or the begin method's return value when the callback
    delivered nothing.
    """
    plan = build_flow_plan(method, classifier)
    # The end method is only fed the async result; a plain input would always be None.
    for parameter in method.parameters:
        if parameter.position in plan.input_positions and parameter.position not in plan.output_positions:
            raise DescriptorError(
                "End method parameters must be outputs or the async result",
                method_name=method.name,
                parameter_name=parameter.name,
            )
    returns_value = plan.returns_value

    async def invoke_end_shim(target: Any, in_flight: InFlightCall, outputs: List[Any]) -> Any:
        _check_outputs(plan, outputs)
        returned = await in_flight.work
        signalled = None
        if in_flight.completion is not None:
            signalled = await in_flight.completion
        async_result = signalled if signalled is not None else returned

        arguments = _scatter(plan, None)
        if plan.async_result_position is not None:
            arguments[plan.async_result_position] = async_result

        result = _invoke_unwrapped(method, target, arguments)
        _gather(plan, arguments, outputs)
        return result if returns_value else None

    return invoke_end_shim, plan


__all__ = [
    "ParameterFlowPlan",
    "InFlightCall",
    "build_flow_plan",
    "generate_invoke_shim",
    "generate_invoke_begin_shim",
    "generate_invoke_end_shim",
]
