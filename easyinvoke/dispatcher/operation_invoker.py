#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Operation invoker contract.

Every invoker, whatever the shape of the underlying method, exposes the same
entry points:

- ``invoke_async(instance, inputs)``: awaitable ``InvocationOutcome``
- ``invoke(instance, inputs)``: blocking call for code without an event loop
- ``invoke_begin(...)`` / ``invoke_end(handle)``: callback-style bridge
- ``allocate_inputs()``: correctly sized input list

Preparation (flow plans and shims) is deferred to the first call and then
published once as a single immutable value.

Author: easyinvoke maintainers
"""

import asyncio
from abc import ABC, abstractmethod
from concurrent.futures import Future as ConcurrentFuture
from dataclasses import dataclass
from typing import Any, Callable, List, NamedTuple, Optional, Sequence

from ..contracts.models import OperationDescriptor
from ..contracts.reflector import DEFAULT_CLASSIFIER, ParameterFlowClassifier
from ..core.config import get_config
from ..core.utils.concurrency import WriteOnce, get_background_executor
from ..core.utils.exceptions import (
    DescriptorError,
    ExceptionTranslator,
    InvalidOperationError,
)
from ..core.utils.logger import ModernLogger


class InvocationOutcome(NamedTuple):
    """
    Return value of an operation paired with its output parameter values.
    """

    return_value: Any
    outputs: List[Any]


@dataclass
class InvocationHandle:
    """
    Callback-style handle returned by ``invoke_begin``.
    """

    future: "ConcurrentFuture[InvocationOutcome]"
    state: Any = None

    def done(self) -> bool:
        return self.future.done()

    def result(self, timeout: Optional[float] = None) -> InvocationOutcome:
        return self.future.result(timeout=timeout)


@dataclass(frozen=True)
class PreparedOperation:
    """
    Everything built lazily for an invoker, published as one value.
    """

    input_count: int
    output_count: int


class OperationInvoker(ModernLogger, ABC):
    """
    Base class for operation invokers.

    Subclasses build their shims in ``_prepare`` and start one call in
    ``_start``; validation, lazy preparation and the blocking/callback bridges
    live here.
    """

    def __init__(
        self,
        operation: OperationDescriptor,
        classifier: Optional[ParameterFlowClassifier] = None,
        executor: Optional[Any] = None,
    ) -> None:
        if operation is None:
            raise DescriptorError("Operation descriptor cannot be None")
        ModernLogger.__init__(self, name=type(self).__name__, level=get_config().log_level)

        self.operation = operation
        self._classifier = classifier or DEFAULT_CLASSIFIER
        self._executor = executor
        self._prepared: WriteOnce[PreparedOperation] = WriteOnce()

    @property
    def operation_name(self) -> str:
        return self.operation.name

    @property
    def is_initialized(self) -> bool:
        return self._prepared.is_set

    @property
    def input_parameter_count(self) -> int:
        return self._ensure_initialized().input_count

    @property
    def output_parameter_count(self) -> int:
        return self._ensure_initialized().output_count

    @abstractmethod
    def _prepare(self) -> PreparedOperation:
        """
        Build flow plans and shims. Must be a pure function of the descriptor.
        """

    @abstractmethod
    def _start(
        self,
        prepared: PreparedOperation,
        instance: Any,
        inputs: Optional[Sequence[Any]],
        outputs: List[Any],
    ) -> "asyncio.Future[InvocationOutcome]":
        """
        Start one validated call and return a future for its outcome.
        """

    @abstractmethod
    def invoke(self, instance: Any, inputs: Optional[Sequence[Any]] = None) -> InvocationOutcome:
        """
        Run one call to completion on the calling thread.
        """

    def _build_prepared(self) -> PreparedOperation:
        prepared = self._prepare()
        self.debug(
            "Prepared operation '%s': %d input(s), %d output(s)",
            self.operation_name,
            prepared.input_count,
            prepared.output_count,
        )
        return prepared

    def _ensure_initialized(self) -> PreparedOperation:
        return self._prepared.get(self._build_prepared)

    def _validate(
        self,
        prepared: PreparedOperation,
        instance: Any,
        inputs: Optional[Sequence[Any]],
    ) -> None:
        if instance is None:
            raise InvalidOperationError("No service object", operation_name=self.operation_name)

        if inputs is None:
            if prepared.input_count > 0:
                raise InvalidOperationError(
                    "Input parameters cannot be null",
                    operation_name=self.operation_name,
                    expected=prepared.input_count,
                )
            return

        if len(inputs) != prepared.input_count:
            raise ExceptionTranslator.argument_count_mismatch(
                self.operation_name, prepared.input_count, len(inputs)
            )

    def allocate_inputs(self) -> List[Any]:
        """
        Return a ``None``-filled input list sized for this operation.
        """
        return [None] * self._ensure_initialized().input_count

    def invoke_async(
        self, instance: Any, inputs: Optional[Sequence[Any]] = None
    ) -> "asyncio.Future[InvocationOutcome]":
        """
        Start the operation and return an awaitable for its outcome.

        Validation errors are raised immediately; failures of the operation
        itself are delivered through the returned future. Must be called from
        a running event loop.
        """
        prepared = self._ensure_initialized()
        self._validate(prepared, instance, inputs)
        outputs: List[Any] = [None] * prepared.output_count
        return self._start(prepared, instance, inputs, outputs)

    def _submit(
        self, instance: Any, inputs: Optional[Sequence[Any]]
    ) -> "ConcurrentFuture[InvocationOutcome]":
        """
        Hand one validated call to background workers for ``invoke_begin``.
        """
        executor = self._executor or get_background_executor()
        return executor.submit(self.invoke, instance, inputs)

    def invoke_begin(
        self,
        instance: Any,
        inputs: Optional[Sequence[Any]] = None,
        callback: Optional[Callable[[InvocationHandle], Any]] = None,
        state: Any = None,
    ) -> InvocationHandle:
        """
        Start the operation in the background and return a handle.

        ``callback(handle)`` runs on the thread that completes the call, or
        immediately if the outcome is already available.
        """
        prepared = self._ensure_initialized()
        self._validate(prepared, instance, inputs)

        handle = InvocationHandle(future=self._submit(instance, inputs), state=state)
        if callback is not None:
            handle.future.add_done_callback(lambda _: callback(handle))
        return handle

    def invoke_end(self, handle: InvocationHandle, timeout: Optional[float] = None) -> InvocationOutcome:
        """
        Wait for a call started with ``invoke_begin`` and return its outcome.
        """
        if not isinstance(handle, InvocationHandle):
            raise InvalidOperationError(
                "Invocation handle was not produced by invoke_begin",
                operation_name=self.operation_name,
            )
        return handle.result(timeout=timeout)

    def __repr__(self) -> str:
        return "{0}(operation={1!r}, initialized={2})".format(
            type(self).__name__, self.operation_name, self.is_initialized
        )
