#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Invoker for operations implemented by a single synchronous method.

Author: easyinvoke maintainers
"""

import asyncio
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence

from ..contracts.models import MethodDescriptor, OperationDescriptor
from ..core.utils.concurrency import completed_loop_future
from ..core.utils.exceptions import DescriptorError
from .invoker_util import InvokeShim, ParameterFlowPlan, generate_invoke_shim
from .operation_invoker import InvocationOutcome, OperationInvoker, PreparedOperation


@dataclass(frozen=True)
class _PreparedSyncOperation(PreparedOperation):
    plan: ParameterFlowPlan
    shim: InvokeShim


class SyncMethodInvoker(OperationInvoker):
    """
    Runs the method inline on the calling thread.

    ``invoke_async`` returns an already-completed future: no offload is added
    for this shape.
    """

    def __init__(self, operation: OperationDescriptor, **kwargs: Any) -> None:
        if operation is not None and operation.is_two_phase:
            raise DescriptorError(
                "SyncMethodInvoker cannot run a two-phase operation",
                operation_name=operation.name,
            )
        super().__init__(operation, **kwargs)
        self._method_name: Optional[str] = None

    @property
    def method(self) -> MethodDescriptor:
        return self.operation.method

    @property
    def method_name(self) -> str:
        if self._method_name is None:
            self._method_name = self.method.name
        return self._method_name

    def _prepare(self) -> _PreparedSyncOperation:
        shim, plan = generate_invoke_shim(self.method, self._classifier)
        return _PreparedSyncOperation(
            input_count=plan.input_count,
            output_count=plan.output_count,
            plan=plan,
            shim=shim,
        )

    def _start(
        self,
        prepared: _PreparedSyncOperation,
        instance: Any,
        inputs: Optional[Sequence[Any]],
        outputs: List[Any],
    ) -> "asyncio.Future[InvocationOutcome]":
        try:
            return_value = prepared.shim(instance, inputs, outputs)
        except Exception as exc:
            return completed_loop_future(exception=exc)
        return completed_loop_future(result=InvocationOutcome(return_value, outputs))

    def invoke(self, instance: Any, inputs: Optional[Sequence[Any]] = None) -> InvocationOutcome:
        prepared = self._ensure_initialized()
        self._validate(prepared, instance, inputs)
        outputs: List[Any] = [None] * prepared.output_count
        return_value = prepared.shim(instance, inputs, outputs)
        return InvocationOutcome(return_value, outputs)
