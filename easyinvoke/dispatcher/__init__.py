#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Operation dispatch: shim builders and operation invokers.

Author: easyinvoke maintainers
"""

from concurrent.futures import Executor
from typing import Optional

from ..contracts.models import OperationDescriptor
from ..contracts.reflector import ParameterFlowClassifier
from ..core.utils.exceptions import DescriptorError
from .async_invoker import AsyncMethodInvoker
from .invoker_util import (
    InFlightCall,
    ParameterFlowPlan,
    build_flow_plan,
    generate_invoke_begin_shim,
    generate_invoke_end_shim,
    generate_invoke_shim,
)
from .operation_invoker import (
    InvocationHandle,
    InvocationOutcome,
    OperationInvoker,
    PreparedOperation,
)
from .sync_invoker import SyncMethodInvoker


def create_operation_invoker(
    operation: OperationDescriptor,
    classifier: Optional[ParameterFlowClassifier] = None,
    executor: Optional[Executor] = None,
) -> OperationInvoker:
    """
    Pick the invoker matching the shape of ``operation``.
    """
    if operation is None:
        raise DescriptorError("Operation descriptor cannot be None")
    if operation.is_two_phase:
        return AsyncMethodInvoker(operation, classifier=classifier, executor=executor)
    return SyncMethodInvoker(operation, classifier=classifier, executor=executor)


__all__ = [
    "AsyncMethodInvoker",
    "InFlightCall",
    "InvocationHandle",
    "InvocationOutcome",
    "OperationInvoker",
    "ParameterFlowPlan",
    "PreparedOperation",
    "SyncMethodInvoker",
    "build_flow_plan",
    "create_operation_invoker",
    "generate_invoke_begin_shim",
    "generate_invoke_end_shim",
    "generate_invoke_shim",
]
