#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Operation description layer consumed by the dispatcher.

Author: easyinvoke maintainers
"""

from .models import (
    MethodDescriptor,
    MethodInvoker,
    OperationDescriptor,
    ParameterDescriptor,
    ParameterDirection,
    ParameterRole,
)
from .reflector import (
    DEFAULT_CLASSIFIER,
    AsyncCallback,
    AsyncResult,
    AsyncState,
    InOut,
    Out,
    ParameterFlowClassifier,
    Reference,
    ServiceReflector,
    describe_operation,
    reflect_method,
)

__all__ = [
    "MethodDescriptor",
    "MethodInvoker",
    "OperationDescriptor",
    "ParameterDescriptor",
    "ParameterDirection",
    "ParameterRole",
    "ParameterFlowClassifier",
    "ServiceReflector",
    "DEFAULT_CLASSIFIER",
    "Reference",
    "Out",
    "InOut",
    "AsyncCallback",
    "AsyncState",
    "AsyncResult",
    "reflect_method",
    "describe_operation",
]
