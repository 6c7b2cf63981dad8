#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
easyinvoke public API with lazy imports.

Turns a resolved service operation, synchronous or begin/end, into a reusable
invoker with one awaitable calling convention.

Author: easyinvoke maintainers
"""

from importlib import import_module
from typing import Any, Dict, Tuple

from ._version import __version__

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "OperationInvoker": ("easyinvoke.dispatcher", "OperationInvoker"),
    "SyncMethodInvoker": ("easyinvoke.dispatcher", "SyncMethodInvoker"),
    "AsyncMethodInvoker": ("easyinvoke.dispatcher", "AsyncMethodInvoker"),
    "InvocationOutcome": ("easyinvoke.dispatcher", "InvocationOutcome"),
    "InvocationHandle": ("easyinvoke.dispatcher", "InvocationHandle"),
    "create_operation_invoker": ("easyinvoke.dispatcher", "create_operation_invoker"),
    "OperationDescriptor": ("easyinvoke.contracts", "OperationDescriptor"),
    "MethodDescriptor": ("easyinvoke.contracts", "MethodDescriptor"),
    "ParameterDescriptor": ("easyinvoke.contracts", "ParameterDescriptor"),
    "ParameterDirection": ("easyinvoke.contracts", "ParameterDirection"),
    "ParameterRole": ("easyinvoke.contracts", "ParameterRole"),
    "Reference": ("easyinvoke.contracts", "Reference"),
    "Out": ("easyinvoke.contracts", "Out"),
    "InOut": ("easyinvoke.contracts", "InOut"),
    "AsyncCallback": ("easyinvoke.contracts", "AsyncCallback"),
    "AsyncState": ("easyinvoke.contracts", "AsyncState"),
    "AsyncResult": ("easyinvoke.contracts", "AsyncResult"),
    "reflect_method": ("easyinvoke.contracts", "reflect_method"),
    "describe_operation": ("easyinvoke.contracts", "describe_operation"),
    "InvalidOperationError": ("easyinvoke.core.utils.exceptions", "InvalidOperationError"),
    "DescriptorError": ("easyinvoke.core.utils.exceptions", "DescriptorError"),
    "InvokerConfig": ("easyinvoke.core.config", "InvokerConfig"),
}

__all__ = ["__version__", *sorted(_EXPORT_MAP.keys())]


def __getattr__(name: str) -> Any:
    """
    Resolve public API symbols lazily.
    """
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'easyinvoke' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
