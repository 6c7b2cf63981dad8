#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Utility exports for easyinvoke core.

Author: easyinvoke maintainers
"""

from .logger import ModernLogger
from .exceptions import (
    DescriptorError,
    EasyInvokeError,
    ExceptionTranslator,
    InvalidOperationError,
    TargetInvocationError,
)
from .concurrency import (
    WriteOnce,
    completed_loop_future,
    create_loop_future,
    get_background_executor,
    get_bridge_loop,
    shutdown_background_executor,
)

__all__ = [
    "ModernLogger",
    "EasyInvokeError",
    "DescriptorError",
    "InvalidOperationError",
    "TargetInvocationError",
    "ExceptionTranslator",
    "WriteOnce",
    "create_loop_future",
    "completed_loop_future",
    "get_background_executor",
    "get_bridge_loop",
    "shutdown_background_executor",
]
