#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
easyinvoke core module exports (lazy-loaded).

Author: easyinvoke maintainers
"""

from importlib import import_module
from typing import Any, Dict, Tuple

_EXPORT_MAP: Dict[str, Tuple[str, str]] = {
    "InvokerConfig": ("easyinvoke.core.config", "InvokerConfig"),
    "get_config": ("easyinvoke.core.config", "get_config"),
    "create_config": ("easyinvoke.core.config", "create_config"),
    "set_config": ("easyinvoke.core.config", "set_config"),
    "ModernLogger": ("easyinvoke.core.utils", "ModernLogger"),
    "get_background_executor": ("easyinvoke.core.utils", "get_background_executor"),
    "shutdown_background_executor": ("easyinvoke.core.utils", "shutdown_background_executor"),
}

__all__ = sorted(_EXPORT_MAP.keys())


def __getattr__(name: str) -> Any:
    if name not in _EXPORT_MAP:
        raise AttributeError("module 'easyinvoke.core' has no attribute '{0}'".format(name))

    module_name, attr_name = _EXPORT_MAP[name]
    module = import_module(module_name)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value
