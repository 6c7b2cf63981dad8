#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Process-wide configuration for easyinvoke.

Values come from explicit overrides first, then environment variables:

- ``EASYINVOKE_MAX_WORKERS``: size of the shared background executor
- ``EASYINVOKE_THREAD_PREFIX``: thread name prefix of that executor
- ``EASYINVOKE_LOG_LEVEL``: level applied to component loggers

Author: easyinvoke maintainers
"""

import logging
import os
import threading
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

ENV_MAX_WORKERS = "EASYINVOKE_MAX_WORKERS"
ENV_THREAD_PREFIX = "EASYINVOKE_THREAD_PREFIX"
ENV_LOG_LEVEL = "EASYINVOKE_LOG_LEVEL"


@dataclass(frozen=True)
class InvokerConfig:
    """
    Immutable runtime settings shared by all invokers.
    """

    max_background_workers: Optional[int] = None
    thread_name_prefix: str = "easyinvoke-background"
    log_level: str = "WARNING"

    def __post_init__(self) -> None:
        if self.max_background_workers is not None and self.max_background_workers <= 0:
            raise ValueError(
                "max_background_workers must be positive, got {0}".format(
                    self.max_background_workers
                )
            )
        if not self.thread_name_prefix.strip():
            raise ValueError("thread_name_prefix must be a non-empty string")
        if not isinstance(logging.getLevelName(self.log_level.upper()), int):
            raise ValueError("Unknown log level: {0}".format(self.log_level))

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InvokerConfig":
        """
        Build a config from environment variables, falling back to defaults.
        """
        env = os.environ if environ is None else environ
        kwargs: dict = {}

        raw_workers = env.get(ENV_MAX_WORKERS)
        if raw_workers is not None and raw_workers.strip():
            try:
                kwargs["max_background_workers"] = int(raw_workers)
            except ValueError:
                raise ValueError(
                    "{0} must be an integer, got {1!r}".format(ENV_MAX_WORKERS, raw_workers)
                ) from None

        prefix = env.get(ENV_THREAD_PREFIX)
        if prefix:
            kwargs["thread_name_prefix"] = prefix

        level = env.get(ENV_LOG_LEVEL)
        if level:
            kwargs["log_level"] = level.strip().upper()

        return cls(**kwargs)


_config_lock = threading.Lock()
_global_config: Optional[InvokerConfig] = None


def get_config() -> InvokerConfig:
    """
    Return the process-wide config, reading the environment on first use.
    """
    global _global_config

    config = _global_config
    if config is not None:
        return config
    with _config_lock:
        if _global_config is None:
            _global_config = InvokerConfig.from_env()
        return _global_config


def create_config(base: Optional[InvokerConfig] = None, **overrides: Any) -> InvokerConfig:
    """
    Create a validated config from ``base`` (or the environment) plus overrides.
    """
    return replace(base or InvokerConfig.from_env(), **overrides)


def set_config(config: InvokerConfig) -> None:
    """
    Replace the process-wide config.

    The shared background executor is shut down so the next two-phase call
    recreates it with the new settings.
    """
    global _global_config

    from .utils.concurrency import shutdown_background_executor

    with _config_lock:
        _global_config = config
    shutdown_background_executor(wait=False)


__all__ = [
    "InvokerConfig",
    "get_config",
    "create_config",
    "set_config",
    "ENV_MAX_WORKERS",
    "ENV_THREAD_PREFIX",
    "ENV_LOG_LEVEL",
]
