#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Logging mixin for easyinvoke components.

All component loggers live under the ``easyinvoke`` namespace. The package
logger gets a single rich console handler the first time any component logger
is created; applications that configure logging themselves can remove it with
``ModernLogger.detach_console_handler()``.

Author: easyinvoke maintainers
"""

import logging
import threading
from typing import Any, Optional, Union

from rich.console import Console
from rich.logging import RichHandler

ROOT_LOGGER_NAME = "easyinvoke"

_handler_lock = threading.Lock()
_console_handler: Optional[RichHandler] = None


def _install_console_handler() -> None:
    global _console_handler

    with _handler_lock:
        if _console_handler is not None:
            return
        handler = RichHandler(
            console=Console(stderr=True),
            rich_tracebacks=True,
            show_path=False,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
        root = logging.getLogger(ROOT_LOGGER_NAME)
        root.addHandler(handler)
        root.propagate = False
        _console_handler = handler


def _coerce_level(level: Union[int, str]) -> int:
    if isinstance(level, int):
        return level
    resolved = logging.getLevelName(str(level).strip().upper())
    if not isinstance(resolved, int):
        raise ValueError("Unknown log level: {0}".format(level))
    return resolved


class ModernLogger:
    """
    Mixin giving a component ``debug``/``info``/``warning``/``error`` helpers.
    """

    def __init__(self, name: str, level: Union[int, str, None] = None) -> None:
        _install_console_handler()
        self.logger = logging.getLogger("{0}.{1}".format(ROOT_LOGGER_NAME, name))
        if level is not None:
            self.logger.setLevel(_coerce_level(level))

    def debug(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.debug(msg, *args, **kwargs)

    def info(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.info(msg, *args, **kwargs)

    def warning(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.warning(msg, *args, **kwargs)

    def error(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.error(msg, *args, **kwargs)

    def critical(self, msg: str, *args: Any, **kwargs: Any) -> None:
        self.logger.critical(msg, *args, **kwargs)

    @staticmethod
    def detach_console_handler() -> None:
        """
        Remove the package console handler and restore propagation.
        """
        global _console_handler

        with _handler_lock:
            if _console_handler is None:
                return
            root = logging.getLogger(ROOT_LOGGER_NAME)
            root.removeHandler(_console_handler)
            root.propagate = True
            _console_handler = None
