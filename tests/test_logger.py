#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Tests for component logging wiring.

Author: easyinvoke maintainers
"""

import logging

import pytest
from rich.logging import RichHandler

from easyinvoke.contracts import describe_operation
from easyinvoke.core.utils.logger import ROOT_LOGGER_NAME, ModernLogger
from easyinvoke.dispatcher import SyncMethodInvoker


class Echo:
    def echo(self, value):
        return value


class CollectingHandler(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.DEBUG)
        self.records = []

    def emit(self, record):
        self.records.append(record)


def _rich_handlers():
    return [h for h in logging.getLogger(ROOT_LOGGER_NAME).handlers if isinstance(h, RichHandler)]


def test_console_handler_installed_once():
    ModernLogger(name="first")
    ModernLogger(name="second")

    assert len(_rich_handlers()) == 1


def test_component_logger_name_and_level():
    component = ModernLogger(name="Component", level="debug")

    assert component.logger.name == "easyinvoke.Component"
    assert component.logger.level == logging.DEBUG

    with pytest.raises(ValueError):
        ModernLogger(name="Broken", level="chatty")


def test_detach_restores_propagation():
    ModernLogger(name="attach")
    ModernLogger.detach_console_handler()
    root = logging.getLogger(ROOT_LOGGER_NAME)

    try:
        assert _rich_handlers() == []
        assert root.propagate is True
    finally:
        ModernLogger(name="reattach")

    assert len(_rich_handlers()) == 1


def test_invoker_logs_preparation_at_debug_level():
    invoker = SyncMethodInvoker(describe_operation(Echo.echo))
    handler = CollectingHandler()
    previous_level = invoker.logger.level
    invoker.logger.addHandler(handler)
    invoker.logger.setLevel(logging.DEBUG)

    try:
        invoker.allocate_inputs()
        invoker.allocate_inputs()
    finally:
        invoker.logger.removeHandler(handler)
        invoker.logger.setLevel(previous_level)

    messages = [record.getMessage() for record in handler.records]
    assert messages == ["Prepared operation 'echo': 1 input(s), 0 output(s)"]
    assert handler.records[0].levelno == logging.DEBUG
