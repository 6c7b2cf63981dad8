#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pytest bootstrap for local package imports and shared-executor cleanup.

Author: easyinvoke maintainers
"""

import sys
from pathlib import Path

import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))


@pytest.fixture(scope="session", autouse=True)
def shared_background_executor():
    """
    Stop the shared background executor and bridge loop after the run.
    """
    from easyinvoke.core.utils.concurrency import shutdown_background_executor

    yield
    shutdown_background_executor(wait=True)
