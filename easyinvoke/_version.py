#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Single source of truth for the easyinvoke package version.

Author: easyinvoke maintainers
"""

__version__ = "0.3.0"
