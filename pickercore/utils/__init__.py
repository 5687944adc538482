# File: utils/__init__.py
"""Pure Python utilities for the picker core.

This module contains pure functions with no dependency on engines, managers
or models. All functions here can be unit tested in isolation.

Submodules:
    - dt_utils: Calendar arithmetic, leap year rules, rule date formatting

Usage:
    from . import dt_utils
    from .dt_utils import days_in_month
"""

from . import dt_utils
