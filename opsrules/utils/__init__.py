# File: utils/__init__.py
"""Pure Python utilities for OpsRules.

Submodules:
    - dt_utils: Date parsing, month arithmetic, weekday numbering
    - math_utils: Progress percentage calculations

Usage:
    from . import dt_utils
    from .math_utils import calculate_percentage
"""

from . import dt_utils, math_utils

__all__ = ["dt_utils", "math_utils"]
