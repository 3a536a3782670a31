# File: utils/math_utils.py
"""Math and calculation utilities for OpsRules.

Pure Python math functions, unit testable without any fixtures.

Functions:
    - round_half_up: Rounding that matches what users expect (2.5 → 3)
    - calculate_percentage: Whole-number progress percentage, zero-total safe
    - clamp: Bound a value to a range
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which makes 5 of 8 tasks show as 62% instead of 63%.

    Examples:
        round_half_up(62.5) → 63
        round_half_up(33.333) → 33
        round_half_up(66.666) → 67
    """
    return int(Decimal(str(value)).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def calculate_percentage(current: int, total: int) -> int:
    """Calculate whole-number progress percentage.

    Args:
        current: Completed count
        total: Total count

    Returns:
        Percentage (0-100), or 0 if total is 0

    Examples:
        calculate_percentage(1, 3) → 33
        calculate_percentage(2, 3) → 67
        calculate_percentage(5, 0) → 0  # Division by zero protection
    """
    if total <= 0:
        return 0
    return int(clamp(round_half_up(100 * current / total), 0, 100))


def clamp(value: float, min_val: float, max_val: float) -> float:
    """Clamp a value between minimum and maximum bounds.

    Examples:
        clamp(150, 0, 100) → 100
        clamp(-10, 0, 100) → 0
    """
    return max(min_val, min(value, max_val))
