"""
Nacho Progression Formulas

Purpose
-------
Pure calculation functions shared by the progression services: leveling
curve, polynomial floor growth, level-scaled amounts and the job class
triangular progression.

Design Notes
------------
- Pure functions only (no side effects)
- No config access (all parameters passed in)
- Every result that reaches a player is an integer produced with `floor`,
  never `round`, so a displayed total always matches its parts

Usage
-----
    from nacho.modules.shared.formulas import calculate_xp_for_next_level

    xp_needed = calculate_xp_for_next_level(10, base=150, exponent=2.5)
"""

from __future__ import annotations

import math
from typing import Optional


def clamp(value: float, min_value: Optional[float] = None, max_value: Optional[float] = None) -> float:
    """
    Clamp a value into optional bounds.

    Example:
        >>> clamp(12, 0, 10)
        10
        >>> clamp(-1, min_value=0)
        0
    """
    if min_value is not None and value < min_value:
        value = min_value
    if max_value is not None and value > max_value:
        value = max_value
    return value


def calculate_xp_for_next_level(level: int, base: int = 150, exponent: float = 2.5) -> int:
    """
    XP needed to go from `level` to `level + 1`.

    Uses `floor(base * level ** exponent)`: level 100 needs about 15M XP.

    Example:
        >>> calculate_xp_for_next_level(1)
        150
        >>> calculate_xp_for_next_level(4)
        4800
    """
    return math.floor(base * math.pow(level, exponent))


def calculate_polynomial_growth(
    step: int, base: float, linear: float, quadratic: float
) -> int:
    """
    `floor(base + step * linear + step ** 2 * quadratic)`.

    Non-decreasing in `step` for `step >= 0` whenever both coefficients are
    non-negative.

    Example:
        >>> calculate_polynomial_growth(0, 12000, 4500, 35)
        12000
        >>> calculate_polynomial_growth(9, 12000, 4500, 35)
        55335
    """
    return math.floor(base + step * linear + (step**2) * quadratic)


def calculate_level_scaled(
    base: float,
    level: int,
    per_level: float,
    min_value: Optional[float] = None,
    max_value: Optional[float] = None,
) -> int:
    """
    `clamp(floor(base + level * per_level), min_value, max_value)`.

    Used for daily quest targets and rewards.

    Example:
        >>> calculate_level_scaled(10, 20, 0.5)
        20
        >>> calculate_level_scaled(1, 300, 0.02, min_value=1, max_value=5)
        5
    """
    return int(clamp(math.floor(base + level * per_level), min_value, max_value))


def calculate_triangular(n: int) -> int:
    """
    n-th triangular number, `n * (n + 1) / 2`.

    Job class power is cumulative: reaching class index n grants the
    weight of every class before it as well.

    Example:
        >>> calculate_triangular(9)
        45
    """
    if n <= 0:
        return 0
    return n * (n + 1) // 2
